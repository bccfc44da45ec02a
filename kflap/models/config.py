"""Configuration data structures."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class MonitorConfig:
    """What to poll, how often, and how many rows to show."""

    resources: frozenset[str] = frozenset()  # empty = all listable types
    namespaces: frozenset[str] = frozenset()  # empty = all namespaces
    interval: int = 5
    limit: int = 20


@dataclass(frozen=True)
class DiscoveryConfig:
    """Resource discovery configuration."""

    cache: bool = False


@dataclass(frozen=True)
class KubeConfig:
    """Cluster access configuration."""

    context: str = ""


@dataclass(frozen=True)
class MetricsConfig:
    """Prometheus exposition configuration."""

    port: int = 0  # 0 = disabled


@dataclass(frozen=True)
class LogConfig:
    """Logging configuration."""

    level: str = "warning"
    file: str = ""


@dataclass(frozen=True)
class FlapConfig:
    """Top-level kflap configuration."""

    monitor: MonitorConfig = field(default_factory=MonitorConfig)
    discovery: DiscoveryConfig = field(default_factory=DiscoveryConfig)
    kube: KubeConfig = field(default_factory=KubeConfig)
    metrics: MetricsConfig = field(default_factory=MetricsConfig)
    log: LogConfig = field(default_factory=LogConfig)
