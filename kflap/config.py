"""Configuration loading from environment variables."""

from __future__ import annotations

import os

from kflap.models.config import (
    DiscoveryConfig,
    FlapConfig,
    KubeConfig,
    LogConfig,
    MetricsConfig,
    MonitorConfig,
)


def _env(key: str, default: str = "") -> str:
    return os.environ.get(f"KFLAP_{key}", default)


def _env_bool(key: str, default: bool = False) -> bool:
    val = _env(key, str(default).lower())
    return val.lower() in ("true", "1", "yes")


def _env_int(key: str, default: int, min_val: int | None = None, max_val: int | None = None) -> int:
    val = int(_env(key, str(default)))
    if min_val is not None:
        val = max(val, min_val)
    if max_val is not None:
        val = min(val, max_val)
    return val


def _validate_log_level(value: str) -> str:
    valid = {"debug", "info", "warning", "error"}
    if value.lower() not in valid:
        raise ValueError(f"Invalid log level: {value}. Must be one of {valid}")
    return value.lower()


def parse_csv(value: str | None) -> frozenset[str]:
    """Split a comma-delimited flag value into a set of trimmed, non-empty items."""
    if not value:
        return frozenset()
    return frozenset(item.strip() for item in value.split(",") if item.strip())


def load_config() -> FlapConfig:
    """Load configuration from KFLAP_* environment variables."""
    return FlapConfig(
        monitor=MonitorConfig(
            resources=parse_csv(_env("RESOURCES")),
            namespaces=parse_csv(_env("NAMESPACES")),
            interval=_env_int("INTERVAL", 5, min_val=1, max_val=3600),
            limit=_env_int("LIMIT", 20, min_val=1, max_val=1000),
        ),
        discovery=DiscoveryConfig(
            cache=_env_bool("CACHE_DISCOVERY", False),
        ),
        kube=KubeConfig(
            context=_env("KUBE_CONTEXT", ""),
        ),
        metrics=MetricsConfig(
            port=_env_int("METRICS_PORT", 0, min_val=0, max_val=65535),
        ),
        log=LogConfig(
            level=_validate_log_level(_env("LOG_LEVEL", "warning")),
            file=_env("LOG_FILE", ""),
        ),
    )
