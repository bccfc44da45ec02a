"""Core data structures for kflap."""

from kflap.models.config import (
    DiscoveryConfig,
    FlapConfig,
    KubeConfig,
    LogConfig,
    MetricsConfig,
    MonitorConfig,
)
from kflap.models.resources import (
    APIResource,
    APIResourceList,
    DiscoveryResult,
    ObjectIdentity,
    ObjectMeta,
    ObjectRecord,
    Observation,
    PollReport,
    ResourceTypeDescriptor,
)

__all__ = [
    "APIResource",
    "APIResourceList",
    "DiscoveryConfig",
    "DiscoveryResult",
    "FlapConfig",
    "KubeConfig",
    "LogConfig",
    "MetricsConfig",
    "MonitorConfig",
    "ObjectIdentity",
    "ObjectMeta",
    "ObjectRecord",
    "Observation",
    "PollReport",
    "ResourceTypeDescriptor",
]
