"""Cluster access for kflap.

Exposes:
    ClusterClient            -- ABC the discoverer and poller depend on.
    KubernetesClusterClient  -- kubernetes-asyncio implementation.
    ClientInitializationError, ResourceListError -- client error taxonomy.
"""

from kflap.cluster.client import (
    ClientInitializationError,
    ClusterClient,
    ClusterClientError,
    KubernetesClusterClient,
    ResourceListError,
)

__all__ = [
    "ClientInitializationError",
    "ClusterClient",
    "ClusterClientError",
    "KubernetesClusterClient",
    "ResourceListError",
]
