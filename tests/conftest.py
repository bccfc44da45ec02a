"""Shared fixtures for kflap tests.

Provides an in-memory ClusterClient with a small, realistic discovery
catalogue so discovery, polling and the live view can be exercised without
a real Kubernetes cluster.
"""

from __future__ import annotations

import pytest

from kflap.cluster.client import ClusterClient, ResourceListError
from kflap.discovery.discoverer import ResourceDiscoverer
from kflap.models.resources import (
    APIResource,
    APIResourceList,
    DiscoveryResult,
    ObjectMeta,
    ResourceTypeDescriptor,
)
from kflap.monitor.poller import Poller

_DEFAULT_VERBS = ("create", "delete", "get", "list", "patch", "update", "watch")


# ---------------------------------------------------------------------------
# Factory helpers
# ---------------------------------------------------------------------------


def api_resource(
    name: str,
    kind: str,
    namespaced: bool = True,
    verbs: tuple[str, ...] = _DEFAULT_VERBS,
) -> APIResource:
    """Create an APIResource with list-capable verbs by default."""
    return APIResource(name=name, kind=kind, namespaced=namespaced, verbs=verbs)


def standard_catalogue() -> tuple[APIResourceList, ...]:
    """A trimmed-down preferred-version catalogue of a real cluster."""
    return (
        APIResourceList(
            group_version="v1",
            resources=(
                api_resource("pods", "Pod"),
                api_resource("pods/log", "Pod", verbs=("get",)),
                api_resource("pods/status", "Pod", verbs=("get", "patch", "update")),
                api_resource("services", "Service"),
                api_resource("configmaps", "ConfigMap"),
                api_resource("endpoints", "Endpoints"),
                api_resource("componentstatuses", "ComponentStatus", namespaced=False, verbs=("get", "list")),
                api_resource("bindings", "Binding", verbs=("create",)),
                api_resource("namespaces", "Namespace", namespaced=False),
                api_resource("nodes", "Node", namespaced=False),
            ),
        ),
        APIResourceList(
            group_version="apps/v1",
            resources=(
                api_resource("deployments", "Deployment"),
                api_resource("deployments/scale", "Scale", verbs=("get", "patch", "update")),
                api_resource("replicasets", "ReplicaSet"),
            ),
        ),
        APIResourceList(
            group_version="discovery.k8s.io/v1",
            resources=(api_resource("endpointslices", "EndpointSlice"),),
        ),
        APIResourceList(
            group_version="authorization.k8s.io/v1",
            resources=(
                api_resource("selfsubjectaccessreviews", "SelfSubjectAccessReview", namespaced=False, verbs=("create",)),
            ),
        ),
    )


def meta(name: str, version: str, namespace: str = "") -> ObjectMeta:
    return ObjectMeta(name=name, namespace=namespace, resource_version=version)


class FakeClusterClient(ClusterClient):
    """In-memory cluster.

    ``objects`` is keyed by ``(plural, namespace)``; cluster-scoped types use
    ``None`` as the namespace.
    """

    def __init__(
        self,
        catalogue: tuple[APIResourceList, ...] | None = None,
        namespaces: tuple[str, ...] = ("default",),
        discovery_failed: dict[str, str] | None = None,
    ) -> None:
        self.catalogue = standard_catalogue() if catalogue is None else catalogue
        self.namespaces = list(namespaces)
        self.discovery_failed = dict(discovery_failed or {})
        self.objects: dict[tuple[str, str | None], list[ObjectMeta]] = {}
        self.failing: set[str] = set()
        self.namespace_error: Exception | None = None
        self.list_calls: list[tuple[str, str | None]] = []
        self.namespace_calls = 0
        self.discovery_calls = 0
        self.closed = False

    def put(self, plural: str, namespace: str | None, name: str, version: str) -> None:
        """Create or update an object's resourceVersion."""
        items = self.objects.setdefault((plural, namespace), [])
        items[:] = [item for item in items if item.name != name]
        items.append(meta(name, version, namespace or ""))

    async def list_namespaces(self) -> list[str]:
        self.namespace_calls += 1
        if self.namespace_error is not None:
            raise self.namespace_error
        return list(self.namespaces)

    async def preferred_resources(self) -> DiscoveryResult:
        self.discovery_calls += 1
        return DiscoveryResult(lists=self.catalogue, failed=dict(self.discovery_failed))

    async def list_objects(self, descriptor: ResourceTypeDescriptor, namespace: str | None = None) -> list[ObjectMeta]:
        self.list_calls.append((descriptor.plural, namespace))
        if descriptor.plural in self.failing:
            raise ResourceListError(descriptor, namespace, "the server is currently unable to handle the request")
        return list(self.objects.get((descriptor.plural, namespace), []))

    async def close(self) -> None:
        self.closed = True


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_cluster() -> FakeClusterClient:
    return FakeClusterClient(namespaces=("a", "b"))


@pytest.fixture
def discoverer(fake_cluster: FakeClusterClient) -> ResourceDiscoverer:
    return ResourceDiscoverer(fake_cluster)


@pytest.fixture
def poller(fake_cluster: FakeClusterClient, discoverer: ResourceDiscoverer) -> Poller:
    return Poller(fake_cluster, discoverer)
