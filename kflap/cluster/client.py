"""Cluster client abstraction and its kubernetes-asyncio implementation.

The monitor only needs four things from a cluster: ambient credentials,
the namespace list, the preferred-version discovery catalogue, and plain
list calls returning object metadata.  Everything else about the Kubernetes
API stays behind :class:`ClusterClient`.
"""

from __future__ import annotations

import asyncio
import re
from abc import ABC, abstractmethod
from typing import Any

import structlog

from kflap.models.resources import (
    APIResource,
    APIResourceList,
    DiscoveryResult,
    ObjectMeta,
    ResourceTypeDescriptor,
)

_log = structlog.get_logger(component="cluster.client")

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


class ClusterClientError(Exception):
    """Base class for cluster client failures."""


class ClientInitializationError(ClusterClientError):
    """Raised when credentials or the API endpoint cannot be loaded."""


class ResourceListError(ClusterClientError):
    """Raised when a list call for one resource type (and namespace) fails."""

    def __init__(self, descriptor: ResourceTypeDescriptor, namespace: str | None, cause: Exception | str) -> None:
        where = f" in namespace {namespace!r}" if namespace else ""
        super().__init__(f"listing {descriptor.plural}.{descriptor.api_version}{where} failed: {cause}")
        self.descriptor = descriptor
        self.namespace = namespace


class ClusterClient(ABC):
    """Everything kflap reads from a cluster."""

    @abstractmethod
    async def list_namespaces(self) -> list[str]:
        """Return the names of all namespaces."""

    @abstractmethod
    async def preferred_resources(self) -> DiscoveryResult:
        """Return the catalogue: each resource once per group, from its preferred version when served there.

        Must not raise for a single group's failure: failed group versions are
        reported in :attr:`DiscoveryResult.failed` instead.
        """

    @abstractmethod
    async def list_objects(self, descriptor: ResourceTypeDescriptor, namespace: str | None = None) -> list[ObjectMeta]:
        """List objects of *descriptor*, within *namespace* when given.

        Raises:
            ResourceListError -- the list call failed.
        """

    async def close(self) -> None:  # noqa: B027
        """Release connections held by the client."""


def kind_to_snake(kind: str) -> str:
    """Convert a Kind such as ``PersistentVolumeClaim`` to ``persistent_volume_claim``."""
    return _CAMEL_BOUNDARY.sub("_", kind).lower()


class KubernetesClusterClient(ClusterClient):
    """ClusterClient backed by a kubernetes-asyncio ``ApiClient``.

    Core (``v1``) types are listed through the typed ``CoreV1Api`` methods;
    every grouped type goes through ``CustomObjectsApi``, which serves any
    ``/apis/{group}/{version}`` path.
    """

    def __init__(self, api_client: Any) -> None:
        self._api_client = api_client

    @classmethod
    async def connect(cls, context: str = "") -> KubernetesClusterClient:
        """Load in-cluster config or kubeconfig and build a client.

        An explicit *context* always selects kubeconfig.

        Raises:
            ClientInitializationError -- no usable configuration was found.
        """
        try:
            import kubernetes_asyncio.config as k8s_config  # type: ignore[import-untyped]
            from kubernetes_asyncio import client as k8s_client  # type: ignore[import-untyped]

            if context:
                await k8s_config.load_kube_config(context=context)
                _log.info("k8s client configured from kubeconfig", context=context)
            else:
                try:
                    k8s_config.load_incluster_config()
                    _log.info("k8s client configured from in-cluster service account")
                except k8s_config.ConfigException:
                    await k8s_config.load_kube_config()
                    _log.info("k8s client configured from kubeconfig")

            return cls(k8s_client.ApiClient())
        except Exception as exc:
            raise ClientInitializationError(f"error loading kubeconfig: {exc}") from exc

    async def close(self) -> None:
        try:
            await self._api_client.close()
        except Exception as exc:
            _log.debug("k8s client close raised (non-fatal)", error=str(exc))

    # ------------------------------------------------------------------
    # Namespaces
    # ------------------------------------------------------------------

    async def list_namespaces(self) -> list[str]:
        from kubernetes_asyncio import client as k8s_client

        response = await k8s_client.CoreV1Api(self._api_client).list_namespace()
        return [item.metadata.name for item in response.items]

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    async def preferred_resources(self) -> DiscoveryResult:
        from kubernetes_asyncio import client as k8s_client

        lists: list[APIResourceList] = []
        failed: dict[str, str] = {}

        try:
            core = await k8s_client.CoreV1Api(self._api_client).get_api_resources()
            lists.append(_to_resource_list(core))
        except Exception as exc:
            failed["v1"] = str(exc)

        try:
            group_list = await k8s_client.ApisApi(self._api_client).get_api_versions()
        except Exception as exc:
            failed["apis"] = str(exc)
            return DiscoveryResult(lists=tuple(lists), failed=failed)

        custom = k8s_client.CustomObjectsApi(self._api_client)
        plans = [(group.name, _served_versions(group)) for group in group_list.groups or []]
        fetches = [(name, version) for name, versions in plans for version in versions]
        responses = iter(
            await asyncio.gather(
                *(custom.get_api_resources(name, version.version) for name, version in fetches),
                return_exceptions=True,
            )
        )

        # Preferred version first; older versions only add resources it does not serve.
        for _name, versions in plans:
            seen: set[str] = set()
            for version in versions:
                response = next(responses)
                if isinstance(response, BaseException):
                    failed[version.group_version] = str(response)
                    continue
                served = _to_resource_list(response, version.group_version)
                fresh = tuple(res for res in served.resources if res.name not in seen)
                seen.update(res.name for res in fresh)
                if fresh:
                    lists.append(APIResourceList(group_version=served.group_version, resources=fresh))

        return DiscoveryResult(lists=tuple(lists), failed=failed)

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    async def list_objects(self, descriptor: ResourceTypeDescriptor, namespace: str | None = None) -> list[ObjectMeta]:
        try:
            if descriptor.group:
                items = await self._list_grouped(descriptor, namespace)
            else:
                items = await self._list_core(descriptor, namespace)
        except ResourceListError:
            raise
        except Exception as exc:
            raise ResourceListError(descriptor, namespace, exc) from exc
        return items

    async def _list_core(self, descriptor: ResourceTypeDescriptor, namespace: str | None) -> list[ObjectMeta]:
        from kubernetes_asyncio import client as k8s_client

        api = k8s_client.CoreV1Api(self._api_client)
        snake = kind_to_snake(descriptor.kind)
        if namespace is not None:
            method = getattr(api, f"list_namespaced_{snake}", None)
            args: tuple[str, ...] = (namespace,)
        else:
            method = getattr(api, f"list_{snake}", None)
            args = ()
        if method is None:
            raise ResourceListError(descriptor, namespace, "no typed list method for core kind")

        response = await method(*args)
        return [
            ObjectMeta(
                name=item.metadata.name or "",
                namespace=item.metadata.namespace or "",
                resource_version=item.metadata.resource_version or "",
            )
            for item in response.items
        ]

    async def _list_grouped(self, descriptor: ResourceTypeDescriptor, namespace: str | None) -> list[ObjectMeta]:
        from kubernetes_asyncio import client as k8s_client

        api = k8s_client.CustomObjectsApi(self._api_client)
        if namespace is not None:
            response = await api.list_namespaced_custom_object(
                descriptor.group, descriptor.version, namespace, descriptor.plural
            )
        else:
            response = await api.list_cluster_custom_object(descriptor.group, descriptor.version, descriptor.plural)
        return [_meta_from_dict(item) for item in response.get("items", [])]


def _served_versions(group: Any) -> list[Any]:
    """Return a V1APIGroup's served versions, preferred version first."""
    versions = list(group.versions or [])
    preferred = group.preferred_version or (versions[0] if versions else None)
    if preferred is None:
        return []
    rest = [v for v in versions if v.group_version != preferred.group_version]
    return [preferred, *rest]


def _to_resource_list(response: Any, group_version: str | None = None) -> APIResourceList:
    """Convert a V1APIResourceList model into the client-neutral form."""
    return APIResourceList(
        group_version=group_version or response.group_version,
        resources=tuple(
            APIResource(
                name=res.name,
                kind=res.kind,
                namespaced=bool(res.namespaced),
                verbs=tuple(res.verbs or ()),
            )
            for res in response.resources or []
        ),
    )


def _meta_from_dict(item: dict[str, Any]) -> ObjectMeta:
    metadata = item.get("metadata", {}) if isinstance(item, dict) else {}
    return ObjectMeta(
        name=str(metadata.get("name", "")),
        namespace=str(metadata.get("namespace", "")),
        resource_version=str(metadata.get("resourceVersion", "")),
    )
