"""Discovery of pollable resource types.

Filtering order for each entry of the preferred-version catalogue:
subresources, deprecated aliases, non-listable types, then the optional
user allow-list (exact, case-sensitive match on plural name or kind).
"""

from __future__ import annotations

from collections.abc import Collection

from kflap.cluster.client import ClusterClient
from kflap.discovery.deprecations import DeprecationPolicy
from kflap.models.resources import APIResource, DiscoveryResult, ResourceTypeDescriptor
from kflap.observability.logging import get_logger
from kflap.observability.metrics import discovery_failures_total

_logger = get_logger("discovery")


class DiscoveryError(Exception):
    """Raised when no part of the discovery catalogue could be fetched."""


def parse_group_version(group_version: str) -> tuple[str, str]:
    """Split ``apps/v1`` into ``("apps", "v1")`` and ``v1`` into ``("", "v1")``.

    Raises:
        ValueError -- the string has more than one ``/`` or an empty part.
    """
    parts = group_version.split("/")
    if len(parts) == 1 and parts[0]:
        return "", parts[0]
    if len(parts) == 2 and all(parts):
        return parts[0], parts[1]
    raise ValueError(f"unexpected group version: {group_version!r}")


def _is_subresource(resource: APIResource) -> bool:
    return "/" in resource.name


def _is_listable(resource: APIResource) -> bool:
    return "list" in resource.verbs


class ResourceDiscoverer:
    """Produces the set of resource types the monitor polls.

    Stateless unless *cache* is set, in which case the first complete
    (non-partial) result is reused for the lifetime of the discoverer.
    """

    def __init__(
        self,
        client: ClusterClient,
        policy: DeprecationPolicy | None = None,
        cache: bool = False,
    ) -> None:
        self._client = client
        self._policy = policy or DeprecationPolicy()
        self._cache_enabled = cache
        self._cached: tuple[ResourceTypeDescriptor, ...] | None = None
        self._cached_filter: frozenset[str] | None = None

    async def discover(self, resource_filter: Collection[str] = ()) -> list[ResourceTypeDescriptor]:
        """Return every listable resource type matching *resource_filter*.

        A partial catalogue still yields every type that was discovered.

        Raises:
            DiscoveryError -- the catalogue was entirely unavailable.
        """
        wanted = frozenset(resource_filter)
        if self._cached is not None and self._cached_filter == wanted:
            return list(self._cached)

        result = await self._client.preferred_resources()
        if result.failed:
            discovery_failures_total.inc(len(result.failed))
            _logger.warning(
                "partial discovery",
                failed_group_versions=sorted(result.failed),
                discovered_group_versions=len(result.lists),
            )
        if not result.lists and result.failed:
            first = sorted(result.failed)[0]
            raise DiscoveryError(f"error discovering resources: {first}: {result.failed[first]}")

        descriptors = self.select(result, wanted)
        _logger.debug("discovery complete", types=len(descriptors), partial=result.partial)

        if self._cache_enabled and not result.partial:
            self._cached = tuple(descriptors)
            self._cached_filter = wanted
        return descriptors

    def select(self, result: DiscoveryResult, wanted: frozenset[str] = frozenset()) -> list[ResourceTypeDescriptor]:
        """Apply all filters to an already-fetched catalogue."""
        descriptors: list[ResourceTypeDescriptor] = []
        for resource_list in result.lists:
            try:
                group, version = parse_group_version(resource_list.group_version)
            except ValueError:
                _logger.debug("skipping unparseable group version", group_version=resource_list.group_version)
                continue

            for resource in resource_list.resources:
                if _is_subresource(resource):
                    continue
                if self._policy.is_excluded(resource_list.group_version, resource.name):
                    continue
                if not _is_listable(resource):
                    continue
                if wanted and resource.name not in wanted and resource.kind not in wanted:
                    continue
                descriptors.append(
                    ResourceTypeDescriptor(
                        group=group,
                        version=version,
                        kind=resource.kind,
                        plural=resource.name,
                        namespaced=resource.namespaced,
                    )
                )
        return descriptors
