"""One poll cycle of the version-diff monitor.

A poll discovers resource types, resolves the namespace scope and lists
every (type, namespace) pair.  It never touches MonitorState: the result is
an immutable PollReport that the event loop merges itself.

Error handling:
    NamespaceEnumerationError -- changes the scan scope, so the whole poll
                                 fails (reported via ``PollReport.error``).
    DiscoveryError            -- nothing discoverable at all; whole poll fails.
    ResourceListError         -- logged, counted, and that pair is skipped.
    non-numeric resourceVersion -- object silently skipped.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Collection

from kflap.cluster.client import ClusterClient, ResourceListError
from kflap.discovery.discoverer import DiscoveryError, ResourceDiscoverer
from kflap.models.resources import (
    ObjectIdentity,
    ObjectMeta,
    Observation,
    PollReport,
    ResourceTypeDescriptor,
)
from kflap.observability.logging import get_logger
from kflap.observability.metrics import (
    list_failures_total,
    poll_duration_seconds,
    skipped_version_tokens_total,
)

_logger = get_logger("monitor.poller")

_MAX_CONCURRENT_LISTS = 8
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


class NamespaceEnumerationError(Exception):
    """Raised when the namespace list needed for an all-namespace scan fails."""


def parse_version_token(token: str) -> int | None:
    """Parse a resourceVersion as a signed 64-bit base-10 integer, or return None."""
    if not (token.isascii() and token.lstrip("+-").isdigit()):
        return None
    try:
        value = int(token, 10)
    except ValueError:
        return None
    if not _INT64_MIN <= value <= _INT64_MAX:
        return None
    return value


class Poller:
    """Runs poll cycles against a cluster client."""

    def __init__(
        self,
        client: ClusterClient,
        discoverer: ResourceDiscoverer,
        resource_filter: Collection[str] = (),
        max_concurrency: int = _MAX_CONCURRENT_LISTS,
    ) -> None:
        self._client = client
        self._discoverer = discoverer
        self._resource_filter = frozenset(resource_filter)
        self._semaphore = asyncio.Semaphore(max_concurrency)

    async def poll(self, namespace_filter: Collection[str] = ()) -> PollReport:
        """Run one poll cycle; poll-wide failures come back as ``PollReport.error``."""
        started = time.monotonic()
        try:
            descriptors = await self._discoverer.discover(self._resource_filter)
            namespaces = await self._resolve_namespaces(namespace_filter)
        except (DiscoveryError, NamespaceEnumerationError) as exc:
            _logger.warning("poll aborted", error=str(exc))
            return PollReport(error=str(exc), duration_seconds=time.monotonic() - started)

        jobs = [(desc, None) for desc in descriptors if not desc.namespaced]
        jobs += [(desc, ns) for desc in descriptors if desc.namespaced for ns in namespaces]
        results = await asyncio.gather(*(self._list_one(desc, ns) for desc, ns in jobs))

        observations: list[Observation] = []
        failures: list[str] = []
        skipped = 0
        for (desc, ns), result in zip(jobs, results, strict=True):
            if isinstance(result, ResourceListError):
                failures.append(str(result))
                continue
            for meta in result:
                obs = _to_observation(desc, ns, meta)
                if obs is None:
                    skipped += 1
                    continue
                observations.append(obs)

        duration = time.monotonic() - started
        poll_duration_seconds.observe(duration)
        if skipped:
            skipped_version_tokens_total.inc(skipped)
        _logger.info(
            "poll complete",
            types=len(descriptors),
            namespaces=len(namespaces),
            objects=len(observations),
            failures=len(failures),
            skipped_tokens=skipped,
            duration_ms=int(duration * 1000),
        )
        return PollReport(
            observations=tuple(observations),
            scanned_types=len(descriptors),
            namespaces=tuple(namespaces),
            failures=tuple(failures),
            skipped_tokens=skipped,
            duration_seconds=duration,
        )

    async def _resolve_namespaces(self, namespace_filter: Collection[str]) -> list[str]:
        if namespace_filter:
            return sorted(namespace_filter)
        try:
            return await self._client.list_namespaces()
        except Exception as exc:
            raise NamespaceEnumerationError(f"error listing namespaces: {exc}") from exc

    async def _list_one(
        self, descriptor: ResourceTypeDescriptor, namespace: str | None
    ) -> list[ObjectMeta] | ResourceListError:
        async with self._semaphore:
            try:
                return await self._client.list_objects(descriptor, namespace)
            except ResourceListError as exc:
                error = exc
            except Exception as exc:
                error = ResourceListError(descriptor, namespace, exc)
        list_failures_total.labels(resource=descriptor.plural).inc()
        _logger.debug(
            "list failed; skipping",
            resource=descriptor.plural,
            api_version=descriptor.api_version,
            namespace=namespace or "",
            error=str(error),
        )
        return error


def _to_observation(descriptor: ResourceTypeDescriptor, namespace: str | None, meta: ObjectMeta) -> Observation | None:
    version = parse_version_token(meta.resource_version)
    if version is None:
        _logger.debug(
            "skipping object with non-numeric resourceVersion",
            kind=descriptor.kind,
            namespace=namespace or "",
            name=meta.name,
        )
        return None
    identity = ObjectIdentity(
        namespace=namespace or "",
        resource_type=descriptor.kind,
        name=meta.name,
    )
    return Observation(identity=identity, version=version)
