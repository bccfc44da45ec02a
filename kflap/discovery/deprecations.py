"""Resources whose replacement lives under a different resource name.

Listing them still works but makes the API server emit deprecation
warnings, and their objects duplicate the replacement's objects (e.g. v1
``endpoints`` vs ``discovery.k8s.io/v1`` ``endpointslices``).
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

DEFAULT_DEPRECATED_RESOURCES: Mapping[str, frozenset[str]] = {
    "v1": frozenset({"endpoints", "componentstatuses"}),
}


class DeprecationPolicy:
    """Lookup table keyed by group version, holding excluded resource names."""

    def __init__(self, table: Mapping[str, Iterable[str]] = DEFAULT_DEPRECATED_RESOURCES) -> None:
        self._table = {gv: frozenset(names) for gv, names in table.items()}

    def is_excluded(self, group_version: str, resource: str) -> bool:
        return resource in self._table.get(group_version, frozenset())

    def extended(self, group_version: str, *resources: str) -> DeprecationPolicy:
        """Return a new policy with *resources* added under *group_version*."""
        table = dict(self._table)
        table[group_version] = table.get(group_version, frozenset()) | frozenset(resources)
        return DeprecationPolicy(table)
