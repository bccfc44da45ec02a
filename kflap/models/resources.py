"""Resource, identity and poll-result data structures."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType


@dataclass(frozen=True)
class APIResource:
    """One entry of a group version's API resource list, as served by discovery."""

    name: str
    kind: str
    namespaced: bool
    verbs: tuple[str, ...] = ()


@dataclass(frozen=True)
class APIResourceList:
    """Resources served under a single group version (e.g. ``apps/v1``)."""

    group_version: str
    resources: tuple[APIResource, ...] = ()


@dataclass(frozen=True)
class DiscoveryResult:
    """Preferred-version catalogue, possibly partial.

    ``failed`` maps a group version to the error that prevented its resource
    list from being fetched.
    """

    lists: tuple[APIResourceList, ...] = ()
    failed: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "failed", MappingProxyType(dict(self.failed)))

    @property
    def partial(self) -> bool:
        return bool(self.failed)


@dataclass(frozen=True)
class ResourceTypeDescriptor:
    """A listable resource type selected for polling."""

    group: str
    version: str
    kind: str
    plural: str
    namespaced: bool

    @property
    def api_version(self) -> str:
        """Return ``group/version``, or just ``version`` for the core group."""
        return f"{self.group}/{self.version}" if self.group else self.version


@dataclass(frozen=True)
class ObjectMeta:
    """The slice of object metadata kflap needs from a list call."""

    name: str
    namespace: str
    resource_version: str


@dataclass(frozen=True, order=True)
class ObjectIdentity:
    """Unique key of a tracked object.

    ``namespace`` is empty for cluster-scoped objects.
    """

    namespace: str
    resource_type: str
    name: str

    @property
    def key(self) -> str:
        return f"{self.namespace}/{self.resource_type}/{self.name}"


@dataclass(frozen=True)
class ObjectRecord:
    """Latest observed version of an object and how many times it changed."""

    identity: ObjectIdentity
    last_version: int
    changes: int = 0


@dataclass(frozen=True)
class Observation:
    """A single object sighting with its parsed version token."""

    identity: ObjectIdentity
    version: int


@dataclass(frozen=True)
class PollReport:
    """Immutable outcome of one poll cycle.

    ``error`` is set only for poll-wide failures (namespace enumeration,
    total discovery failure); the observations are then empty and must not
    be merged.
    """

    observations: tuple[Observation, ...] = ()
    scanned_types: int = 0
    namespaces: tuple[str, ...] = ()
    failures: tuple[str, ...] = ()
    skipped_tokens: int = 0
    duration_seconds: float = 0.0
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
