"""Single-owner version/change table.

MonitorState is only ever mutated by its owner (the UI event loop) through
:meth:`MonitorState.apply`.  Readers get an immutable tuple from
:meth:`MonitorState.snapshot` and never a reference to the live table.
Records are never evicted; objects that disappear from the cluster keep
their last observed version and change count for the whole session.
"""

from __future__ import annotations

from collections.abc import Iterable

from kflap.models.resources import ObjectIdentity, ObjectRecord, Observation


class MonitorState:
    """Mapping of ObjectIdentity to ObjectRecord."""

    def __init__(self) -> None:
        self._records: dict[ObjectIdentity, ObjectRecord] = {}

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, identity: object) -> bool:
        return identity in self._records

    def get(self, identity: ObjectIdentity) -> ObjectRecord | None:
        return self._records.get(identity)

    def observe(self, identity: ObjectIdentity, version: int) -> ObjectRecord:
        """Record one sighting of *identity* at *version* and return the new record."""
        existing = self._records.get(identity)
        if existing is None:
            record = ObjectRecord(identity=identity, last_version=version)
        else:
            changes = existing.changes
            if version != existing.last_version:
                changes += 1
            record = ObjectRecord(identity=identity, last_version=version, changes=changes)
        self._records[identity] = record
        return record

    def apply(self, observations: Iterable[Observation]) -> int:
        """Merge a poll's observations; return how many records changed version."""
        changed = 0
        for obs in observations:
            before = self._records.get(obs.identity)
            after = self.observe(obs.identity, obs.version)
            if before is not None and after.changes != before.changes:
                changed += 1
        return changed

    def snapshot(self) -> tuple[ObjectRecord, ...]:
        """Return an immutable copy of every record."""
        return tuple(self._records.values())

    def flapping_count(self) -> int:
        return sum(1 for record in self._records.values() if record.changes > 0)
