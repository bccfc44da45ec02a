"""Ranking of tracked objects by change frequency."""

from __future__ import annotations

from collections.abc import Iterable

from kflap.models.resources import ObjectIdentity, ObjectRecord


def sort_key(record: ObjectRecord) -> tuple[int, int, ObjectIdentity]:
    """Changes descending, then version descending, then identity ascending."""
    return (-record.changes, -record.last_version, record.identity)


def rank(records: Iterable[ObjectRecord], limit: int) -> list[ObjectRecord]:
    """Return the top *limit* records.

    The identity tie-breaker makes the order total, so identical input
    always ranks identically regardless of the input's iteration order.
    """
    ranked = sorted(records, key=sort_key)
    return ranked[: max(limit, 0)]
