"""Version-diff monitor for kflap.

Submodules:
    state   -- MonitorState: single-owner version/change table.
    poller  -- Poller: one poll cycle, returning an immutable PollReport.
"""

from kflap.monitor.poller import NamespaceEnumerationError, Poller, parse_version_token
from kflap.monitor.state import MonitorState

__all__ = [
    "MonitorState",
    "NamespaceEnumerationError",
    "Poller",
    "parse_version_token",
]
