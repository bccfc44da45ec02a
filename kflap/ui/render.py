"""Frame rendering.

Each frame is rebuilt from scratch from a :class:`ViewState`; nothing about
the previous frame is reused.
"""

from __future__ import annotations

from dataclasses import dataclass

from rich.style import Style
from rich.text import Text

from kflap.models.resources import ObjectRecord
from kflap.ui.ranking import rank

NAME_WIDTH = 30
TYPE_WIDTH = 25
NAMESPACE_WIDTH = 20
VERSION_WIDTH = 20
CHANGES_WIDTH = 10

CLUSTER_PLACEHOLDER = "<cluster>"
TITLE = "Kubernetes Resource Monitor"
QUIT_HINT = "Press 'q' to quit."

TITLE_STYLE = Style(bold=True)
HEADER_STYLE = Style(bold=True, color="color(12)")
CHANGES_STYLE = Style(bold=True, color="color(9)")


@dataclass(frozen=True)
class ViewState:
    """Everything needed to render one frame.

    ``records`` is None until the first poll result has been applied.
    """

    interval: int
    limit: int
    records: tuple[ObjectRecord, ...] | None = None
    error: str | None = None

    @property
    def loading(self) -> bool:
        return self.records is None and self.error is None


def truncate(value: str, width: int) -> str:
    """Cut *value* to *width* characters, ending in ``...`` when there is room."""
    if len(value) <= width:
        return value
    if width <= 3:
        return value[:width]
    return value[: width - 3] + "..."


def _header() -> str:
    return (
        f"{'NAME':<{NAME_WIDTH}} "
        f"{'TYPE':<{TYPE_WIDTH}} "
        f"{'NAMESPACE':<{NAMESPACE_WIDTH}} "
        f"{'RESOURCE VERSION':<{VERSION_WIDTH}} "
        f"{'CHANGES':<{CHANGES_WIDTH}}"
    )


def format_row(record: ObjectRecord) -> tuple[str, str]:
    """Return the fixed-width row body and the CHANGES cell for *record*."""
    identity = record.identity
    namespace = identity.namespace or CLUSTER_PLACEHOLDER
    body = (
        f"{truncate(identity.name, NAME_WIDTH):<{NAME_WIDTH}} "
        f"{truncate(identity.resource_type, TYPE_WIDTH):<{TYPE_WIDTH}} "
        f"{truncate(namespace, NAMESPACE_WIDTH):<{NAMESPACE_WIDTH}} "
        f"{truncate(str(record.last_version), VERSION_WIDTH):<{VERSION_WIDTH}} "
    )
    changes = f"{truncate(str(record.changes), CHANGES_WIDTH):<{CHANGES_WIDTH}}"
    return body, changes


def render_view(view: ViewState) -> Text:
    """Render the loading, error, or ranked-table frame for *view*."""
    if view.error is not None:
        return Text(f"Error: {view.error}\n\n{QUIT_HINT}\n")
    if view.records is None:
        return Text("Loading...\n")

    rows = rank(view.records, view.limit)
    header = _header()

    text = Text()
    text.append(TITLE, style=TITLE_STYLE)
    text.append("\n\n")
    text.append(header, style=HEADER_STYLE)
    text.append("\n")
    text.append("─" * len(header), style=HEADER_STYLE)
    text.append("\n")
    for record in rows:
        body, changes = format_row(record)
        text.append(body)
        text.append(changes, style=CHANGES_STYLE if record.changes > 0 else None)
        text.append("\n")

    text.append("\n")
    text.append(f"Showing top {len(rows)} resources sorted by changes(DESC), resourceVersion(DESC)\n")
    text.append(f"Polling interval: {view.interval} seconds\n")
    text.append(f"\n{QUIT_HINT}\n")
    return text
