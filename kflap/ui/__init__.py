"""Live ranked presentation for kflap.

Submodules:
    ranking -- Sort and truncate snapshot records.
    render  -- Build one frame (loading, error or table) as a rich Text.
    app     -- Textual application: poll timer, workers, key bindings.
"""

from kflap.ui.ranking import rank
from kflap.ui.render import ViewState, render_view, truncate

__all__ = [
    "ViewState",
    "rank",
    "render_view",
    "truncate",
]
