"""Textual application driving the poll loop and the live ranked view.

The app's message loop is the single owner of MonitorState.  Polls run as
Textual workers; each worker returns its PollReport to the loop as a
:class:`PollCompleted` message, and the loop merges it synchronously.
"""

from __future__ import annotations

from dataclasses import replace

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.message import Message
from textual.widgets import Static

from kflap.models.config import MonitorConfig
from kflap.models.resources import PollReport
from kflap.monitor.poller import Poller
from kflap.monitor.state import MonitorState
from kflap.observability.logging import get_logger
from kflap.observability.metrics import flapping_objects, polls_total, tracked_objects
from kflap.scheduler import PollScheduler
from kflap.ui.render import ViewState, render_view

_logger = get_logger("ui.app")


class PollCompleted(Message):
    """A poll worker finished; carries its sequence number and report."""

    def __init__(self, seq: int, report: PollReport) -> None:
        self.seq = seq
        self.report = report
        super().__init__()


class FlapMonitorApp(App[None]):
    """Live table of the most frequently changing cluster objects."""

    TITLE = "kflap"
    CSS = """
    #frame {
        padding: 0 1;
    }
    """
    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("ctrl+c", "quit", "Quit", show=False, priority=True),
    ]

    def __init__(
        self,
        poller: Poller,
        config: MonitorConfig,
        scheduler: PollScheduler | None = None,
        monitor_state: MonitorState | None = None,
    ) -> None:
        super().__init__()
        self._poller = poller
        self._monitor_config = config
        self.scheduler = scheduler or PollScheduler(config.interval)
        self.monitor_state = monitor_state or MonitorState()
        self.frame_state = ViewState(interval=config.interval, limit=config.limit)

    def compose(self) -> ComposeResult:
        yield Static(render_view(self.frame_state), id="frame")

    def on_mount(self) -> None:
        # First poll goes out immediately; the timer covers every later one.
        self.dispatch_poll()
        self.set_interval(self.scheduler.interval, self.dispatch_poll, name="poll-timer")

    def dispatch_poll(self) -> None:
        """Start a poll worker without waiting for any poll still in flight."""
        seq = self.scheduler.dispatch()
        self.run_worker(self._run_poll(seq), name=f"poll-{seq}", group="poll", exit_on_error=False)

    async def _run_poll(self, seq: int) -> None:
        try:
            report = await self._poller.poll(self._monitor_config.namespaces)
        except Exception as exc:
            _logger.error("poll raised unexpectedly", seq=seq, error=str(exc))
            report = PollReport(error=str(exc))
        self.post_message(PollCompleted(seq, report))

    def on_poll_completed(self, message: PollCompleted) -> None:
        self.apply_report(message.seq, message.report)

    def apply_report(self, seq: int, report: PollReport) -> bool:
        """Merge *report* into the monitor state and redraw; False if it was stale."""
        if not self.scheduler.accept(seq):
            polls_total.labels(outcome="stale").inc()
            return False

        if report.ok:
            self.monitor_state.apply(report.observations)
            polls_total.labels(outcome="ok").inc()
            tracked_objects.set(len(self.monitor_state))
            flapping_objects.set(self.monitor_state.flapping_count())
            self.frame_state = replace(self.frame_state, records=self.monitor_state.snapshot(), error=None)
        else:
            polls_total.labels(outcome="error").inc()
            self.frame_state = replace(self.frame_state, error=report.error)

        self.query_one("#frame", Static).update(render_view(self.frame_state))
        return True
