"""Integration tests for the Textual live view.

The app runs headless via ``App.run_test()``; a long poll interval keeps
the timer quiet so each test controls exactly which polls happen.
"""

from __future__ import annotations

import asyncio

from kflap.discovery.discoverer import ResourceDiscoverer
from kflap.models.config import MonitorConfig
from kflap.models.resources import ObjectIdentity, Observation, PollReport
from kflap.monitor.poller import Poller
from kflap.scheduler import PollScheduler
from kflap.ui.app import FlapMonitorApp
from tests.conftest import FakeClusterClient

_QUIET = MonitorConfig(interval=3600, limit=20)


def _make_app(client: FakeClusterClient, config: MonitorConfig = _QUIET) -> FlapMonitorApp:
    return FlapMonitorApp(Poller(client, ResourceDiscoverer(client)), config)


async def _settle(app: FlapMonitorApp, pilot) -> None:  # type: ignore[no-untyped-def]
    await app.workers.wait_for_complete()
    await pilot.pause()


class TestLifecycle:
    async def test_first_poll_runs_immediately(self, fake_cluster: FakeClusterClient) -> None:
        fake_cluster.put("pods", "a", "web", "100")
        app = _make_app(fake_cluster)
        async with app.run_test() as pilot:
            await _settle(app, pilot)
            assert fake_cluster.discovery_calls == 1
            assert app.frame_state.records is not None
            assert [r.identity.name for r in app.frame_state.records] == ["web"]
            assert app.frame_state.error is None

    async def test_loading_before_first_result(self) -> None:
        release = asyncio.Event()

        class SlowCluster(FakeClusterClient):
            async def list_namespaces(self) -> list[str]:
                await release.wait()
                return await super().list_namespaces()

        slow = SlowCluster(namespaces=("a",))
        app = _make_app(slow)
        async with app.run_test() as pilot:
            await pilot.pause()
            assert app.frame_state.loading
            release.set()
            await _settle(app, pilot)
            assert not app.frame_state.loading

    async def test_quit_with_q(self, fake_cluster: FakeClusterClient) -> None:
        app = _make_app(fake_cluster)
        async with app.run_test() as pilot:
            await _settle(app, pilot)
            await pilot.press("q")
        assert app.return_code == 0

    async def test_quit_with_ctrl_c(self, fake_cluster: FakeClusterClient) -> None:
        app = _make_app(fake_cluster)
        async with app.run_test() as pilot:
            await _settle(app, pilot)
            await pilot.press("ctrl+c")
        assert app.return_code == 0

    async def test_timer_keeps_polling(self, fake_cluster: FakeClusterClient) -> None:
        app = _make_app(fake_cluster, MonitorConfig(interval=1, limit=20))
        async with app.run_test() as pilot:
            await pilot.pause(2.5)
            await _settle(app, pilot)
            assert fake_cluster.discovery_calls >= 2

    async def test_timer_follows_scheduler_interval(self, fake_cluster: FakeClusterClient) -> None:
        app = FlapMonitorApp(Poller(fake_cluster, ResourceDiscoverer(fake_cluster)), _QUIET, scheduler=PollScheduler(1))
        async with app.run_test() as pilot:
            await pilot.pause(2.5)
            await _settle(app, pilot)
            assert fake_cluster.discovery_calls >= 2


class TestErrors:
    async def test_poll_error_shows_error_frame(self, fake_cluster: FakeClusterClient) -> None:
        fake_cluster.namespace_error = RuntimeError("Unauthorized")
        app = _make_app(fake_cluster)
        async with app.run_test() as pilot:
            await _settle(app, pilot)
            assert app.frame_state.error is not None
            assert "Unauthorized" in app.frame_state.error
            await pilot.press("q")
        assert app.return_code == 0

    async def test_error_cleared_by_next_successful_poll(self, fake_cluster: FakeClusterClient) -> None:
        fake_cluster.put("pods", "a", "web", "1")
        fake_cluster.namespace_error = RuntimeError("Unauthorized")
        app = _make_app(fake_cluster)
        async with app.run_test() as pilot:
            await _settle(app, pilot)
            assert app.frame_state.error is not None

            fake_cluster.namespace_error = None
            app.dispatch_poll()
            await _settle(app, pilot)
            assert app.frame_state.error is None
            assert app.frame_state.records is not None
            assert len(app.frame_state.records) == 1

    async def test_unexpected_poll_exception_is_not_fatal(self) -> None:
        class Broken(FakeClusterClient):
            async def preferred_resources(self):  # type: ignore[no-untyped-def]
                raise RuntimeError("discovery exploded")

        app = _make_app(Broken())
        async with app.run_test() as pilot:
            await _settle(app, pilot)
            assert app.frame_state.error == "discovery exploded"
            assert app.is_running


class TestOrdering:
    async def test_stale_result_is_discarded(self, fake_cluster: FakeClusterClient) -> None:
        identity = ObjectIdentity("a", "Pod", "web")
        app = _make_app(fake_cluster)
        async with app.run_test() as pilot:
            await _settle(app, pilot)

            slow = app.scheduler.dispatch()
            fast = app.scheduler.dispatch()
            newer = PollReport(observations=(Observation(identity, 105),))
            older = PollReport(observations=(Observation(identity, 100),))

            assert app.apply_report(fast, newer)
            assert not app.apply_report(slow, older)

            record = app.monitor_state.get(identity)
            assert record is not None
            assert record.last_version == 105
            assert record.changes == 0
            assert app.scheduler.stale_dropped == 1

    async def test_snapshot_handed_to_view_is_immutable_copy(self, fake_cluster: FakeClusterClient) -> None:
        fake_cluster.put("pods", "a", "web", "1")
        app = _make_app(fake_cluster)
        async with app.run_test() as pilot:
            await _settle(app, pilot)
            shown = app.frame_state.records

            fake_cluster.put("pods", "a", "web", "2")
            app.dispatch_poll()
            await _settle(app, pilot)

            assert shown is not None
            assert shown[0].last_version == 1
            assert app.frame_state.records is not None
            assert app.frame_state.records[0].changes == 1
