"""Tests for the application bootstrap in kflap.app."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from kflap.app import StartupError, build_app, run
from kflap.cluster.client import ClientInitializationError
from kflap.models.config import DiscoveryConfig, FlapConfig, LogConfig, MonitorConfig
from kflap.ui.app import FlapMonitorApp
from tests.conftest import FakeClusterClient


class TestBuildApp:
    def test_wires_monitor_config(self) -> None:
        config = FlapConfig(monitor=MonitorConfig(interval=9, limit=3), discovery=DiscoveryConfig(cache=True))
        app = build_app(FakeClusterClient(), config)
        assert isinstance(app, FlapMonitorApp)
        assert app.scheduler.interval == 9
        assert app.frame_state.limit == 3


class TestRun:
    async def test_client_failure_raises_startup_error(self) -> None:
        failure = ClientInitializationError("error loading kubeconfig: no configuration found")
        with patch("kflap.app.KubernetesClusterClient.connect", new=AsyncMock(side_effect=failure)):
            with pytest.raises(StartupError) as excinfo:
                await run(FlapConfig())
        assert excinfo.value.component == "k8s_client"
        assert "no configuration found" in str(excinfo.value)

    async def test_client_closed_after_view_exits(self, tmp_path: Path) -> None:
        client = FakeClusterClient()
        view = MagicMock()
        view.run_async = AsyncMock()
        log_file = tmp_path / "kflap.log"
        config = FlapConfig(log=LogConfig(level="info", file=str(log_file)))

        with (
            patch("kflap.app.KubernetesClusterClient.connect", new=AsyncMock(return_value=client)),
            patch("kflap.app.build_app", return_value=view),
        ):
            await run(config)

        view.run_async.assert_awaited_once()
        assert client.closed
        assert "kflap starting" in log_file.read_text()

    async def test_client_closed_when_view_crashes(self) -> None:
        client = FakeClusterClient()
        view = MagicMock()
        view.run_async = AsyncMock(side_effect=RuntimeError("terminal gone"))

        with (
            patch("kflap.app.KubernetesClusterClient.connect", new=AsyncMock(return_value=client)),
            patch("kflap.app.build_app", return_value=view),
        ):
            with pytest.raises(RuntimeError, match="terminal gone"):
                await run(FlapConfig())

        assert client.closed
