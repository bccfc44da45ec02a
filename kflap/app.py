"""Application bootstrap for kflap.

Startup order: logging → metrics → cluster client → discoverer → poller
              → live view
The cluster client is closed after the view exits, whether it exited
cleanly or not.
"""

from __future__ import annotations

from contextlib import ExitStack

from kflap.cluster.client import ClientInitializationError, ClusterClient, KubernetesClusterClient
from kflap.discovery.discoverer import ResourceDiscoverer
from kflap.models.config import FlapConfig
from kflap.monitor.poller import Poller
from kflap.observability.logging import get_logger, setup_logging
from kflap.observability.metrics import start_metrics_server
from kflap.ui.app import FlapMonitorApp


class StartupError(Exception):
    """Raised when kflap cannot start; the CLI turns it into a non-zero exit."""

    def __init__(self, component: str, cause: Exception) -> None:
        super().__init__(str(cause))
        self.component = component
        self.cause = cause


def build_app(client: ClusterClient, config: FlapConfig) -> FlapMonitorApp:
    """Wire discoverer, poller and view around an already-connected client."""
    discoverer = ResourceDiscoverer(client, cache=config.discovery.cache)
    poller = Poller(client, discoverer, resource_filter=config.monitor.resources)
    return FlapMonitorApp(poller, config.monitor)


async def run(config: FlapConfig) -> None:
    """Run the live monitor until the user quits.

    Raises:
        StartupError -- the cluster client or the metrics server failed to start.
    """
    with ExitStack() as stack:
        log_file = stack.enter_context(open(config.log.file, "a")) if config.log.file else None  # noqa: SIM115
        setup_logging(config.log.level, log_file)
        # Back to stderr before the log file is closed.
        stack.callback(setup_logging, config.log.level)
        log = get_logger("app")
        log.info("kflap starting", version=_kflap_version())

        try:
            if start_metrics_server(config.metrics.port):
                log.info("metrics server started", port=config.metrics.port)
        except OSError as exc:
            raise StartupError("metrics", exc) from exc

        try:
            client = await KubernetesClusterClient.connect(context=config.kube.context)
        except ClientInitializationError as exc:
            log.critical("fatal startup error", component="k8s_client", error=str(exc))
            raise StartupError("k8s_client", exc) from exc

        # The full-screen view owns the terminal from here on.
        setup_logging(config.log.level, log_file, quiet=True)
        try:
            await build_app(client, config).run_async()
        finally:
            await client.close()
            log.info("kflap stopped")


def _kflap_version() -> str:
    from kflap import __version__

    return __version__
