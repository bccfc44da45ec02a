"""Click commands for kflap."""

from __future__ import annotations

import asyncio
import dataclasses

import click

from kflap import __version__
from kflap.app import StartupError, run
from kflap.config import load_config, parse_csv
from kflap.models.config import FlapConfig


@click.group()
@click.version_option(__version__, prog_name="kflap")
def cli() -> None:
    """Kubernetes resource flapping detector.

    Monitor Kubernetes resources for excessive updates by tracking
    resourceVersion changes.
    """


@cli.command()
@click.option("-r", "--resources", default=None, help="Comma-delimited list of resource types to monitor (default: all)")
@click.option("-n", "--namespaces", default=None, help="Comma-delimited list of namespaces to monitor (default: all)")
@click.option("-i", "--interval", type=click.IntRange(min=1), default=None, help="Polling interval in seconds [default: 5]")
@click.option("-l", "--limit", type=click.IntRange(min=1), default=None, help="Number of table rows to display [default: 20]")
@click.option("--context", default=None, help="Kubeconfig context to use instead of the current one")
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Log level [default: warning]",
)
@click.option("--log-file", type=click.Path(dir_okay=False), default=None, help="Append JSON logs to this file")
@click.option("--metrics-port", type=click.IntRange(min=0, max=65535), default=None, help="Serve Prometheus metrics on this port (0 disables)")
@click.option("--cache-discovery/--no-cache-discovery", default=None, help="Discover resource types once instead of every poll")
def resources(
    resources: str | None,
    namespaces: str | None,
    interval: int | None,
    limit: int | None,
    context: str | None,
    log_level: str | None,
    log_file: str | None,
    metrics_port: int | None,
    cache_discovery: bool | None,
) -> None:
    """Monitor resource versions in real-time.

    Display a live table of Kubernetes resources and their resourceVersion
    changes.
    """
    try:
        base = load_config()
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc

    config = apply_overrides(
        base,
        resources=resources,
        namespaces=namespaces,
        interval=interval,
        limit=limit,
        context=context,
        log_level=log_level,
        log_file=log_file,
        metrics_port=metrics_port,
        cache_discovery=cache_discovery,
    )

    try:
        asyncio.run(run(config))
    except StartupError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc


def apply_overrides(
    base: FlapConfig,
    *,
    resources: str | None = None,
    namespaces: str | None = None,
    interval: int | None = None,
    limit: int | None = None,
    context: str | None = None,
    log_level: str | None = None,
    log_file: str | None = None,
    metrics_port: int | None = None,
    cache_discovery: bool | None = None,
) -> FlapConfig:
    """Return *base* with every flag that was actually given applied on top."""
    monitor = base.monitor
    if resources is not None:
        monitor = dataclasses.replace(monitor, resources=parse_csv(resources))
    if namespaces is not None:
        monitor = dataclasses.replace(monitor, namespaces=parse_csv(namespaces))
    if interval is not None:
        monitor = dataclasses.replace(monitor, interval=interval)
    if limit is not None:
        monitor = dataclasses.replace(monitor, limit=limit)

    log = base.log
    if log_level is not None:
        log = dataclasses.replace(log, level=log_level.lower())
    if log_file is not None:
        log = dataclasses.replace(log, file=log_file)

    return dataclasses.replace(
        base,
        monitor=monitor,
        log=log,
        kube=dataclasses.replace(base.kube, context=context) if context is not None else base.kube,
        metrics=dataclasses.replace(base.metrics, port=metrics_port) if metrics_port is not None else base.metrics,
        discovery=(
            dataclasses.replace(base.discovery, cache=cache_discovery) if cache_discovery is not None else base.discovery
        ),
    )
