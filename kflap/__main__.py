"""Entry point for `python -m kflap`.

Usage:
    python -m kflap resources
    python -m kflap resources -r pods,deployments -n default -i 2
"""

from __future__ import annotations

from kflap.cli import cli

cli()
