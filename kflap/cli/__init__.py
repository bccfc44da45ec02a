"""kflap command-line interface.

Exposes:
    cli -- Click group entry point (registered as ``kflap`` script).
"""

from kflap.cli.main import cli

__all__ = ["cli"]
