"""rolloutcheck command-line interface.

Exposes:
    cli -- Click group entry point (registered as ``rolloutcheck`` script).
"""

from rolloutcheck.cli.main import cli

__all__ = ["cli"]
