"""Entry point for `python -m rolloutcheck`.

Usage:
    python -m rolloutcheck check deployment/web pod/migrate -n prod
"""

from __future__ import annotations

from rolloutcheck.cli import cli

cli(prog_name="rolloutcheck")
