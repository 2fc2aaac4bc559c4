"""buildlens CLI — Typer-based command-line interface.

Provides the ``buildlens`` command with subcommands for paging through
source revisions, diffing sources, reading (and following) build logs,
and running a network-free demo.

All output uses Rich for formatted terminal display.
"""
