"""pubforge CLI: Typer-based command-line interface.

Provides the ``pubforge`` command with subcommands for publishing,
creating and resuming dry runs, and inspecting snapshots and targets.

All output uses Rich for formatted terminal display.
"""
