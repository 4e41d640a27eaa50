"""vidledger CLI — Typer-based command-line interface.

Provides the ``vidledger`` command with subcommands for running the demo
scenario, replaying scripted operations, and listing error codes.

All output uses Rich for formatted terminal display.
"""
