"""Command line utilities for strain-osu."""

from strain_osu.cli.app import main, run_cli

__all__ = ["main", "run_cli"]
