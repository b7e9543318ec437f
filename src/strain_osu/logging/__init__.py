"""Logging utilities for strain-osu."""

from strain_osu.logging.config import JsonFormatter, setup_logging

__all__ = ["JsonFormatter", "setup_logging"]
