"""Command line interface for bwbridge."""
from __future__ import annotations

from bwbridge.cli.app import ExitCode
from bwbridge.cli.app import app
from bwbridge.cli.app import run_app

__all__ = ["app", "run_app", "ExitCode"]
