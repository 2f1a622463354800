"""
CLI entry point using Typer.

Provides commands for logging and analysing training:
- init: Create the data directory
- log-workout / show-history / delete-workout: Workout log
- log-readiness / show-readiness: Daily readiness check-ins
- recommend: Progression advice per exercise
- records: Personal records
- weekly: Weekly summaries with MRV warnings
"""

from . import views  # noqa: F401
from .app import app

# Importing the command modules registers their commands on the shared app.
from .commands import analysis, readiness, sessions  # noqa: F401

__all__ = ["app"]


if __name__ == "__main__":
    app()
