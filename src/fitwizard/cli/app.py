"""Shared Typer app object, shared option types, and store utility."""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from ..io.history_store import HistoryStore, get_default_root

# Shared --data-dir option type used across all commands
DataDirOption = Annotated[
    Optional[Path],
    typer.Option("--data-dir", "-p", help="Data directory (default: ~/.fitwizard)"),
]

JsonOption = Annotated[
    bool,
    typer.Option("--json", "-j", help="Output as JSON for machine processing"),
]

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Extra engine YAML merged over the defaults"),
]

app = typer.Typer(
    name="fitwizard",
    help="Progression and performance analytics for strength training logs.",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging from the engine"),
    ] = False,
) -> None:
    """
    Track workouts and readiness, then ask for progression advice.
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
            force=True,
        )


def get_store(data_dir: Path | None) -> HistoryStore:
    """Get history store from path or the default location."""
    return HistoryStore(data_dir if data_dir is not None else get_default_root())
