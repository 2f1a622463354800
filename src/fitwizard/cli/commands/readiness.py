"""Readiness commands: log-readiness, show-readiness."""

import json
from datetime import datetime
from typing import Annotated, Optional

import typer

from ...core.models import ReadinessEntry
from ...io.serializers import ValidationError, readiness_to_dict
from .. import views
from ..app import DataDirOption, JsonOption, app, get_store

_RATING_HELP = "1 (worst) to 5 (best)"


@app.command("log-readiness")
def log_readiness(
    sleep: Annotated[int, typer.Option("--sleep", help=f"Sleep quality, {_RATING_HELP}")],
    soreness: Annotated[int, typer.Option("--soreness", help="Muscle soreness, 1 (none) to 5 (very sore)")],
    energy: Annotated[int, typer.Option("--energy", help=f"Energy level, {_RATING_HELP}")],
    stress: Annotated[int, typer.Option("--stress", help="Stress level, 1 (calm) to 5 (very stressed)")],
    date: Annotated[
        Optional[str],
        typer.Option("--date", "-d", help="Check-in date (YYYY-MM-DD, default: today)"),
    ] = None,
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Record a daily readiness check-in.

    Logging twice for the same date replaces the earlier check-in.
    """
    store = get_store(data_dir)
    if date is None:
        date = datetime.now().strftime("%Y-%m-%d")

    try:
        entry = ReadinessEntry(
            date=date,
            sleep_quality=sleep,
            muscle_soreness=soreness,
            energy_level=energy,
            stress_level=stress,
        )
        store.log_readiness(entry)
    except (ValueError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if json_out:
        print(json.dumps(readiness_to_dict(entry), indent=2))
        return

    views.print_readiness(entry)


@app.command("show-readiness")
def show_readiness(
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    List readiness check-ins, oldest first.
    """
    store = get_store(data_dir)
    try:
        entries = store.load_readiness()
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if json_out:
        print(json.dumps([readiness_to_dict(e) for e in entries], indent=2))
        return

    if not entries:
        views.console.print("[yellow]No readiness check-ins yet.[/yellow]")
        return
    for entry in entries:
        views.print_readiness(entry)
