"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of workouts, recommendations, records
and weekly summaries.
"""

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..core.exercises.registry import display_name
from ..core.metrics import calculate_volume, completed_sets
from ..core.models import (
    PersonalRecord,
    ProgressionRecommendation,
    ReadinessEntry,
    VolumeWarning,
    WeeklySummary,
    WorkoutLog,
)

console = Console()

_ACTION_STYLE = {
    "increase_load": "green",
    "increase_reps": "green",
    "maintain": "yellow",
    "technique_focus": "magenta",
    "deload": "red",
}

_REASON_TEXT = {
    "insufficient_history": "not enough sessions yet",
    "stagnation": "top set has stalled while sessions feel easy",
    "too_easy": "recent sessions left plenty in reserve",
    "rep_range_progress": "on target; add reps inside the range",
    "rep_range_top": "on target at the top of the rep range",
    "repeated_overreach": "several sessions in a row near failure",
    "near_failure": "last session was near failure",
    "missed_reps": "prescribed reps were missed",
    "mixed_signals": "easy and hard sessions mixed",
    "inconsistent_effort": "effort varied a lot between sets",
    "low_readiness": "readiness is low",
}

_METRIC_LABEL = {
    "max_weight": "Max weight",
    "max_reps_at_weight": "Reps at weight",
    "estimated_1rm": "Est. 1RM",
}


def reason_text(code: str) -> str:
    """Short human explanation of a reason code."""
    return _REASON_TEXT.get(code, code)


def _fmt_magnitude(rec: ProgressionRecommendation) -> str:
    if rec.magnitude == 0:
        return "-"
    if rec.magnitude_unit == "reps":
        return f"{rec.magnitude:+.0f} rep"
    return f"{rec.magnitude * 100:+.1f}%"


def _fmt_sets(workout: WorkoutLog) -> str:
    parts = []
    for ex in workout.exercises:
        if ex.skipped:
            parts.append(f"{ex.exercise_id}: skipped")
            continue
        sets = " ".join(
            f"{s.weight:g}x{s.reps}" + (f"@{s.rir_reported}" if s.rir_reported is not None else "")
            + ("" if s.completed else "!")
            for s in ex.sets
        )
        parts.append(f"{ex.exercise_id}: {sets}")
    return "\n".join(parts)


def format_history_table(workouts: list[WorkoutLog]) -> Table:
    """
    Create a Rich table displaying workout history.

    Args:
        workouts: Workouts to display

    Returns:
        Rich Table object
    """
    table = Table(title="Workout History")

    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Date", style="cyan")
    table.add_column("ID", style="dim")
    table.add_column("Sets")
    table.add_column("Done", justify="right")
    table.add_column("Volume", justify="right", style="bold")

    for i, workout in enumerate(workouts, 1):
        done = sum(len(completed_sets(ex)) for ex in workout.exercises)
        table.add_row(
            str(i),
            workout.date,
            workout.id,
            _fmt_sets(workout),
            str(done),
            f"{calculate_volume(workout):.0f} {workout.weight_unit}",
        )

    return table


def print_history(workouts: list[WorkoutLog]) -> None:
    """Print workout history to console."""
    if not workouts:
        console.print("[yellow]No workouts recorded yet.[/yellow]")
        return
    console.print(format_history_table(workouts))


def format_recommendation_table(recs: list[ProgressionRecommendation]) -> Table:
    """Create a Rich table of progression recommendations."""
    table = Table(title="Next Session")

    table.add_column("Exercise", style="cyan")
    table.add_column("Action")
    table.add_column("Change", justify="right")
    table.add_column("Load", justify="right")
    table.add_column("Confidence")
    table.add_column("Why")

    for rec in recs:
        style = _ACTION_STYLE.get(rec.action, "white")
        if rec.current_load > 0 and rec.recommended_load != rec.current_load:
            load = f"{rec.current_load:g} → {rec.recommended_load:g}"
        else:
            load = f"{rec.current_load:g}" if rec.current_load > 0 else "-"
        why = reason_text(rec.rationale)
        if rec.adjustments:
            why += "; held back: " + ", ".join(reason_text(a) for a in rec.adjustments)
        table.add_row(
            display_name(rec.exercise_id),
            f"[{style}]{rec.action}[/{style}]",
            _fmt_magnitude(rec),
            load,
            rec.confidence,
            why,
        )

    return table


def print_recommendations(recs: list[ProgressionRecommendation]) -> None:
    """Print progression recommendations."""
    if not recs:
        console.print("[yellow]No exercises to analyse.[/yellow]")
        return
    console.print(format_recommendation_table(recs))


def format_records_table(records: list[PersonalRecord], title: str = "Personal Records") -> Table:
    """Create a Rich table of personal records."""
    table = Table(title=title)

    table.add_column("Date", style="cyan")
    table.add_column("Exercise")
    table.add_column("Metric", style="magenta")
    table.add_column("Value", justify="right", style="bold")
    table.add_column("Previous", justify="right", style="dim")

    for rec in records:
        if rec.metric == "max_reps_at_weight":
            value = f"{rec.value:.0f} @ {rec.weight:g}"
        else:
            value = f"{rec.value:.1f}"
        previous = f"{rec.previous_value:.1f}" if rec.previous_value is not None else "baseline"
        table.add_row(
            rec.achieved_date,
            display_name(rec.exercise_id),
            _METRIC_LABEL.get(rec.metric, rec.metric),
            value,
            previous,
        )

    return table


def print_records(records: list[PersonalRecord], title: str = "Personal Records") -> None:
    """Print personal records."""
    if not records:
        console.print("[yellow]No personal records yet.[/yellow]")
        return
    console.print(format_records_table(records, title))


def format_weekly_table(summaries: list[WeeklySummary]) -> Table:
    """Create a Rich table of weekly summaries."""
    table = Table(title="Weekly Summary")

    table.add_column("Week of", style="cyan")
    table.add_column("Sessions", justify="right")
    table.add_column("Volume", justify="right", style="bold")
    table.add_column("Readiness", justify="right")
    table.add_column("Sets by muscle group")

    for s in summaries:
        groups = ", ".join(f"{g} {n}" for g, n in sorted(s.muscle_group_sets.items()))
        table.add_row(
            s.week_start,
            str(s.session_count),
            f"{s.total_volume:.0f}",
            f"{s.average_readiness:.2f}" if s.average_readiness is not None else "-",
            groups or "-",
        )

    return table


def create_simple_bar_chart(
    labels: list[str],
    values: list[float],
    width: int = 40,
    title: str = "",
) -> str:
    """
    Create a simple horizontal bar chart.

    Args:
        labels: Labels for each bar
        values: Values for each bar
        width: Maximum bar width
        title: Chart title

    Returns:
        ASCII bar chart string
    """
    if not values:
        return "No data to display."

    max_val = max(values)
    max_label_len = max(len(l) for l in labels)

    lines = []
    if title:
        lines.append(title)
        lines.append("─" * (max_label_len + width + 5))

    for label, value in zip(labels, values):
        bar_len = int((value / max_val) * width) if max_val > 0 else 0
        lines.append(f"{label:>{max_label_len}} │{'█' * bar_len} {value:.0f}")

    return "\n".join(lines)


def print_weekly(
    summaries: list[WeeklySummary],
    warnings: dict[str, list[VolumeWarning]],
    chart: bool = False,
) -> None:
    """
    Print weekly summaries with MRV warnings.

    Args:
        summaries: Weeks to show, oldest first
        warnings: week_start -> volume warnings for that week
        chart: Also draw a bar chart of total volume per week
    """
    if not summaries:
        console.print("[yellow]No training weeks recorded yet.[/yellow]")
        return

    console.print(format_weekly_table(summaries))

    for s in summaries:
        for w in warnings.get(s.week_start, []):
            print_warning(
                f"week of {s.week_start}: {w.muscle_group} {w.sets} sets "
                f"exceeds MRV of {w.mrv}"
            )

    if chart:
        console.print()
        console.print(create_simple_bar_chart(
            [s.week_start for s in summaries],
            [s.total_volume for s in summaries],
            title="Weekly Volume (weight x reps)",
        ))


def print_readiness(entry: ReadinessEntry) -> None:
    """Print a readiness check-in with its score."""
    score = entry.overall_score
    style = "green" if score >= 3.5 else "yellow" if score >= 2.5 else "red"
    console.print(
        f"Readiness {entry.date}: [{style}]{score:.2f}[/{style}] "
        f"(sleep {entry.sleep_quality}, soreness {entry.muscle_soreness}, "
        f"energy {entry.energy_level}, stress {entry.stress_level})"
    )


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{escape(message)}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {escape(message)}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {escape(message)}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{escape(message)}[/blue]")
