"""CLI interface using Typer."""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import NoReturn, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from weighttrack.agent.response import create_response, error_response
from weighttrack.config import get_settings, reload_settings
from weighttrack.db import DatabaseConnection, get_db, set_db
from weighttrack.db.queries import GoalQueries, WeightQueries
from weighttrack.errors import WeightTrackError
from weighttrack.logging_config import configure_logging
from weighttrack.tracking.changes import calculate_weight_changes
from weighttrack.tracking.models import GoalStatus, GoalType, PredictionReport
from weighttrack.tracking.predictor import predict_weight_trend
from weighttrack.tracking.progress import days_to_target, goal_progress, is_achieved

app = typer.Typer(
    help="Personal weight tracking with trend prediction",
    no_args_is_help=True,
)
console = Console()

weight_app = typer.Typer(help="Log and review weight entries")
goal_app = typer.Typer(help="Manage weight goals")

app.add_typer(weight_app, name="weight")
app.add_typer(goal_app, name="goal")


# ============================================================================
# Helpers
# ============================================================================


def wants_json(json_output: bool) -> bool:
    """JSON output if requested by flag or configured as the default format."""
    return json_output or get_settings().defaults.output_format == "json"


def parse_date(value: Optional[str], default: Optional[date] = None) -> Optional[date]:
    """Parse a YYYY-MM-DD option value."""
    if value is None:
        return default
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise typer.BadParameter(f"Invalid date '{value}', expected YYYY-MM-DD") from None


def format_display_date(value: Optional[date]) -> str:
    """Render a date as '1 November 2026', or a dash when absent."""
    if value is None:
        return "-"
    return f"{value.day} {value:%B %Y}"


def fail(
    command: str,
    message: str,
    json_output: bool,
    suggestions: Optional[list[str]] = None,
) -> NoReturn:
    """Report an error in the requested format and exit with status 1."""
    if json_output:
        error_response(command, message, suggestions).emit()
    else:
        console.print(f"[red]{message}[/red]")
    raise typer.Exit(1)


def ensure_tables() -> None:
    """Ensure tables exist (idempotent)."""
    get_db().initialize_schema()


@app.callback()
def main(
    config: Optional[Path] = typer.Option(
        None, "--config", help="Path to config.yaml"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Load settings and configure logging before any command."""
    try:
        settings = reload_settings(config) if config else get_settings()
    except WeightTrackError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    if config:
        set_db(DatabaseConnection(settings.database.path))

    configure_logging(settings.logging.level, settings.logging.format, verbose)


@weight_app.callback()
def weight_callback() -> None:
    """Ensure tables exist before any weight command."""
    ensure_tables()


@goal_app.callback()
def goal_callback() -> None:
    """Ensure tables exist before any goal command."""
    ensure_tables()


# ============================================================================
# Weight Commands
# ============================================================================


@weight_app.command("add")
def weight_add(
    weight: float = typer.Argument(..., help="Weight in kg"),
    date_str: Optional[str] = typer.Option(
        None, "--date", "-d", help="Date (YYYY-MM-DD, default: today)"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Add a weight entry."""
    entry_date = parse_date(date_str, date.today())

    with get_db().get_connection() as conn:
        entry = WeightQueries.add_entry(conn, weight, entry_date)  # type: ignore[arg-type]

    if wants_json(json_output):
        create_response(
            "weight add",
            data={
                "id": entry.entry_id,
                "date": entry.entry_date.isoformat(),
                "weight_kg": entry.weight_kg,
            },
            human_summary=f"Logged {weight:.2f} kg on {entry.entry_date}",
        ).emit()
    else:
        console.print(
            f"[green]Logged:[/green] {weight:.2f} kg on {format_display_date(entry.entry_date)}"
        )


@weight_app.command("list")
def weight_list(
    days: Optional[int] = typer.Option(
        None, "--days", "-d", help="Days to show before the latest entry (default from config)"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """List weight history."""
    if days is None:
        days = get_settings().defaults.history_days

    with get_db().get_connection() as conn:
        history = WeightQueries.get_history(conn, days=days)

    if wants_json(json_output):
        create_response(
            "weight list",
            data={
                "entries": [
                    {
                        "id": e.entry_id,
                        "date": e.entry_date.isoformat(),
                        "weight_kg": e.weight_kg,
                    }
                    for e in history
                ]
            },
            human_summary=f"{len(history)} entries over {days} days",
        ).emit()
        return

    if not history:
        console.print("No weight entries found")
        return

    table = Table(title=f"Weight History (last {days} days)")
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Date", style="cyan")
    table.add_column("Weight", justify="right")
    table.add_column("", justify="right")

    prev_weight = None
    for entry in history:
        delta = ""
        if prev_weight is not None:
            d = entry.weight_kg - prev_weight
            color = "green" if d < 0 else "red" if d > 0 else "dim"
            delta = f"[{color}]{d:+.2f}[/{color}]"
        table.add_row(
            str(entry.entry_id),
            entry.entry_date.isoformat(),
            f"{entry.weight_kg:.2f} kg",
            delta,
        )
        prev_weight = entry.weight_kg

    console.print(table)


@weight_app.command("delete")
def weight_delete(
    entry_id: int = typer.Argument(..., help="Entry ID (see 'weight list')"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Delete a weight entry."""
    json_output = wants_json(json_output)
    try:
        with get_db().get_connection() as conn:
            entry = WeightQueries.delete_entry(conn, entry_id)
    except WeightTrackError as e:
        fail("weight delete", str(e), json_output, ["List entries with: weighttrack weight list"])

    if json_output:
        create_response(
            "weight delete",
            data={"id": entry_id, "date": entry.entry_date.isoformat()},
            human_summary=f"Deleted entry {entry_id}",
        ).emit()
    else:
        console.print(
            f"[yellow]Deleted:[/yellow] {entry.weight_kg:.2f} kg on "
            f"{format_display_date(entry.entry_date)}"
        )


@weight_app.command("changes")
def weight_changes(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show weight change over the last 7, 14 and 30 days."""
    json_output = wants_json(json_output)
    with get_db().get_connection() as conn:
        samples = WeightQueries.get_samples(conn)

    changes = calculate_weight_changes(samples)
    if changes is None:
        fail(
            "weight changes",
            "No weight entries found",
            json_output,
            ["Log your weight with: weighttrack weight add <kg>"],
        )

    if json_output:
        create_response(
            "weight changes",
            data=changes.to_dict(),
            human_summary=f"Current weight {changes.current_weight:.2f} kg",
        ).emit()
        return

    console.print(
        f"Current weight: [bold]{changes.current_weight:.2f} kg[/bold] "
        f"({format_display_date(changes.current_date)})"
    )
    if changes.recent_change is not None:
        console.print(f"Since previous entry: {changes.recent_change:+.1f} kg")

    table = Table(title="Weight Changes")
    table.add_column("Period", style="cyan")
    table.add_column("Change", justify="right")
    table.add_column("%", justify="right")
    for period in changes.periods:
        if period.change_kg is None:
            table.add_row(f"{period.days} days", "-", "-")
        else:
            table.add_row(
                f"{period.days} days",
                f"{period.change_kg:+.1f} kg",
                f"{period.percentage:+.1f}%",
            )
    console.print(table)


# ============================================================================
# Goal Commands
# ============================================================================


@goal_app.command("add")
def goal_add(
    target_weight: float = typer.Argument(..., help="Target weight in kg"),
    goal_type: GoalType = typer.Option(GoalType.LOSE, "--type", "-t", help="Goal type"),
    target_date_str: Optional[str] = typer.Option(
        None, "--target-date", help="Target date (YYYY-MM-DD)"
    ),
    description: Optional[str] = typer.Option(None, "--description", help="Description"),
    starting_weight: Optional[float] = typer.Option(
        None, "--starting-weight", help="Starting weight in kg (default: latest entry)"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Create a weight goal."""
    target_date = parse_date(target_date_str)

    with get_db().get_connection() as conn:
        goal = GoalQueries.create_goal(
            conn,
            target_weight,
            goal_type=goal_type.value,
            description=description,
            target_date=target_date,
            starting_weight_kg=starting_weight,
        )

    if wants_json(json_output):
        create_response(
            "goal add",
            data={
                "id": goal.goal_id,
                "target_weight": goal.target_weight_kg,
                "goal_type": goal.goal_type,
                "target_date": goal.target_date,
                "starting_weight": goal.starting_weight_kg,
                "description": goal.description,
            },
            human_summary=f"Created {goal.goal_type} goal: {target_weight:.2f} kg",
        ).emit()
    else:
        console.print(
            f"[green]Created goal {goal.goal_id}:[/green] {goal.goal_type} to {target_weight:.2f} kg"
        )


@goal_app.command("list")
def goal_list(
    include_all: bool = typer.Option(False, "--all", help="Include achieved and abandoned goals"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """List goals with progress."""
    today = date.today()
    with get_db().get_connection() as conn:
        goals = GoalQueries.list_goals(conn, include_inactive=include_all)
        latest = WeightQueries.get_latest_entry(conn)

    latest_weight = latest.weight_kg if latest else None
    rows = [
        {
            "id": goal.goal_id,
            "target_weight": goal.target_weight_kg,
            "target_date": goal.target_date,
            "goal_type": goal.goal_type,
            "status": goal.status,
            "description": goal.description,
            "starting_weight": goal.starting_weight_kg,
            "progress": round(goal_progress(goal, latest_weight), 1),
            "days_to_target": days_to_target(goal, today),
            "is_achieved": is_achieved(goal, latest_weight),
        }
        for goal in goals
    ]

    if wants_json(json_output):
        create_response(
            "goal list",
            data={"goals": rows},
            human_summary=f"{len(rows)} goals",
        ).emit()
        return

    if not rows:
        console.print("No goals found")
        return

    table = Table(title="Weight Goals")
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Type", style="cyan")
    table.add_column("Target", justify="right")
    table.add_column("Progress", justify="right")
    table.add_column("Target Date")
    table.add_column("Status")
    table.add_column("Description")

    for row in rows:
        status = row["status"]
        if row["is_achieved"] and status == GoalStatus.ACTIVE.value:
            status = "[green]reached[/green]"
        target_date = format_display_date(row["target_date"])
        if row["days_to_target"] is not None:
            target_date += f" ({row['days_to_target']}d)"
        table.add_row(
            str(row["id"]),
            row["goal_type"],
            f"{row['target_weight']:.2f} kg",
            f"{row['progress']:.1f}%",
            target_date,
            status,
            row["description"] or "",
        )

    console.print(table)


@goal_app.command("status")
def goal_status(
    goal_id: int = typer.Argument(..., help="Goal ID"),
    status: GoalStatus = typer.Argument(..., help="New status"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Mark a goal active, achieved or abandoned."""
    json_output = wants_json(json_output)
    try:
        with get_db().get_connection() as conn:
            goal = GoalQueries.set_status(conn, goal_id, status.value)
    except WeightTrackError as e:
        fail("goal status", str(e), json_output, ["List goals with: weighttrack goal list --all"])

    if json_output:
        create_response(
            "goal status",
            data={"id": goal.goal_id, "status": goal.status},
            human_summary=f"Goal {goal_id} marked {goal.status}",
        ).emit()
    else:
        console.print(f"Goal {goal_id} marked [bold]{goal.status}[/bold]")


@goal_app.command("delete")
def goal_delete(
    goal_id: int = typer.Argument(..., help="Goal ID"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Delete a goal."""
    json_output = wants_json(json_output)
    try:
        with get_db().get_connection() as conn:
            GoalQueries.delete_goal(conn, goal_id)
    except WeightTrackError as e:
        fail("goal delete", str(e), json_output)

    if json_output:
        create_response("goal delete", data={"id": goal_id}, human_summary=f"Deleted goal {goal_id}").emit()
    else:
        console.print(f"[yellow]Deleted goal {goal_id}[/yellow]")


# ============================================================================
# Prediction
# ============================================================================


def format_prediction_report(report: PredictionReport) -> Panel:
    """Render a prediction report as a rich panel."""
    if not report.has_enough_data:
        return Panel(
            f"Not enough data for predictions ({report.entry_count} entries, need at least 2).",
            title="Weight Prediction",
            border_style="yellow",
        )

    direction_color = "green" if report.trend == "losing" else "red"
    lines = [
        f"Trend:        [{direction_color}]{report.trend}[/{direction_color}] "
        f"{report.daily_weight_loss:.3f} kg/day",
        f"Confidence:   {report.confidence:.1f}%",
        f"Entries:      {report.entry_count}",
        "",
        f"Predicted on {format_display_date(report.next_month_date)}: "
        f"[bold]{report.next_month_prediction:.2f} kg[/bold]",
    ]

    if report.goal_predictions:
        lines.append("")
        lines.append("Goals:")
        for prediction in report.goal_predictions:
            label = prediction.description or f"{prediction.goal_type.value} goal"
            lines.append(
                f"  {label} ({prediction.target_weight_kg:.2f} kg): "
                f"{format_display_date(prediction.prediction_date)}"
            )
    elif report.goal_date or report.goal_date_90:
        lines.append("")
        lines.append(f"100 kg: {format_display_date(report.goal_date)}")
        lines.append(f" 90 kg: {format_display_date(report.goal_date_90)}")

    return Panel("\n".join(lines), title="Weight Prediction", border_style="blue")


@app.command()
def predict(
    today_str: Optional[str] = typer.Option(
        None, "--today", help="Reference date for the next-month estimate (YYYY-MM-DD)"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Predict weight trend and goal dates from logged entries."""
    today = parse_date(today_str, date.today())

    ensure_tables()
    with get_db().get_connection() as conn:
        samples = WeightQueries.get_samples(conn)
        goals = GoalQueries.get_active_specs(conn)

    report = predict_weight_trend(samples, goals, today=today)

    if wants_json(json_output):
        if report.has_enough_data:
            summary = (
                f"{report.trend} {report.daily_weight_loss:.3f} kg/day, "
                f"{report.confidence:.1f}% confidence"
            )
        else:
            summary = "Not enough data for predictions"
        create_response(
            "predict",
            data=report.to_dict(),
            human_summary=summary,
            suggestions=[] if report.has_enough_data else [
                "Log at least two weights with: weighttrack weight add <kg>"
            ],
        ).emit()
    else:
        console.print(format_prediction_report(report))


if __name__ == "__main__":
    app()
