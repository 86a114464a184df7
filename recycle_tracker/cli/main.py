"""
CLI interface for Recycle Tracker.

Stands in for the scanning, account and display surfaces: every command
opens the durable store, performs one core operation and prints the result.
"""

import sys
from decimal import Decimal
from typing import Optional

import typer
import yaml
from rich.console import Console
from rich.table import Table

from recycle_tracker.config.loader import TrackerConfig, default_config, load_tracker_config
from recycle_tracker.core.leaderboard import RankMetric
from recycle_tracker.core.money import format_currency
from recycle_tracker.core.tracker import RecycleTracker
from recycle_tracker.demo.seed_demo_data import seed_demo_data
from recycle_tracker.errors import RecycleTrackerError
from recycle_tracker.storage.repository import TrackerRepository, initialize_schema
from recycle_tracker.utils.logger import configure_logging

app = typer.Typer()
console = Console()

EXIT_CODE_OK = 0
EXIT_CODE_ERROR = 1


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to a YAML configuration file"
    ),
    db_path: Optional[str] = typer.Option(
        None,
        "--db",
        help="SQLite database path (overrides the config file)"
    )
):
    """Recycle Tracker CLI."""
    try:
        config = load_tracker_config(config_path) if config_path else default_config()
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        console.print(f"[red]Error loading config:[/] {str(e)}")
        sys.exit(EXIT_CODE_ERROR)

    configure_logging(config.logging.level, config.logging.log_dir)
    ctx.obj = {"config": config, "db_path": db_path or config.db_path}

    if ctx.invoked_subcommand is None:
        console.print("Recycle Tracker - Use --help to see available commands")


def _open_tracker(ctx: typer.Context) -> RecycleTracker:
    config: TrackerConfig = ctx.obj["config"]
    return RecycleTracker.create(config, repository=TrackerRepository(ctx.obj["db_path"]))


def _login_or_exit(tracker: RecycleTracker, username: str, password: str) -> str:
    user_id = tracker.login(username, password)
    if user_id is None:
        console.print("[red]Invalid username or password[/]")
        sys.exit(EXIT_CODE_ERROR)
    return user_id


def _format_impact(impact: Decimal) -> str:
    return f"{impact:.1f} lbs CO₂"


@app.command()
def init(ctx: typer.Context):
    """Initialize the Recycle Tracker database."""
    try:
        initialize_schema(ctx.obj["db_path"])
        console.print("[green]✓[/] Database initialized successfully")
        sys.exit(EXIT_CODE_OK)
    except Exception as e:
        console.print(f"[red]Error initializing database:[/] {str(e)}")
        sys.exit(EXIT_CODE_ERROR)


@app.command()
def seed(ctx: typer.Context):
    """Install the demo catalog, accounts and sample recycling history."""
    try:
        seed_demo_data(_open_tracker(ctx))
        console.print("[green]✓[/] Demo data installed (login: demo / password)")
        sys.exit(EXIT_CODE_OK)
    except Exception as e:
        console.print(f"[red]Error seeding database:[/] {str(e)}")
        sys.exit(EXIT_CODE_ERROR)


@app.command()
def scan(ctx: typer.Context, barcode: str = typer.Argument(..., help="Scanned barcode")):
    """Look up a barcode in the item catalog."""
    entry = _open_tracker(ctx).scan(barcode)
    if entry is None:
        console.print(f"[yellow]Unknown barcode {barcode}[/]")
        console.print("Register it with `recycle-tracker add-item BARCODE TYPE VALUE`")
        sys.exit(EXIT_CODE_ERROR)

    console.print(f"Barcode: {entry.barcode}")
    console.print(f"Item type: {entry.item_type}")
    console.print(f"Value: {format_currency(entry.unit_value)}")
    sys.exit(EXIT_CODE_OK)


@app.command("add-item")
def add_item(
    ctx: typer.Context,
    barcode: str = typer.Argument(..., help="Barcode to register"),
    item_type: str = typer.Argument(..., help="Item type, e.g. 'Plastic Bottle'"),
    value: str = typer.Argument(..., help="Value in dollars, e.g. 0.05")
):
    """Register (or overwrite) a catalog entry."""
    try:
        entry = _open_tracker(ctx).register_item(barcode, item_type, value)
    except RecycleTrackerError as e:
        console.print(f"[red]Error:[/] {str(e)}")
        sys.exit(EXIT_CODE_ERROR)

    console.print(
        f"[green]✓[/] {entry.barcode} registered as {entry.item_type} "
        f"({format_currency(entry.unit_value)})"
    )
    sys.exit(EXIT_CODE_OK)


@app.command()
def catalog(ctx: typer.Context):
    """List every registered catalog entry."""
    entries = sorted(_open_tracker(ctx).catalog.entries(), key=lambda entry: entry.barcode)
    if not entries:
        console.print("[dim]Catalog is empty.[/]")
        sys.exit(EXIT_CODE_OK)

    table = Table(title="Catalog")
    table.add_column("Barcode")
    table.add_column("Item")
    table.add_column("Value", justify="right")
    for entry in entries:
        table.add_row(entry.barcode, entry.item_type, format_currency(entry.unit_value))
    console.print(table)
    sys.exit(EXIT_CODE_OK)


@app.command()
def register(
    ctx: typer.Context,
    username: str = typer.Argument(..., help="New username"),
    password: str = typer.Option(..., "--password", "-p", prompt=True, hide_input=True)
):
    """Create a new account."""
    try:
        user_id = _open_tracker(ctx).register_user(username, password)
    except RecycleTrackerError as e:
        console.print(f"[red]Registration failed:[/] {str(e)}")
        sys.exit(EXIT_CODE_ERROR)

    console.print(f"[green]✓[/] Registered {username} as {user_id}")
    sys.exit(EXIT_CODE_OK)


@app.command()
def login(
    ctx: typer.Context,
    username: str = typer.Argument(..., help="Username"),
    password: str = typer.Option(..., "--password", "-p", prompt=True, hide_input=True)
):
    """Check credentials and print the user id."""
    user_id = _login_or_exit(_open_tracker(ctx), username, password)
    console.print(f"[green]✓[/] Logged in as {username} ({user_id})")
    sys.exit(EXIT_CODE_OK)


@app.command()
def record(
    ctx: typer.Context,
    barcode: str = typer.Argument(..., help="Confirmed barcode to recycle"),
    user: str = typer.Option(..., "--user", "-u", help="Username"),
    password: str = typer.Option(..., "--password", "-p", prompt=True, hide_input=True)
):
    """Record a recycled item for a user."""
    tracker = _open_tracker(ctx)
    user_id = _login_or_exit(tracker, user, password)
    try:
        event = tracker.record_scan(user_id, barcode)
    except RecycleTrackerError as e:
        console.print(f"[red]Error:[/] {str(e)}")
        sys.exit(EXIT_CODE_ERROR)

    console.print(f"[bold green]Success![/] Added {event.item_type} to your recycling history")
    sys.exit(EXIT_CODE_OK)


@app.command()
def stats(
    ctx: typer.Context,
    user: str = typer.Option(..., "--user", "-u", help="Username"),
    password: str = typer.Option(..., "--password", "-p", prompt=True, hide_input=True),
    limit: Optional[int] = typer.Option(
        None,
        "--limit",
        "-n",
        min=1,
        help="Number of recent items to show"
    )
):
    """Show a user's totals and recent recycling history."""
    tracker = _open_tracker(ctx)
    user_id = _login_or_exit(tracker, user, password)
    totals = tracker.user_stats(user_id)

    console.print(f"\n[bold]Recycling stats for {user}[/bold]")
    console.print("-" * 40)
    console.print(f"Total items recycled: {totals.total_recycled}")
    console.print(f"Total value: {format_currency(totals.total_value)}")
    console.print(f"CO₂ saved: {_format_impact(totals.environmental_impact)}")

    recent = tracker.recent_items(user_id, limit)
    if not recent:
        console.print("\n[dim]No recycled items yet.[/]")
        sys.exit(EXIT_CODE_OK)

    table = Table(title="Recent items")
    table.add_column("Date")
    table.add_column("Item")
    table.add_column("Value", justify="right")
    for event in recent:
        table.add_row(
            event.timestamp.strftime("%Y-%m-%d %H:%M"),
            event.item_type,
            format_currency(event.unit_value),
        )
    console.print(table)
    sys.exit(EXIT_CODE_OK)


@app.command()
def leaderboard(
    ctx: typer.Context,
    metric: RankMetric = typer.Option(
        RankMetric.ITEM_COUNT,
        "--metric",
        "-m",
        help="Rank by total items, value or environmental impact"
    ),
    limit: Optional[int] = typer.Option(
        None,
        "--limit",
        "-n",
        min=1,
        help="Number of users to show"
    )
):
    """Show the global leaderboard."""
    ranked = _open_tracker(ctx).leaderboard_ranking(metric, limit)
    if not ranked:
        console.print("[dim]No users yet.[/]")
        sys.exit(EXIT_CODE_OK)

    table = Table(title=f"Leaderboard ({metric.value})")
    table.add_column("#", justify="right")
    table.add_column("User")
    table.add_column("Score", justify="right")
    for position, profile in enumerate(ranked, start=1):
        if metric == RankMetric.ITEM_COUNT:
            score = f"{profile.total_recycled} items"
        elif metric == RankMetric.TOTAL_VALUE:
            score = format_currency(profile.total_value)
        else:
            score = _format_impact(profile.environmental_impact)
        table.add_row(str(position), profile.username, score)
    console.print(table)
    sys.exit(EXIT_CODE_OK)


if __name__ == "__main__":
    app()
