"""Job rollup CLI.

Commands:
- init: Create the database tables
- time: Man-hours by date for a job
- costs: Internal cost breakdown with profit and margin
- proposal: Client-facing proposal at a job-wide markup
- progress: Clocked man-hours against the job estimate and the labor budget
"""
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from config import configure_logging
from database_manager import DatabaseManager
from errors import RollupError

app = typer.Typer(
    name="job-rollup",
    help="Time and cost rollups for construction jobs",
    no_args_is_help=True,
)

console = Console()


def _money(value: float) -> str:
    return f"${value:,.2f}"


def _fail(exc: Exception) -> None:
    console.print(f"[red]✗[/red] {exc}")
    raise typer.Exit(code=1)


@app.callback()
def main(
    ctx: typer.Context,
    db_path: Path | None = typer.Option(None, "--db-path", help="SQLite file (default: DATABASE_URL / DB_PATH)"),
    log_level: str | None = typer.Option(None, "--log-level", help="Overrides LOG_LEVEL"),
):
    """Configure logging and open the job database."""
    configure_logging(log_level)
    ctx.obj = DatabaseManager(db_path=db_path)


@app.command()
def init(ctx: typer.Context):
    """Create the database tables."""
    ctx.obj.init_db()
    console.print("[bold green]✓[/bold green] Database initialized")


@app.command(name="time")
def time_cmd(
    ctx: typer.Context,
    job_id: int = typer.Argument(..., help="Job ID"),
    clock_in_only: bool = typer.Option(False, "--clock-in-only", help="Only time not tied to a component"),
):
    """Show man-hours by date for a job."""
    summary = ctx.obj.get_time_summary(job_id, clock_in_only=clock_in_only)
    table = Table(title=f"Job {job_id} time")
    table.add_column("Date")
    table.add_column("Entries", justify="right")
    table.add_column("Component MH", justify="right")
    table.add_column("Generic MH", justify="right")
    table.add_column("Total MH", justify="right")
    for group in summary.date_groups:
        table.add_row(
            group.date.isoformat(),
            str(group.entry_count),
            f"{group.component_man_hours:.2f}",
            f"{group.generic_man_hours:.2f}",
            f"{group.total_man_hours:.2f}",
        )
    console.print(table)
    console.print(
        f"[bold]Total:[/bold] {summary.total_hours:.2f} h, {summary.total_man_hours:.2f} man-hours "
        f"across {summary.entry_count} entries"
    )


@app.command()
def costs(ctx: typer.Context, job_id: int = typer.Argument(..., help="Job ID")):
    """Show the internal cost breakdown for a job."""
    result = ctx.obj.get_cost_breakdown(job_id)
    table = Table(title=f"Job {job_id} costs")
    table.add_column("Section")
    table.add_column("Cost", justify="right")
    table.add_column("Price", justify="right")
    table.add_row("Materials", _money(result.materials_cost), _money(result.materials_price))
    table.add_row("Labor", _money(result.labor_cost), _money(result.labor_price))
    table.add_row("Other", _money(result.financial_rows_cost), _money(result.financial_rows_price))
    table.add_row("[bold]Total[/bold]", _money(result.total_cost), _money(result.total_price))
    console.print(table)
    console.print(f"[bold]Profit:[/bold] {_money(result.profit)} ({result.margin_percent:.1f}% margin)")
    console.print(
        f"[bold]Labor:[/bold] {result.budgeted_labor_hours:.2f} h budgeted, "
        f"{result.actual_labor_hours:.2f} h clocked ({_money(result.actual_labor_cost)})"
    )


@app.command()
def proposal(
    ctx: typer.Context,
    job_id: int = typer.Argument(..., help="Job ID"),
    markup: float = typer.Option(0.0, "--markup", help="Job-wide markup percent"),
):
    """Show the client-facing proposal for a job."""
    result = ctx.obj.get_proposal(job_id, markup_percent=markup)
    table = Table(title=f"Job {job_id} proposal ({markup:g}% markup)")
    table.add_column("Line")
    table.add_column("Price", justify="right")
    table.add_column("Tax", justify="right")
    table.add_column("Total", justify="right")
    for line in result.lines:
        table.add_row(line.description, _money(line.price), _money(line.tax), _money(line.total))
    console.print(table)
    console.print(f"[bold]Subtotal:[/bold] {_money(result.subtotal)}")
    console.print(f"[bold]Tax:[/bold] {_money(result.total_tax)}")
    console.print(f"[bold]Grand total:[/bold] {_money(result.grand_total)}")


@app.command()
def progress(ctx: typer.Context, job_id: int = typer.Argument(..., help="Job ID")):
    """Show clocked man-hours against the estimate and the labor budget."""
    try:
        budgets = [
            ("Estimate", ctx.obj.get_budget_progress(job_id)),
            ("Labor budget", ctx.obj.get_labor_budget_progress(job_id)),
        ]
    except (RollupError, ValueError) as exc:
        _fail(exc)
    for label, budget in budgets:
        if budget.progress_percent is None:
            console.print(f"[bold]{label}:[/bold] {budget.clocked_hours:.2f} h clocked, no budget")
            continue
        flag = " [red]over budget[/red]" if budget.is_over_budget else ""
        console.print(
            f"[bold]{label}:[/bold] {budget.clocked_hours:.2f} / {budget.estimated_hours:.2f} h "
            f"({budget.progress_percent:.0f}%){flag}"
        )


if __name__ == "__main__":
    app()
