#!/usr/bin/env python3
"""
Insights CLI

Spending pace, trend and category breakdown reports, plus the JSON context
that would be sent to a suggestion service.
"""

import click

from ..analysis import analyze_pace, category_breakdown, spending_trend
from ..core.json_utils import format_json
from ..core.money import Money
from ..insights import build_allocation_context, build_suggestion_context
from .common import fmt, get_session, run_engine


@click.group()
def insights() -> None:
    """Spending analysis and suggestion context."""
    pass


@insights.command("pace")
@click.pass_context
def insights_pace(ctx: click.Context) -> None:
    """Compare spending with the budget target."""
    session = get_session(ctx)
    snapshot = run_engine(ctx, session.snapshot)
    pace = analyze_pace(snapshot, session.catalog, session.now())

    click.echo(f"Status: {pace.status.value}")
    if pace.period is None:
        click.echo("No spending target set (see 'target set')")
        return
    click.echo(f"  Target:            {fmt(ctx, pace.target_amount)} {pace.period.value}")
    click.echo(f"  Periods elapsed:   {pace.periods_elapsed}")
    click.echo(f"  Spent this period: {fmt(ctx, pace.spent_in_period)}")
    click.echo(f"  Accumulated funds: {fmt(ctx, pace.accumulated_funds)}")


@insights.command("trend")
@click.option("--freq", type=click.Choice(["D", "W", "M"]), default="D", show_default=True, help="Day, week or month")
@click.pass_context
def insights_trend(ctx: click.Context, freq: str) -> None:
    """Spending per period, zero-filled."""
    session = get_session(ctx)
    snapshot = run_engine(ctx, session.snapshot)
    series = spending_trend(snapshot.expenses, session.catalog, freq)
    if series.empty:
        click.echo("No spending recorded")
        return
    for period, cents in series.items():
        click.echo(f"  {str(period):<12} {fmt(ctx, Money.from_cents(int(cents))):>14}")


@insights.command("breakdown")
@click.pass_context
def insights_breakdown(ctx: click.Context) -> None:
    """Spent vs. budget per category."""
    session = get_session(ctx)
    snapshot = run_engine(ctx, session.snapshot)
    for row in category_breakdown(snapshot, session.catalog):
        flag = "  OVER" if row.is_over_budget else ""
        click.echo(
            f"  {row.category.name:<18} spent {fmt(ctx, row.spent):>14}  budget {fmt(ctx, row.budget):>14}{flag}"
        )


@insights.command("context")
@click.option(
    "--kind",
    type=click.Choice(["allocation", "funds"]),
    default="allocation",
    show_default=True,
    help="Budget allocation request or accumulated-funds request",
)
@click.option("--note", help="Free-text context from the user (allocation only)")
@click.pass_context
def insights_context(ctx: click.Context, kind: str, note: str | None) -> None:
    """Print the JSON context a suggestion request would carry."""
    session = get_session(ctx)
    snapshot = run_engine(ctx, session.snapshot)
    now = session.now()
    if kind == "allocation":
        days = ctx.find_object(dict)["config"].recent_expense_days
        context = build_allocation_context(snapshot, session.catalog, now, user_context=note, recent_days=days)
    else:
        context = build_suggestion_context(snapshot, session.catalog, now)
    click.echo(format_json(context.to_dict()))
