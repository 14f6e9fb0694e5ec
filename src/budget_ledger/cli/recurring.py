#!/usr/bin/env python3
"""
Recurring Expense CLI

Schedule bills that repeat and log each occurrence as an expense.
"""

from datetime import datetime

import click

from ..core.models import BudgetPeriod
from ..core.money import Money
from ..ledger import RecurringExpenseManager
from .common import DATE, MONEY, fmt, get_session, run_engine


@click.group()
def recurring() -> None:
    """Recurring expenses."""
    pass


@recurring.command("add")
@click.argument("name")
@click.argument("amount", type=MONEY)
@click.option("--category", "category_id", required=True, help="Spending category id")
@click.option(
    "--period",
    type=click.Choice([p.value for p in BudgetPeriod]),
    default=BudgetPeriod.MONTHLY.value,
    show_default=True,
)
@click.option("--next-due", "next_due", type=DATE, required=True, help="First due date (YYYY-MM-DD)")
@click.pass_context
def recurring_add(
    ctx: click.Context, name: str, amount: Money, category_id: str, period: str, next_due: datetime
) -> None:
    """
    Schedule a recurring expense.

    Examples:
      budget-ledger recurring add Rent 12000 --category housing --next-due 2024-04-01
    """
    manager = RecurringExpenseManager(get_session(ctx))
    item = run_engine(ctx, lambda: manager.add(name, amount, category_id, BudgetPeriod(period), next_due))
    click.echo(f"Scheduled {item.id}: {item.name} {fmt(ctx, item.amount)} {item.period.value}")


@recurring.command("list")
@click.pass_context
def recurring_list(ctx: click.Context) -> None:
    """List recurring expenses by next due date."""
    items = run_engine(ctx, get_session(ctx).list_recurring_expenses)
    if not items:
        click.echo("No recurring expenses")
        return
    for item in items:
        click.echo(
            f"{item.id}  {item.name:<20} {fmt(ctx, item.amount):>14}  {item.period.value:<8} "
            f"next {item.next_due_date:%Y-%m-%d}"
        )


@recurring.command("due")
@click.pass_context
def recurring_due(ctx: click.Context) -> None:
    """List recurring expenses whose due date has passed."""
    manager = RecurringExpenseManager(get_session(ctx))
    items = run_engine(ctx, manager.due)
    if not items:
        click.echo("Nothing due")
        return
    for item in items:
        click.echo(f"{item.id}  {item.name:<20} {fmt(ctx, item.amount):>14}  due {item.next_due_date:%Y-%m-%d}")


@recurring.command("log")
@click.argument("recurring_id")
@click.pass_context
def recurring_log(ctx: click.Context, recurring_id: str) -> None:
    """Record one occurrence as an expense and advance the due date."""
    manager = RecurringExpenseManager(get_session(ctx))
    record = run_engine(ctx, lambda: manager.log(recurring_id))
    click.echo(f"Logged expense {record.id}: {record.notes} {fmt(ctx, record.amount)}")
