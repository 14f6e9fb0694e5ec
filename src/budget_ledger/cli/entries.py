#!/usr/bin/env python3
"""
Income and Expense CLI

Record, list and delete the entries that drive the allowance and the
remaining balance.
"""

from datetime import datetime

import click

from ..core.money import Money
from ..ledger import FundFlowManager
from .common import DATE, MONEY, fmt, get_session, run_engine


@click.group()
def income() -> None:
    """Income records (each one raises the allowance)."""
    pass


@income.command("add")
@click.argument("amount", type=MONEY)
@click.option("--source", required=True, help="Where the money came from")
@click.option("--date", "date", type=DATE, help="Date received (YYYY-MM-DD, default: now)")
@click.pass_context
def income_add(ctx: click.Context, amount: Money, source: str, date: datetime | None) -> None:
    """
    Record income and raise the allowance by the same amount.

    Examples:
      budget-ledger income add 15000 --source Salary
      budget-ledger income add "2,500.50" --source Freelance --date 2024-03-01
    """
    manager = FundFlowManager(get_session(ctx))
    record = run_engine(ctx, lambda: manager.add_income(amount, source, date))
    click.echo(f"Added income {record.id}: {fmt(ctx, record.amount)} from {record.source}")


@income.command("delete")
@click.argument("income_ids", nargs=-1, required=True)
@click.pass_context
def income_delete(ctx: click.Context, income_ids: tuple[str, ...]) -> None:
    """Delete income records and lower the allowance by their total."""
    manager = FundFlowManager(get_session(ctx))
    removed = run_engine(ctx, lambda: manager.delete_incomes(income_ids))
    click.echo(f"Removed {fmt(ctx, removed)} of income")


@income.command("list")
@click.pass_context
def income_list(ctx: click.Context) -> None:
    """List income records, newest first."""
    records = run_engine(ctx, get_session(ctx).list_incomes)
    if not records:
        click.echo("No income recorded")
        return
    for record in records:
        click.echo(f"{record.id}  {record.date:%Y-%m-%d}  {fmt(ctx, record.amount):>14}  {record.source}")


@click.group()
def expense() -> None:
    """Expense records."""
    pass


@expense.command("add")
@click.argument("amount", type=MONEY)
@click.option("--category", "category_id", required=True, help="Category id (see 'summary --categories')")
@click.option("--notes", default="", help="Free-text description")
@click.option("--date", "date", type=DATE, help="Date spent (YYYY-MM-DD, default: now)")
@click.pass_context
def expense_add(ctx: click.Context, amount: Money, category_id: str, notes: str, date: datetime | None) -> None:
    """
    Record an expense.

    Examples:
      budget-ledger expense add 250 --category food --notes Lunch
    """
    session = get_session(ctx)
    if category_id not in session.catalog:
        click.echo(f"Warning: unknown category '{category_id}', counted as Uncategorized", err=True)
    record = run_engine(ctx, lambda: session.add_expense(amount, category_id, notes, date))
    click.echo(f"Added expense {record.id}: {fmt(ctx, record.amount)} in {session.catalog.get(category_id).name}")


@expense.command("delete")
@click.argument("expense_ids", nargs=-1, required=True)
@click.pass_context
def expense_delete(ctx: click.Context, expense_ids: tuple[str, ...]) -> None:
    """Delete expenses (missing ids are ignored)."""
    session = get_session(ctx)
    run_engine(ctx, lambda: session.delete_expenses(expense_ids))
    click.echo(f"Deleted {len(expense_ids)} expense(s)")


@expense.command("list")
@click.option("--category", "category_id", help="Only show this category")
@click.option("--limit", type=int, default=None, help="Show at most this many")
@click.pass_context
def expense_list(ctx: click.Context, category_id: str | None, limit: int | None) -> None:
    """List expenses, newest first."""
    session = get_session(ctx)
    records = run_engine(ctx, session.list_expenses)
    if category_id:
        records = [r for r in records if r.category_id == category_id]
    if limit is not None:
        records = records[:limit]
    if not records:
        click.echo("No expenses recorded")
        return
    for record in records:
        name = session.catalog.get(record.category_id).name
        click.echo(f"{record.id}  {record.date:%Y-%m-%d}  {fmt(ctx, record.amount):>14}  {name:<18} {record.notes}")
