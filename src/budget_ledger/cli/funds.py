#!/usr/bin/env python3
"""
Sinking Fund and Savings CLI

Sinking funds reserve part of the remaining balance toward a named goal;
the savings budget sets aside an amount that is never spent.
"""

import click

from ..core.money import Money
from ..ledger import FundFlowManager
from .common import MONEY, fmt, get_session, run_engine


@click.group()
def fund() -> None:
    """Sinking funds."""
    pass


@fund.command("add")
@click.argument("name")
@click.option("--target", "target", type=MONEY, required=True, help="Amount to save up")
@click.pass_context
def fund_add(ctx: click.Context, name: str, target: Money) -> None:
    """Create an empty sinking fund."""
    session = get_session(ctx)
    created = run_engine(ctx, lambda: session.add_sinking_fund(name, target))
    click.echo(f"Created sinking fund {created.id}: {created.name} (target {fmt(ctx, created.target_amount)})")


@fund.command("allocate")
@click.argument("fund_id")
@click.argument("amount", type=MONEY)
@click.pass_context
def fund_allocate(ctx: click.Context, fund_id: str, amount: Money) -> None:
    """Move part of the remaining balance into a sinking fund."""
    manager = FundFlowManager(get_session(ctx))
    updated = run_engine(ctx, lambda: manager.allocate_to_sinking_fund(fund_id, amount))
    click.echo(
        f"{updated.name}: {fmt(ctx, updated.current_amount)} of {fmt(ctx, updated.target_amount)}"
        + (" (complete)" if updated.is_complete else "")
    )


@fund.command("spend")
@click.argument("fund_id")
@click.option("--category", "category_id", required=True, help="Category to record the purchase under")
@click.pass_context
def fund_spend(ctx: click.Context, fund_id: str, category_id: str) -> None:
    """Spend a completed sinking fund as an expense and close it."""
    manager = FundFlowManager(get_session(ctx))
    record = run_engine(ctx, lambda: manager.spend_from_sinking_fund(fund_id, category_id))
    click.echo(f"Recorded expense {record.id}: {fmt(ctx, record.amount)} ({record.notes})")


@fund.command("update")
@click.argument("fund_id")
@click.option("--name", help="New name")
@click.option("--target", "target", type=MONEY, help="New target amount")
@click.option("--amount", "current", type=MONEY, help="Overwrite the saved amount (manual correction)")
@click.pass_context
def fund_update(
    ctx: click.Context, fund_id: str, name: str | None, target: Money | None, current: Money | None
) -> None:
    """Edit a sinking fund's name, target or saved amount."""
    manager = FundFlowManager(get_session(ctx))
    updated = run_engine(
        ctx, lambda: manager.update_sinking_fund(fund_id, name=name, target_amount=target, current_amount=current)
    )
    click.echo(f"Updated {updated.name}: {fmt(ctx, updated.current_amount)} of {fmt(ctx, updated.target_amount)}")


@fund.command("delete")
@click.argument("fund_id")
@click.pass_context
def fund_delete(ctx: click.Context, fund_id: str) -> None:
    """Delete a sinking fund; its saved amount returns to the remaining balance."""
    manager = FundFlowManager(get_session(ctx))
    run_engine(ctx, lambda: manager.delete_sinking_fund(fund_id))
    click.echo(f"Deleted sinking fund {fund_id}")


@fund.command("list")
@click.pass_context
def fund_list(ctx: click.Context) -> None:
    """List sinking funds with progress toward their targets."""
    funds = run_engine(ctx, get_session(ctx).list_sinking_funds)
    if not funds:
        click.echo("No sinking funds")
        return
    for item in funds:
        status = "complete" if item.is_complete else f"{fmt(ctx, item.shortfall)} to go"
        click.echo(
            f"{item.id}  {item.name:<20} {fmt(ctx, item.current_amount):>14} / "
            f"{fmt(ctx, item.target_amount):<14} {status}"
        )


@click.group()
def savings() -> None:
    """Savings budget."""
    pass


@savings.command("set")
@click.argument("amount", type=MONEY)
@click.pass_context
def savings_set(ctx: click.Context, amount: Money) -> None:
    """Set the savings budget (allowed while a plan is locked)."""
    manager = FundFlowManager(get_session(ctx))
    budget = run_engine(ctx, lambda: manager.set_savings_budget(amount))
    click.echo(f"Savings budget set to {fmt(ctx, budget.amount)}")
