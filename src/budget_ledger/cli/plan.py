#!/usr/bin/env python3
"""
Budget Plan, Target and Allowance CLI

A plan splits the current planning balance across spending categories by
percentage and then locks until reset.
"""

import click

from ..core.models import BudgetPeriod, BudgetTarget
from ..core.money import Money
from ..ledger import BudgetPlanController, PlanState, metrics, preview
from .common import MONEY, fmt, get_session, run_engine


def _parse_allocations(values: tuple[str, ...]) -> dict[str, float]:
    allocations: dict[str, float] = {}
    for value in values:
        category_id, sep, raw = value.partition("=")
        if not sep or not category_id:
            raise click.BadParameter(f"Expected CATEGORY=PERCENT, got '{value}'", param_hint="ALLOCATIONS")
        try:
            allocations[category_id.strip()] = float(raw.strip().rstrip("%"))
        except ValueError:
            raise click.BadParameter(f"Not a percentage: '{raw}'", param_hint="ALLOCATIONS") from None
    return allocations


@click.group()
def plan() -> None:
    """Percentage budget plan."""
    pass


@plan.command("show")
@click.pass_context
def plan_show(ctx: click.Context) -> None:
    """Show plan state and every category budget."""
    session = get_session(ctx)
    snapshot = run_engine(ctx, session.snapshot)
    catalog = session.catalog

    if snapshot.settings.is_plan_locked:
        click.echo(f"Plan: locked against {fmt(ctx, snapshot.settings.balance_at_budget_set)}")
    else:
        click.echo(f"Plan: none (planning balance {fmt(ctx, metrics.planning_balance(snapshot, catalog))})")

    for category in catalog.spend_categories():
        budget = snapshot.budget_for(category.id)
        spent = metrics.spent_for_category(snapshot, category.id)
        percentage = f"{budget.percentage:g}%" if budget and budget.percentage is not None else "-"
        amount = budget.amount if budget else Money.zero()
        click.echo(
            f"  {category.name:<18} {percentage:>6}  budget {fmt(ctx, amount):>14}  spent {fmt(ctx, spent):>14}"
        )
    click.echo(f"  {'Savings':<18} {'':>6}  budget {fmt(ctx, metrics.total_savings_budget(snapshot)):>14}")


@plan.command("save")
@click.argument("allocations", nargs=-1, required=True)
@click.option("--balance", type=MONEY, help="Balance to lock against (default: current planning balance)")
@click.option("--dry-run", is_flag=True, help="Show the resulting amounts without saving")
@click.pass_context
def plan_save(ctx: click.Context, allocations: tuple[str, ...], balance: Money | None, dry_run: bool) -> None:
    """
    Lock a plan from CATEGORY=PERCENT pairs; unlisted categories get 0%.

    Examples:
      budget-ledger plan save food=30 housing=40 transport=10
      budget-ledger plan save food=50 --dry-run
    """
    session = get_session(ctx)
    controller = BudgetPlanController(session)
    percentages = _parse_allocations(allocations)
    snapshot_balance = balance if balance is not None else run_engine(ctx, controller.planning_balance)

    if dry_run:
        for category_id, amount in preview(percentages, snapshot_balance).items():
            click.echo(f"  {session.catalog.get(category_id).name:<18} {fmt(ctx, amount):>14}")
        click.echo(f"Dry run against {fmt(ctx, snapshot_balance)}; nothing saved")
        return

    saved = run_engine(ctx, lambda: controller.save(percentages, snapshot_balance))
    click.echo(f"Plan locked against {fmt(ctx, snapshot_balance)} across {len(saved)} categories")


@plan.command("set")
@click.argument("category_id")
@click.option("--percent", "percentage", type=float, help="Percent of the planning balance")
@click.option("--amount", type=MONEY, help="Explicit amount (required for savings)")
@click.pass_context
def plan_set(ctx: click.Context, category_id: str, percentage: float | None, amount: Money | None) -> None:
    """Set one category budget while no plan is locked."""
    if percentage is None and amount is None:
        raise click.UsageError("Give --percent or --amount")
    controller = BudgetPlanController(get_session(ctx))
    budget = run_engine(ctx, lambda: controller.set_category_budget(category_id, percentage, amount))
    click.echo(f"Budget for {category_id} set to {fmt(ctx, budget.amount)}")


@plan.command("reset")
@click.confirmation_option(prompt="Reset the plan and zero every category budget?")
@click.pass_context
def plan_reset(ctx: click.Context) -> None:
    """Unlock the plan and zero every spending budget."""
    controller = BudgetPlanController(get_session(ctx))
    run_engine(ctx, controller.reset)
    state = run_engine(ctx, controller.state)
    click.echo("Plan reset" if state == PlanState.NO_PLAN else "Plan is still locked")


@click.group()
def target() -> None:
    """Spending target."""
    pass


@target.command("set")
@click.argument("amount", type=MONEY)
@click.option(
    "--period",
    type=click.Choice([p.value for p in BudgetPeriod]),
    default=BudgetPeriod.DAILY.value,
    show_default=True,
    help="Period the target applies to",
)
@click.pass_context
def target_set(ctx: click.Context, amount: Money, period: str) -> None:
    """Set the spending target used for runway and pace."""
    session = get_session(ctx)
    settings = run_engine(ctx, lambda: session.set_budget_target(BudgetTarget(amount, BudgetPeriod(period))))
    click.echo(f"Target set to {fmt(ctx, settings.budget_target.amount)} {settings.budget_target.period.value}")


@click.group()
def allowance() -> None:
    """Allowance override."""
    pass


@allowance.command("set")
@click.argument("amount", type=MONEY)
@click.confirmation_option(prompt="Overwrite the allowance outside the income log?")
@click.pass_context
def allowance_set(ctx: click.Context, amount: Money) -> None:
    """Overwrite the allowance directly (bypasses income records)."""
    session = get_session(ctx)
    settings = run_engine(ctx, lambda: session.set_allowance(amount))
    click.echo(f"Allowance set to {fmt(ctx, settings.allowance)}")
