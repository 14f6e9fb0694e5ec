#!/usr/bin/env python3
"""
Main CLI Entry Point for the Budget Ledger

Provides the command-line interface over the local JSON ledger.
"""

import logging
import math
import os

import click

from ..core.config import get_config, reload_config
from ..core.json_utils import format_json
from ..ledger import summarize
from .common import fmt, get_session, run_engine


@click.group()
@click.option(
    "--config-env",
    type=click.Choice(["development", "test", "production"]),
    help="Override environment configuration",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, config_env: str | None, verbose: bool, debug: bool) -> None:
    """
    Budget Ledger - Personal Allowance and Allocation Tracker

    Track income, expenses, sinking funds and a percentage budget plan
    against a single allowance.
    """
    ctx.ensure_object(dict)

    if config_env:
        os.environ["LEDGER_ENV"] = config_env

    if debug:
        os.environ["LOG_LEVEL"] = "DEBUG"
        logging.getLogger().setLevel(logging.DEBUG)
        logging.getLogger("budget_ledger").setLevel(logging.DEBUG)

    ctx.obj["verbose"] = verbose
    ctx.obj["debug"] = debug
    try:
        # overrides only take effect on a fresh load
        ctx.obj["config"] = reload_config() if config_env or debug else get_config()
    except ValueError as e:
        raise click.ClickException(str(e)) from e

    if verbose:
        click.echo(f"Environment: {ctx.obj['config'].environment.value}")
        click.echo(f"Ledger file: {ctx.obj['config'].store_file}")

    if debug:
        click.echo("Debug logging enabled")


@main.command()
@click.pass_context
def version(ctx: click.Context) -> None:
    """Show version information."""
    from budget_ledger import __author__, __version__

    click.echo(f"Budget Ledger v{__version__}")
    click.echo(f"Author: {__author__}")


@main.command()
@click.pass_context
def config(ctx: click.Context) -> None:
    """Show current configuration."""
    config_obj = ctx.obj["config"]

    click.echo("Current Configuration:")
    click.echo(f"  Environment: {config_obj.environment.value}")
    click.echo(f"  Data Directory: {config_obj.data_dir}")
    click.echo(f"  Ledger File: {config_obj.store_file}")
    click.echo(f"  Catalog File: {config_obj.catalog_file or '(built-in categories)'}")
    click.echo(f"  User: {config_obj.user_id}")
    click.echo(f"  Currency Symbol: {config_obj.currency_symbol}")
    click.echo(f"  Debug Mode: {config_obj.debug}")
    click.echo(f"  Log Level: {config_obj.log_level}")


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Print the figures as JSON (amounts in cents)")
@click.option("--categories", is_flag=True, help="Also list the category catalog")
@click.pass_context
def summary(ctx: click.Context, as_json: bool, categories: bool) -> None:
    """Show allowance, spending, remaining balance and runway."""
    session = get_session(ctx)
    snapshot = run_engine(ctx, session.snapshot)
    figures = summarize(snapshot, session.catalog, session.now())

    if as_json:
        click.echo(format_json(figures.to_dict()))
        return

    runway = "unlimited" if math.isinf(figures.survival_days) else f"{figures.survival_days:.1f} days"
    click.echo("Ledger Summary:")
    click.echo(f"  Allowance:         {fmt(ctx, figures.allowance)}")
    click.echo(f"  Spent:             {fmt(ctx, figures.total_spent)}")
    click.echo(f"  Savings budget:    {fmt(ctx, figures.total_savings_budget)}")
    click.echo(f"  In sinking funds:  {fmt(ctx, figures.total_sinking_allocated)}")
    click.echo(f"  Remaining balance: {fmt(ctx, figures.remaining_balance)}")
    click.echo(f"  Daily average:     {fmt(ctx, figures.daily_average)}")
    click.echo(f"  Runway:            {runway}")
    click.echo(f"  Plan:              {'locked' if figures.is_plan_locked else 'none'}")

    if categories:
        click.echo("Categories:")
        for category in session.catalog:
            click.echo(f"  {category.id:<16} {category.name:<18} {category.classification.value}")


# Import command groups
from .entries import expense, income  # noqa: E402
from .funds import fund, savings  # noqa: E402
from .insights import insights  # noqa: E402
from .plan import allowance, plan, target  # noqa: E402
from .recurring import recurring  # noqa: E402

for command_group in (income, expense, fund, savings, plan, recurring, target, allowance, insights):
    main.add_command(command_group)


if __name__ == "__main__":
    main()
