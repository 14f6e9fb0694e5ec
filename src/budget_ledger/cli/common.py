#!/usr/bin/env python3
"""
Shared CLI Plumbing

Session construction, parameter types and engine-error translation used by
every command module.
"""

import logging
from collections.abc import Callable
from typing import Any, TypeVar

import click

from ..catalog import get_catalog
from ..core.config import Config
from ..core.errors import InvalidAmountError, LedgerError
from ..core.money import Money
from ..store import JsonDocumentStore, LedgerSession, retry_on_conflict

logger = logging.getLogger(__name__)

T = TypeVar("T")


class MoneyParamType(click.ParamType):
    """Amount in major units ("1,250.50", "₱300") parsed to Money."""

    name = "amount"

    def convert(self, value: Any, param: click.Parameter | None, ctx: click.Context | None) -> Money:
        if isinstance(value, Money):
            return value
        try:
            return Money.parse(value)
        except InvalidAmountError as e:
            self.fail(str(e), param, ctx)


MONEY = MoneyParamType()
DATE = click.DateTime(formats=["%Y-%m-%d"])


def get_session(ctx: click.Context) -> LedgerSession:
    """Open (once per invocation) the configured user's ledger session."""
    obj = ctx.ensure_object(dict)
    if "session" not in obj:
        config: Config = obj["config"]
        store = JsonDocumentStore(config.store_file)
        obj["session"] = LedgerSession(store, config.user_id, catalog=get_catalog())
        logger.debug("Opened ledger %s for user %s", config.store_file, config.user_id)
    return obj["session"]


def symbol(ctx: click.Context) -> str:
    return ctx.find_object(dict)["config"].currency_symbol


def fmt(ctx: click.Context, amount: Money) -> str:
    return amount.format(symbol(ctx))


def run_engine(ctx: click.Context, operation: Callable[[], T]) -> T:
    """
    Run an engine operation, retrying conflicts and reporting rejections.

    Raises:
        click.ClickException: If the engine rejects the operation
    """
    attempts = ctx.find_object(dict)["config"].conflict_retries
    try:
        return retry_on_conflict(operation, attempts=attempts)
    except (LedgerError, ValueError) as e:
        logger.debug("Command rejected: %s", e)
        raise click.ClickException(str(e)) from e
