"""Shared fixtures for journal tests."""

from datetime import datetime, timedelta, timezone

import pytest

from trade_journal.core.enums import Direction, TradeOutcome, TradeStatus
from trade_journal.core.models import (
    Account,
    ChecklistItem,
    ChecklistTemplate,
    Strategy,
    Trade,
)

BASE_TIME = datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def base_time():
    return BASE_TIME


@pytest.fixture
def account():
    return make_account()


def make_account(
    balance: float = 10_000.0,
    invested_amount: float = 10_000.0,
    currency: str = "USD",
) -> Account:
    """Helper to create an Account."""
    return Account(
        id="acc_1",
        name="Main",
        currency=currency,
        balance=balance,
        invested_amount=invested_amount,
    )


def make_trade(
    net_pnl: float = 100.0,
    index: int = 0,
    outcome: TradeOutcome | None = None,
    status: TradeStatus = TradeStatus.CLOSED,
    trade_id: str | None = None,
    **fields,
) -> Trade:
    """Helper to create a closed trade exiting ``index`` days after BASE_TIME.

    The outcome follows the sign of ``net_pnl`` unless given.
    """
    if outcome is None:
        if net_pnl > 0:
            outcome = TradeOutcome.WIN
        elif net_pnl < 0:
            outcome = TradeOutcome.LOSS
        else:
            outcome = TradeOutcome.BREAKEVEN
    entry = BASE_TIME + timedelta(days=index)
    defaults = dict(
        id=trade_id or f"tr_{index}",
        account_id="acc_1",
        symbol="EURUSD",
        direction=Direction.LONG,
        entry_price=1.1000,
        exit_price=1.1050,
        entry_date=entry,
        exit_date=entry + timedelta(hours=2) if status == TradeStatus.CLOSED else None,
        status=status,
        outcome=outcome if status == TradeStatus.CLOSED else TradeOutcome.PENDING,
        pnl=net_pnl,
        net_pnl=net_pnl,
    )
    defaults.update(fields)
    return Trade(**defaults)


def make_series(pnls: list[float], **fields) -> list[Trade]:
    """One closed trade per day with the given net P&L values."""
    return [make_trade(p, index=i, **fields) for i, p in enumerate(pnls)]


def make_win_loss(wins: int, losses: int, win_pnl: float = 100.0, loss_pnl: float = -50.0,
                  **fields) -> list[Trade]:
    """``wins`` winners followed by ``losses`` losers, chronologically."""
    return make_series([win_pnl] * wins + [loss_pnl] * losses, **fields)


def make_strategy(
    strategy_id: str = "strat_1",
    name: str = "Breakout",
    target_rr: float = 2.0,
    markets: tuple[str, ...] = (),
) -> Strategy:
    return Strategy(id=strategy_id, name=name, target_rr=target_rr, markets=markets)


def make_checklist(*items: tuple[str, bool]) -> ChecklistTemplate:
    """Template from ``(item_id, required)`` pairs."""
    return ChecklistTemplate(
        id="cl_1",
        name="Pre-trade",
        items=tuple(
            ChecklistItem(id=item_id, text=f"Check {item_id}", required=required)
            for item_id, required in items
        ),
    )
