"""Per-trade financial formulas.

Pure helpers used when a trade is recorded (by the storage layer) and
when the analytics need to re-derive a value.  None of them raise:
a zero risk distance yields 0.0 rather than a division error.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from ..core.enums import Direction, TradeOutcome
from ..core.models import Trade


@dataclass(frozen=True)
class PnLBreakdown:
    """Gross / net result of a trade and its move in percent."""

    gross_pnl: float
    net_pnl: float
    pnl_percentage: float
    total_costs: float


def _price_move(direction: Direction, entry_price: float, exit_price: float) -> float:
    """Favourable price distance (positive = profit)."""
    if direction == Direction.LONG:
        return exit_price - entry_price
    return entry_price - exit_price


def calculate_pnl(
    direction: Direction,
    entry_price: float,
    exit_price: float,
    lot_size: float,
    quantity: float,
    fees: float = 0.0,
    commissions: float = 0.0,
    slippage: float = 0.0,
) -> PnLBreakdown:
    """Gross and net P&L for a position.

    Slippage is a per-unit price cost, so it scales with
    ``quantity * lot_size``; fees and commissions are flat amounts.
    """
    move = _price_move(direction, entry_price, exit_price)
    units = quantity * lot_size
    gross = move * units
    costs = fees + commissions + slippage * units
    pct = (move / entry_price) * 100 if entry_price else 0.0
    return PnLBreakdown(
        gross_pnl=gross,
        net_pnl=gross - costs,
        pnl_percentage=pct,
        total_costs=costs,
    )


def calculate_risk_reward(
    direction: Direction,
    entry_price: float,
    stop_loss: float,
    take_profit: float,
) -> float:
    """Planned reward distance divided by risk distance."""
    risk = _price_move(direction, stop_loss, entry_price)
    reward = _price_move(direction, entry_price, take_profit)
    if risk == 0:
        return 0.0
    return reward / risk


def calculate_actual_rr(
    direction: Direction,
    entry_price: float,
    exit_price: float,
    stop_loss: float,
) -> float:
    """Realised reward in units of the planned risk (R-multiple)."""
    risk = _price_move(direction, stop_loss, entry_price)
    if risk == 0:
        return 0.0
    return _price_move(direction, entry_price, exit_price) / risk


def determine_outcome(net_pnl: float, threshold: float = 0.0) -> TradeOutcome:
    """Classify a result, treating ``|net_pnl| <= threshold`` as breakeven."""
    if abs(net_pnl) <= threshold:
        return TradeOutcome.BREAKEVEN
    return TradeOutcome.WIN if net_pnl > 0 else TradeOutcome.LOSS


def outcome_is_consistent(trade: Trade, threshold: float = 0.0) -> bool:
    """Check a closed trade's recorded outcome against its net P&L.

    Open and pending trades are always consistent.
    """
    if not trade.is_closed or trade.outcome == TradeOutcome.PENDING:
        return True
    return trade.outcome == determine_outcome(trade.net_pnl, threshold)


def account_total_pnl(trades: Iterable[Trade]) -> float:
    """Sum of net P&L across an account's trades.

    Net (not gross) P&L is used everywhere an account total is derived.
    """
    return sum((t.net_pnl for t in trades), 0.0)


def account_balance(initial_balance: float, trades: Iterable[Trade]) -> float:
    """Running balance: starting capital plus all net P&L."""
    return initial_balance + account_total_pnl(trades)
