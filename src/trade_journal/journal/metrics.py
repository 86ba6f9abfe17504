"""Performance metrics over a trade history.

``compute`` turns a sequence of journaled trades into an
:class:`AnalyticsSnapshot`: rates and ratios, breakdowns by symbol,
strategy, time of day and market condition, period P&L, streaks,
drawdown and a Sharpe-like ratio.

Only ``closed`` trades participate in the statistics; open and partial
positions are counted and otherwise ignored.  The function is total:
empty input returns :meth:`AnalyticsSnapshot.empty` and no trade shape
makes it raise.

Precondition: trades are in chronological order.  Streaks follow the
input order as given, so an unsorted history yields wrong (but not
failing) streak figures.  Use :func:`sort_chronologically` when the
source order is unknown.

Usage::

    snapshot = compute(sort_chronologically(trades))
    print(snapshot.win_rate, snapshot.profit_factor)
    print(snapshot.by_strategy["breakout"].win_rate)
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime

import numpy as np

from ..core.enums import TradeOutcome
from ..core.models import Trade

logger = logging.getLogger(__name__)

# Profit factor reported when there are winning trades and no losses.
# A single finite cap keeps the value JSON-safe and comparable.
PROFIT_FACTOR_CAP = 999.0


@dataclass(frozen=True)
class BucketStats:
    """Trade count and results for one breakdown key."""

    trades: int = 0
    wins: int = 0
    total_pnl: float = 0.0

    @property
    def win_rate(self) -> float:
        """Percentage of trades in the bucket that were wins."""
        return _pct(self.wins, self.trades)

    @property
    def avg_pnl(self) -> float:
        return _ratio(self.total_pnl, self.trades)


@dataclass(frozen=True)
class PeriodPnl:
    """Net P&L summed over one calendar period."""

    period: str  # "2024-03-15", "2024-W11" or "2024-03"
    pnl: float


@dataclass(frozen=True)
class AnalyticsSnapshot:
    """Derived aggregate of a trade history.  Recomputed on every call."""

    # Mapping fields: equal-comparable, not hashable
    __hash__ = None

    # Counts
    total_trades: int = 0
    closed_trades: int = 0
    open_trades: int = 0
    wins: int = 0
    losses: int = 0
    breakevens: int = 0
    partial_exit_trades: int = 0

    # Results
    win_rate: float = 0.0
    total_pnl: float = 0.0
    gross_profit: float = 0.0
    gross_loss: float = 0.0  # Absolute value
    average_win: float = 0.0
    average_loss: float = 0.0  # Absolute value
    largest_win: float = 0.0
    largest_loss: float = 0.0
    profit_factor: float = 0.0
    expectancy: float = 0.0
    win_loss_ratio: float = 0.0
    avg_rr: float = 0.0
    rr_samples: int = 0  # Closed trades with a recorded actual R:R
    best_trade: Trade | None = None
    worst_trade: Trade | None = None

    # Breakdowns (keys that never occur are absent)
    by_symbol: Mapping[str, BucketStats] = field(default_factory=dict)
    by_strategy: Mapping[str, BucketStats] = field(default_factory=dict)
    by_time_of_day: Mapping[str, BucketStats] = field(default_factory=dict)
    by_market_condition: Mapping[str, BucketStats] = field(default_factory=dict)

    # Period P&L, ascending by period key
    pnl_by_day: tuple[PeriodPnl, ...] = ()
    pnl_by_week: tuple[PeriodPnl, ...] = ()
    pnl_by_month: tuple[PeriodPnl, ...] = ()

    # Sequence-dependent figures
    max_consecutive_wins: int = 0
    max_consecutive_losses: int = 0
    current_streak: int = 0  # Positive = wins, negative = losses
    avg_hold_time_hours: float = 0.0
    sharpe_ratio: float = 0.0
    max_drawdown: float = 0.0
    recovery_factor: float = 0.0

    @classmethod
    def empty(cls) -> AnalyticsSnapshot:
        """The all-zero snapshot returned for an empty history."""
        return cls()

    # ------------------------------------------------------------------ #
    # Flat views in the shape dashboards expect                            #
    # ------------------------------------------------------------------ #

    @property
    def trades_by_symbol(self) -> dict[str, int]:
        return {k: b.trades for k, b in self.by_symbol.items()}

    @property
    def trades_by_strategy(self) -> dict[str, int]:
        return {k: b.trades for k, b in self.by_strategy.items()}

    @property
    def win_rate_by_strategy(self) -> dict[str, float]:
        return {k: b.win_rate for k, b in self.by_strategy.items()}

    @property
    def trades_by_time_of_day(self) -> dict[str, int]:
        return {k: b.trades for k, b in self.by_time_of_day.items()}

    @property
    def trades_by_market_condition(self) -> dict[str, int]:
        return {k: b.trades for k, b in self.by_market_condition.items()}


# ---------------------------------------------------------------------- #
# Arithmetic guards                                                        #
# ---------------------------------------------------------------------- #

def _ratio(numerator: float, denominator: float) -> float:
    if denominator == 0:
        return 0.0
    return numerator / denominator


def _pct(part: float, whole: float) -> float:
    return _ratio(part, whole) * 100


# ---------------------------------------------------------------------- #
# Building blocks (public so each invariant is testable on its own)       #
# ---------------------------------------------------------------------- #

def sort_chronologically(trades: Iterable[Trade]) -> list[Trade]:
    """Order trades by exit date, falling back to entry date.

    The sort is stable: trades sharing a timestamp keep their
    relative order.
    """
    return sorted(trades, key=lambda t: t.sort_date)


def profit_factor(gross_profit: float, gross_loss: float) -> float:
    """Winning P&L over absolute losing P&L, capped at ``PROFIT_FACTOR_CAP``."""
    gross_loss = abs(gross_loss)
    if gross_loss == 0:
        return PROFIT_FACTOR_CAP if gross_profit > 0 else 0.0
    return gross_profit / gross_loss


def compute_streaks(outcomes: Iterable[TradeOutcome]) -> tuple[int, int, int]:
    """Walk outcomes in order and measure runs.

    A signed counter moves to +1 / -1 when the outcome flips, grows on
    repetition, and drops to 0 on anything that is neither a win nor a
    loss.

    Returns
    -------
    tuple
        ``(max_consecutive_wins, max_consecutive_losses, current_streak)``
    """
    current = 0
    max_wins = 0
    max_losses = 0
    for outcome in outcomes:
        if outcome == TradeOutcome.WIN:
            current = current + 1 if current > 0 else 1
            max_wins = max(max_wins, current)
        elif outcome == TradeOutcome.LOSS:
            current = current - 1 if current < 0 else -1
            max_losses = max(max_losses, -current)
        else:
            current = 0
    return max_wins, max_losses, current


def max_drawdown(equity_curve: Sequence[float]) -> float:
    """Largest peak-to-trough fall of a cumulative P&L curve.

    The running peak starts at zero: the account starts flat, so a
    curve that opens below zero is already in drawdown.
    """
    curve = np.asarray(equity_curve, dtype=float)
    if curve.size == 0:
        return 0.0
    peaks = np.maximum.accumulate(np.maximum(curve, 0.0))
    return float((peaks - curve).max())


def sharpe_ratio(period_pnl: Sequence[float]) -> float:
    """Mean period P&L over its population standard deviation.

    0.0 with fewer than two periods or zero dispersion.
    """
    values = np.asarray(period_pnl, dtype=float)
    if values.size < 2:
        return 0.0
    std = float(np.std(values))
    if std == 0:
        return 0.0
    return float(np.mean(values)) / std


def _day_key(ts: datetime) -> str:
    return ts.date().isoformat()


def _week_key(ts: datetime) -> str:
    year, week, _ = ts.isocalendar()
    return f"{year}-W{week:02d}"


def _month_key(ts: datetime) -> str:
    return f"{ts.year:04d}-{ts.month:02d}"


def _pnl_by_period(
    trades: Iterable[Trade],
    key: Callable[[datetime], str],
) -> tuple[PeriodPnl, ...]:
    totals: dict[str, float] = {}
    for t in trades:
        if t.exit_date is None:
            continue
        k = key(t.exit_date)
        totals[k] = totals.get(k, 0.0) + t.net_pnl
    return tuple(PeriodPnl(k, totals[k]) for k in sorted(totals))


def _breakdown(
    trades: Iterable[Trade],
    key: Callable[[Trade], str | None],
) -> dict[str, BucketStats]:
    counts: dict[str, list] = {}
    for t in trades:
        k = key(t)
        if k is None or k == "":
            continue
        acc = counts.setdefault(k, [0, 0, 0.0])
        acc[0] += 1
        if t.outcome == TradeOutcome.WIN:
            acc[1] += 1
        acc[2] += t.net_pnl
    return {k: BucketStats(trades=n, wins=w, total_pnl=p) for k, (n, w, p) in counts.items()}


# ---------------------------------------------------------------------- #
# Entry point                                                              #
# ---------------------------------------------------------------------- #

def compute(trades: Sequence[Trade]) -> AnalyticsSnapshot:
    """Compute the analytics snapshot for a chronologically ordered history."""
    closed = [t for t in trades if t.is_closed]
    if not closed:
        logger.debug("No closed trades among %d; returning empty snapshot", len(trades))
        if not trades:
            return AnalyticsSnapshot.empty()
        return AnalyticsSnapshot(total_trades=len(trades), open_trades=len(trades))

    wins = [t for t in closed if t.outcome == TradeOutcome.WIN]
    losses = [t for t in closed if t.outcome == TradeOutcome.LOSS]
    n = len(closed)

    gross_profit = sum(t.net_pnl for t in wins)
    gross_loss = abs(sum(t.net_pnl for t in losses))
    total_pnl = sum(t.net_pnl for t in closed)
    average_win = _ratio(gross_profit, len(wins))
    average_loss = _ratio(gross_loss, len(losses))

    rr_values = [t.actual_rr for t in closed if t.actual_rr]
    holds = [h for h in (t.hold_hours for t in closed) if h is not None]

    max_wins, max_losses, current = compute_streaks(t.outcome for t in closed)

    by_day = _pnl_by_period(closed, _day_key)
    daily = [p.pnl for p in by_day]
    drawdown = max_drawdown(np.cumsum(daily)) if daily else 0.0

    snapshot = AnalyticsSnapshot(
        total_trades=len(trades),
        closed_trades=n,
        open_trades=len(trades) - n,
        wins=len(wins),
        losses=len(losses),
        breakevens=sum(1 for t in closed if t.outcome == TradeOutcome.BREAKEVEN),
        partial_exit_trades=sum(1 for t in closed if t.partial_exits),
        win_rate=_pct(len(wins), n),
        total_pnl=total_pnl,
        gross_profit=gross_profit,
        gross_loss=gross_loss,
        average_win=average_win,
        average_loss=average_loss,
        largest_win=max((t.net_pnl for t in wins), default=0.0),
        largest_loss=min((t.net_pnl for t in losses), default=0.0),
        profit_factor=profit_factor(gross_profit, gross_loss),
        expectancy=total_pnl / n,
        win_loss_ratio=_ratio(average_win, average_loss),
        avg_rr=_ratio(sum(rr_values), len(rr_values)),
        rr_samples=len(rr_values),
        best_trade=max(closed, key=lambda t: t.net_pnl),
        worst_trade=min(closed, key=lambda t: t.net_pnl),
        by_symbol=_breakdown(closed, lambda t: t.symbol),
        by_strategy=_breakdown(closed, lambda t: t.strategy_id),
        by_time_of_day=_breakdown(
            closed, lambda t: t.time_of_day.value if t.time_of_day else None
        ),
        by_market_condition=_breakdown(
            closed, lambda t: t.market_condition.value if t.market_condition else None
        ),
        pnl_by_day=by_day,
        pnl_by_week=_pnl_by_period(closed, _week_key),
        pnl_by_month=_pnl_by_period(closed, _month_key),
        max_consecutive_wins=max_wins,
        max_consecutive_losses=max_losses,
        current_streak=current,
        avg_hold_time_hours=_ratio(sum(holds), len(holds)),
        sharpe_ratio=sharpe_ratio(daily),
        max_drawdown=drawdown,
        recovery_factor=_ratio(total_pnl, drawdown),
    )
    logger.debug(
        "Computed analytics: %d trades (%d closed) win_rate=%.1f pf=%.2f dd=%.2f",
        snapshot.total_trades,
        snapshot.closed_trades,
        snapshot.win_rate,
        snapshot.profit_factor,
        snapshot.max_drawdown,
    )
    return snapshot
