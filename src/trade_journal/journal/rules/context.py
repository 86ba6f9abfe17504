"""Performance by trading context: time of day and market condition."""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum

from ...core.enums import InsightType, MarketCondition, Severity, TimeOfDay
from ...core.models import Trade
from ..insight import Insight
from .base import Rule, RuleContext, win_rate

MIN_BUCKET_TRADES = 5


def _bucket_win_rates(
    trades: Iterable[Trade],
    keys: Iterable[Enum],
    attr: str,
) -> list[tuple[Enum, float, int]]:
    """(key, win rate, count) for each bucket with enough trades, in key order."""
    trades = list(trades)
    rows = []
    for key in keys:
        bucket = [t for t in trades if getattr(t, attr) == key]
        if len(bucket) >= MIN_BUCKET_TRADES:
            rows.append((key, win_rate(bucket), len(bucket)))
    return rows


def _best(rows):
    """First bucket with the strictly highest win rate above zero."""
    best, best_wr = None, 0.0
    for key, wr, _ in rows:
        if wr > best_wr:
            best, best_wr = key, wr
    return best, best_wr


def _worst(rows):
    worst, worst_wr = None, 100.0
    for key, wr, _ in rows:
        if wr < worst_wr:
            worst, worst_wr = key, wr
    return worst, worst_wr


def _label(key: Enum) -> str:
    return key.value.capitalize()


def time_of_day_insights(ctx: RuleContext) -> list[Insight]:
    rows = _bucket_win_rates(ctx.closed, TimeOfDay, "time_of_day")
    insights: list[Insight] = []

    best, best_wr = _best(rows)
    if best is not None and best_wr > 60:
        insights.append(Insight(
            type=InsightType.INFO,
            category="Timing",
            title=f"{_label(best)} is Your Best Time",
            message=f"{best_wr:.1f}% win rate during {best.value} sessions. This is your edge window.",
            severity=Severity.MEDIUM,
            action=f"Concentrate your trading in the {best.value} window.",
            metrics={"time_slot": best.value, "win_rate": best_wr},
        ))

    worst, worst_wr = _worst(rows)
    if worst is not None and worst_wr < 40:
        insights.append(Insight(
            type=InsightType.WARNING,
            category="Timing",
            title=f"Avoid Trading During {_label(worst)}",
            message=f"Only {worst_wr:.1f}% win rate during {worst.value}. Profits leak in this window.",
            severity=Severity.MEDIUM,
            action=f"Stop trading during {worst.value} and focus on your best window.",
            metrics={"time_slot": worst.value, "win_rate": worst_wr},
        ))

    return insights


def market_condition_insights(ctx: RuleContext) -> list[Insight]:
    rows = _bucket_win_rates(ctx.closed, MarketCondition, "market_condition")
    best, best_wr = _best(rows)
    if best is None or best_wr <= 65:
        return []
    return [Insight(
        type=InsightType.INFO,
        category="Market Conditions",
        title=f"Excels in {_label(best)} Markets",
        message=f"{best_wr:.1f}% win rate in {best.value} conditions. This is your ideal environment.",
        severity=Severity.LOW,
        action=f"Be selective: wait for {best.value} conditions before taking trades.",
        metrics={"condition": best.value, "win_rate": best_wr},
    )]


RULES = [
    Rule("time_of_day", lambda ctx: bool(ctx.closed), time_of_day_insights),
    Rule("market_condition", lambda ctx: bool(ctx.closed), market_condition_insights),
]
