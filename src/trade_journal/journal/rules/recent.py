"""Recent form: the last ten closed trades, newest first."""

from __future__ import annotations

from ...core.enums import InsightType, Severity
from ...core.models import Trade
from ..insight import Insight
from .base import Rule, RuleContext, count_wins, ids, pct

RECENT_WINDOW = 10


def recent_trades(ctx: RuleContext) -> list[Trade]:
    """Most recent closed trades by exit (or entry) date, newest first."""
    ordered = sorted(ctx.closed, key=lambda t: t.sort_date, reverse=True)
    return ordered[:RECENT_WINDOW]


def recent_form_insights(ctx: RuleContext) -> list[Insight]:
    recent = recent_trades(ctx)
    wins = count_wins(recent)
    wr = pct(wins, len(recent))
    pnl = sum(t.net_pnl for t in recent)
    metrics = {"recent_wins": wins, "recent_win_rate": wr, "recent_pnl": pnl}

    if wins >= 7:
        return [Insight(
            type=InsightType.SUCCESS,
            category="Recent Form",
            title="On Fire! Hot Streak",
            message=(
                f"{wins} wins in the last {len(recent)} trades ({wr:.0f}% win rate). "
                f"Total: {ctx.money(pnl)}."
            ),
            severity=Severity.LOW,
            action="Good momentum. Stay on plan and do not raise risk out of confidence.",
            metrics=metrics,
        )]
    if wins <= 3:
        return [Insight(
            type=InsightType.DANGER,
            category="Recent Form",
            title="Cold Streak - Immediate Action Required",
            message=(
                f"Only {wins} wins in the last {len(recent)} trades ({wr:.0f}% win rate). "
                f"Net: {ctx.money(pnl)}."
            ),
            severity=Severity.HIGH,
            action=(
                "Stop and review these trades now. What changed: forced setups, "
                "different market conditions? Take a break if needed."
            ),
            related_trades=ids(recent),
            metrics=metrics,
        )]
    return []


RULES = [
    Rule("recent_form", lambda ctx: len(ctx.closed) >= RECENT_WINDOW, recent_form_insights),
]
