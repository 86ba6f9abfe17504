"""Per-strategy compliance against the strategy's own targets."""

from __future__ import annotations

import logging

from ...core.enums import InsightType, Severity
from ..insight import Insight
from .base import Rule, RuleContext, avg_net_pnl, ids, win_rate

logger = logging.getLogger(__name__)

MIN_STRATEGY_TRADES = 5


def strategy_compliance_insights(ctx: RuleContext) -> list[Insight]:
    insights: list[Insight] = []

    for strategy in ctx.strategies:
        trades = [t for t in ctx.closed if t.strategy_id == strategy.id]
        if len(trades) < MIN_STRATEGY_TRADES:
            continue

        wr = win_rate(trades)
        avg_pnl = avg_net_pnl(trades)
        avg_rr = sum(t.actual_rr for t in trades) / len(trades)
        rr_gap = avg_rr - strategy.target_rr
        related = ids(trades)

        if wr < 50 and avg_pnl < 0:
            insights.append(Insight(
                type=InsightType.DANGER,
                category="Strategy",
                title=f"{strategy.name} Underperforming",
                message=(
                    f"This strategy wins {wr:.1f}% of the time and loses "
                    f"{ctx.money(abs(avg_pnl))} per trade on average."
                ),
                severity=Severity.HIGH,
                action=(
                    f'Pause "{strategy.name}" until it is reviewed. '
                    f"Setup: {strategy.setup or '-'}. Entry: {strategy.entry or '-'}. "
                    f"Exit: {strategy.exit or '-'}."
                ),
                related_trades=related,
                metrics={
                    "win_rate": wr,
                    "avg_pnl": avg_pnl,
                    "target_rr": strategy.target_rr,
                    "actual_rr": avg_rr,
                },
            ))
        elif rr_gap < -0.5:
            insights.append(Insight(
                type=InsightType.WARNING,
                category="Strategy",
                title=f"{strategy.name} Missing R:R Target",
                message=(
                    f"Target R:R is {strategy.target_rr:g} but you are achieving "
                    f"{avg_rr:.2f}. Exits are too early or stops too wide."
                ),
                severity=Severity.MEDIUM,
                action="Review the exit rules. Consider trailing stops or scaling out.",
                related_trades=related,
                metrics={
                    "target_rr": strategy.target_rr,
                    "actual_rr": avg_rr,
                    "difference": rr_gap,
                },
            ))
        elif wr > 65 and avg_pnl > 0:
            insights.append(Insight(
                type=InsightType.SUCCESS,
                category="Strategy",
                title=f"{strategy.name} Performing Well",
                message=(
                    f"{wr:.1f}% win rate with {ctx.money(avg_pnl)} average profit, "
                    f"{avg_rr:.2f} R:R against a {strategy.target_rr:g} target."
                ),
                severity=Severity.LOW,
                action=(
                    f'"{strategy.name}" is your edge. Consider allocating more '
                    "capital to it and write down what makes it work."
                ),
                related_trades=related,
                metrics={"win_rate": wr, "avg_pnl": avg_pnl, "actual_rr": avg_rr},
            ))
        else:
            logger.debug("Strategy %s within tolerance (wr=%.1f)", strategy.id, wr)

    return insights


RULES = [
    Rule("strategy_compliance", lambda ctx: bool(ctx.strategies), strategy_compliance_insights),
]
