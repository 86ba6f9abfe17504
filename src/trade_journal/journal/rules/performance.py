"""Headline performance thresholds: win rate, profit factor, R:R, expectancy."""

from __future__ import annotations

from ...core.enums import InsightType, Severity
from ..insight import Insight
from .base import Rule, RuleContext, min_closed, pct


def win_rate_insights(ctx: RuleContext) -> list[Insight]:
    wr = ctx.snapshot.win_rate
    if wr >= 60:
        return [Insight(
            type=InsightType.SUCCESS,
            category="Performance",
            title="Excellent Win Rate",
            message=(
                f"Your win rate of {wr:.1f}% is above the 60% benchmark. "
                "Trade selection and entry timing are working."
            ),
            severity=Severity.LOW,
            action=(
                "Keep the current approach and keep documenting what your "
                "winning trades have in common."
            ),
            metrics={"win_rate": wr, "benchmark": 60},
        )]
    if wr < 40:
        return [Insight(
            type=InsightType.DANGER,
            category="Performance",
            title="Low Win Rate Alert",
            message=(
                f"Your win rate of {wr:.1f}% is below the 40% threshold, "
                "which points at trade selection or timing."
            ),
            severity=Severity.HIGH,
            action=(
                "Review the losing trades: early or late entries, stop "
                "placement, setups that do not meet your criteria. Tighten "
                "entry rules."
            ),
            metrics={"win_rate": wr, "benchmark": 40},
        )]
    if wr < 50:
        return [Insight(
            type=InsightType.WARNING,
            category="Performance",
            title="Below-Average Win Rate",
            message=f"Win rate of {wr:.1f}% is below 50%. Not critical, but there is room to improve.",
            severity=Severity.MEDIUM,
            action="Check setup quality and be more selective with entries.",
            metrics={"win_rate": wr, "benchmark": 50},
        )]
    return []


def profit_factor_insights(ctx: RuleContext) -> list[Insight]:
    pf = ctx.snapshot.profit_factor
    if pf >= 2.5:
        return [Insight(
            type=InsightType.SUCCESS,
            category="Risk Management",
            title="Superior Profit Factor",
            message=f"Profit factor of {pf:.2f} is excellent. Wins clearly outweigh losses.",
            severity=Severity.LOW,
            action=(
                "Document what is working. Consider a modest size increase "
                "if your risk limits allow it."
            ),
            metrics={"profit_factor": pf, "benchmark": 2.5},
        )]
    if pf < 1.5:
        return [Insight(
            type=InsightType.DANGER,
            category="Risk Management",
            title="Low Profit Factor",
            message=f"Profit factor of {pf:.2f} means losses are eating most of the profits.",
            severity=Severity.HIGH,
            action="Let winners run longer and cut losers sooner. Review the exit plan.",
            metrics={"profit_factor": pf, "benchmark": 1.5},
        )]
    return []


def risk_reward_insights(ctx: RuleContext) -> list[Insight]:
    rr = ctx.snapshot.avg_rr
    if rr >= 2:
        return [Insight(
            type=InsightType.SUCCESS,
            category="Risk Management",
            title="Excellent Risk-Reward",
            message=f"Average R:R of {rr:.2f} shows you are well paid for the risk you take.",
            severity=Severity.LOW,
            action="Hold on to this discipline as position size grows.",
            metrics={"avg_rr": rr, "benchmark": 2},
        )]
    if rr < 1:
        return [Insight(
            type=InsightType.DANGER,
            category="Risk Management",
            title="Poor Risk-Reward Ratio",
            message=f"Average R:R of {rr:.2f} means you risk more than you make per trade.",
            severity=Severity.HIGH,
            action="Widen targets, tighten stops, or both. Never risk more than the planned reward.",
            metrics={"avg_rr": rr, "benchmark": 1},
        )]
    return []


def expectancy_insights(ctx: RuleContext) -> list[Insight]:
    expectancy = ctx.snapshot.expectancy
    if expectancy > 0:
        roi = pct(expectancy, ctx.account.balance)
        return [Insight(
            type=InsightType.SUCCESS,
            category="Performance",
            title="Positive Expectancy",
            message=(
                f"Your system expects {ctx.money(expectancy)} per trade "
                f"({roi:.2f}% of balance)."
            ),
            severity=Severity.LOW,
            action="The edge is there. Focus on consistency and position sizing.",
            metrics={"expectancy": expectancy, "per_trade_roi": roi},
        )]
    return [Insight(
        type=InsightType.DANGER,
        category="Performance",
        title="Negative Expectancy",
        message=(
            f"Expectancy of {ctx.money(expectancy)} per trade means this system "
            "loses money over time."
        ),
        severity=Severity.HIGH,
        action=(
            "Stop trading this system. Revise the strategy, get a mentor, or "
            "paper trade until it is profitable."
        ),
        metrics={"expectancy": expectancy},
    )]


def _rr_gate(ctx: RuleContext) -> bool:
    # avg_rr is 0.0 with no samples: nothing was recorded
    return min_closed(10)(ctx) and ctx.snapshot.rr_samples > 0


RULES = [
    Rule("win_rate", min_closed(20), win_rate_insights),
    Rule("profit_factor", min_closed(10), profit_factor_insights),
    Rule("risk_reward", _rr_gate, risk_reward_insights),
    Rule("expectancy", min_closed(20), expectancy_insights),
]
