"""Discipline and emotional state correlated with results."""

from __future__ import annotations

from ...core.enums import NEGATIVE_EMOTIONS, Emotion, InsightType, Severity
from ...core.models import Trade
from ..insight import Insight
from .base import Rule, RuleContext, win_rate

MIN_PLAN_TRADES = 5
MIN_EMOTION_TRADES = 3

# At least one of these must have a bucket before the disciplined comparison runs;
# fomo then joins the emotional average but cannot open the comparison alone
_GATING_EMOTIONS = frozenset({Emotion.GREEDY, Emotion.FEARFUL, Emotion.REVENGE})

# Not candidates for "worst emotion": these are the states we want to see
_CALM_EMOTIONS = frozenset({Emotion.DISCIPLINED, Emotion.CONFIDENT, Emotion.NEUTRAL})


def _plan_groups(ctx: RuleContext) -> tuple[list[Trade], list[Trade]]:
    followed = [t for t in ctx.closed if t.followed_plan]
    broke = [t for t in ctx.closed if not t.followed_plan]
    return followed, broke


def _emotion_buckets(ctx: RuleContext) -> dict[Emotion, list[Trade]]:
    """Closed trades per emotion, keeping only buckets large enough to judge."""
    buckets: dict[Emotion, list[Trade]] = {}
    for emotion in Emotion:
        trades = [t for t in ctx.closed if t.emotion == emotion]
        if len(trades) >= MIN_EMOTION_TRADES:
            buckets[emotion] = trades
    return buckets


def plan_adherence_insights(ctx: RuleContext) -> list[Insight]:
    followed, broke = _plan_groups(ctx)
    follower_wr = win_rate(followed)
    breaker_wr = win_rate(broke)
    difference = follower_wr - breaker_wr
    if difference <= 15:
        return []
    return [Insight(
        type=InsightType.DISCIPLINE,
        category="Psychology",
        title="Plan Adherence Critical",
        message=(
            f"Win rate is {follower_wr:.1f}% when following the plan vs "
            f"{breaker_wr:.1f}% when deviating."
        ),
        severity=Severity.HIGH,
        action="Your plan works when you follow it. Review it before every trade.",
        metrics={
            "follower_win_rate": follower_wr,
            "breaker_win_rate": breaker_wr,
            "difference": difference,
        },
    )]


def emotion_insights(ctx: RuleContext) -> list[Insight]:
    buckets = _emotion_buckets(ctx)
    insights: list[Insight] = []

    emotional = [e for e in Emotion if e in NEGATIVE_EMOTIONS and e in buckets]
    if Emotion.DISCIPLINED in buckets and _GATING_EMOTIONS & buckets.keys():
        disciplined_wr = win_rate(buckets[Emotion.DISCIPLINED])
        emotional_wr = sum(win_rate(buckets[e]) for e in emotional) / len(emotional)
        difference = disciplined_wr - emotional_wr
        if difference > 20:
            insights.append(Insight(
                type=InsightType.DISCIPLINE,
                category="Psychology",
                title="Emotional Trading Destroying Results",
                message=(
                    f"{disciplined_wr:.1f}% win rate when disciplined vs "
                    f"{emotional_wr:.1f}% when emotional: a {difference:.1f} point cost."
                ),
                severity=Severity.HIGH,
                action=(
                    "Check your emotional state before every trade. If you are "
                    "not calm and disciplined, do not trade."
                ),
                metrics={
                    "disciplined_win_rate": disciplined_wr,
                    "emotional_win_rate": emotional_wr,
                    "difference": difference,
                },
            ))

    worst: Emotion | None = None
    worst_wr = 100.0
    for emotion, trades in buckets.items():
        if emotion in _CALM_EMOTIONS:
            continue
        wr = win_rate(trades)
        if wr < worst_wr:
            worst, worst_wr = emotion, wr

    if worst is not None and worst_wr < 35:
        insights.append(Insight(
            type=InsightType.WARNING,
            category="Psychology",
            title=f"Avoid Trading When {worst.value.capitalize()}",
            message=f"Only {worst_wr:.1f}% win rate when feeling {worst.value}.",
            severity=Severity.HIGH,
            action=(
                f"Treat feeling {worst.value} as a stop signal. Take a break "
                "and come back with a clear head."
            ),
            related_trades=tuple(t.id for t in buckets[worst]),
            metrics={"emotion": worst.value, "win_rate": worst_wr},
        ))

    return insights


def _plan_gate(ctx: RuleContext) -> bool:
    followed, broke = _plan_groups(ctx)
    return len(followed) >= MIN_PLAN_TRADES and len(broke) >= MIN_PLAN_TRADES


RULES = [
    Rule("plan_adherence", _plan_gate, plan_adherence_insights),
    Rule("emotion", lambda ctx: bool(ctx.closed), emotion_insights),
]
