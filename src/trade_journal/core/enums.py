"""Enumerations used across the trade journal."""

from enum import Enum


class Direction(str, Enum):
    LONG = "long"
    SHORT = "short"


class TradeStatus(str, Enum):
    OPEN = "open"
    CLOSED = "closed"
    PARTIAL = "partial"


class TradeOutcome(str, Enum):
    WIN = "win"
    LOSS = "loss"
    BREAKEVEN = "breakeven"
    PENDING = "pending"


class Emotion(str, Enum):
    """Self-reported emotional state at entry."""

    CONFIDENT = "confident"
    FEARFUL = "fearful"
    GREEDY = "greedy"
    NEUTRAL = "neutral"
    DISCIPLINED = "disciplined"
    REVENGE = "revenge"
    FOMO = "fomo"


# Emotional states treated as compromised decision-making
NEGATIVE_EMOTIONS: frozenset[Emotion] = frozenset({
    Emotion.FEARFUL,
    Emotion.GREEDY,
    Emotion.REVENGE,
    Emotion.FOMO,
})


class TimeOfDay(str, Enum):
    PREMARKET = "premarket"
    MORNING = "morning"
    MIDDAY = "midday"
    AFTERNOON = "afternoon"
    AFTERHOURS = "afterhours"


class MarketCondition(str, Enum):
    TRENDING = "trending"
    RANGING = "ranging"
    VOLATILE = "volatile"
    QUIET = "quiet"


class AccountType(str, Enum):
    LIVE = "live"
    DEMO = "demo"
    PAPER = "paper"


class ChecklistCategory(str, Enum):
    PRE_TRADE = "pre-trade"
    DURING_TRADE = "during-trade"
    POST_TRADE = "post-trade"


class Severity(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        """Sort rank: high first."""
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {Severity.HIGH: 0, Severity.MEDIUM: 1, Severity.LOW: 2}


class InsightType(str, Enum):
    SUCCESS = "success"
    WARNING = "warning"
    DANGER = "danger"
    INFO = "info"
    STRATEGY = "strategy"
    CHECKLIST = "checklist"
    DISCIPLINE = "discipline"
