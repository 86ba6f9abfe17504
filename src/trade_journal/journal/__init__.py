"""Trade journal analytics and insight generation.

Everything here is a pure function of an immutable trade-history
snapshot: nothing is cached, persisted or shared between calls.

Key components
--------------
**Metrics**

compute               History -> AnalyticsSnapshot (rates, ratios, breakdowns,
                      streaks, drawdown, Sharpe-like ratio)
calculations          Per-trade formulas (P&L, R:R, outcome, account totals)

**Insights**

InsightEngine         Declarative rule table -> severity-ordered Insight list
TradeScorer           Single-trade review with a 0-100 execution score

**Input / Output**

JournalSnapshot       Validated bundle of account, trades, strategies, checklists
AnalyticsExporter     JSON-safe dicts, JSON text and period CSV
"""

from .engine import InsightEngine, evaluate
from .export import AnalyticsExporter
from .insight import Insight, sort_by_severity
from .metrics import (
    PROFIT_FACTOR_CAP,
    AnalyticsSnapshot,
    BucketStats,
    PeriodPnl,
    compute,
    sort_chronologically,
)
from .scorer import TradeAnalysis, TradeScorer, score
from .snapshot import JournalSnapshot, load_snapshot, parse_snapshot

__all__ = [
    "PROFIT_FACTOR_CAP",
    "AnalyticsSnapshot",
    "BucketStats",
    "PeriodPnl",
    "compute",
    "sort_chronologically",
    "Insight",
    "sort_by_severity",
    "InsightEngine",
    "evaluate",
    "TradeAnalysis",
    "TradeScorer",
    "score",
    "JournalSnapshot",
    "load_snapshot",
    "parse_snapshot",
    "AnalyticsExporter",
]
