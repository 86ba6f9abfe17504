"""Analytics export: JSON-safe dicts, JSON text and period CSV.

Turns engine output into shapes a presentation layer can ship as-is.
Nothing here feeds back into the analytics.

Usage::

    exporter = AnalyticsExporter()
    payload = exporter.snapshot_to_dict(snapshot)
    json_str = exporter.to_json({"analytics": payload,
                                 "insights": exporter.insights_to_dicts(insights)})
    csv_str = exporter.periods_to_csv(snapshot, period="weekly")
"""

from __future__ import annotations

import csv
import io
import json
import logging
from collections.abc import Iterable, Mapping
from typing import Any

from ..core.models import Trade
from .insight import Insight
from .metrics import AnalyticsSnapshot, BucketStats, PeriodPnl
from .scorer import TradeAnalysis

logger = logging.getLogger(__name__)

_PERIODS = ("daily", "weekly", "monthly")


class AnalyticsExporter:
    """Serialise snapshots, insights and trade reviews.

    Parameters
    ----------
    decimal_places : int
        Rounding precision for numeric fields.  Default 4.
    """

    def __init__(self, *, decimal_places: int = 4) -> None:
        self._dp = decimal_places

    # ------------------------------------------------------------------ #
    # Dict export                                                          #
    # ------------------------------------------------------------------ #

    def snapshot_to_dict(self, snapshot: AnalyticsSnapshot) -> dict[str, Any]:
        """Flatten a snapshot into JSON-safe primitives."""
        r = self._round
        return {
            "total_trades": snapshot.total_trades,
            "closed_trades": snapshot.closed_trades,
            "open_trades": snapshot.open_trades,
            "wins": snapshot.wins,
            "losses": snapshot.losses,
            "breakevens": snapshot.breakevens,
            "partial_exit_trades": snapshot.partial_exit_trades,
            "win_rate": r(snapshot.win_rate),
            "total_pnl": r(snapshot.total_pnl),
            "gross_profit": r(snapshot.gross_profit),
            "gross_loss": r(snapshot.gross_loss),
            "average_win": r(snapshot.average_win),
            "average_loss": r(snapshot.average_loss),
            "largest_win": r(snapshot.largest_win),
            "largest_loss": r(snapshot.largest_loss),
            "profit_factor": r(snapshot.profit_factor),
            "expectancy": r(snapshot.expectancy),
            "win_loss_ratio": r(snapshot.win_loss_ratio),
            "avg_rr": r(snapshot.avg_rr),
            "rr_samples": snapshot.rr_samples,
            "best_trade": self._trade_ref(snapshot.best_trade),
            "worst_trade": self._trade_ref(snapshot.worst_trade),
            "by_symbol": self._buckets(snapshot.by_symbol),
            "by_strategy": self._buckets(snapshot.by_strategy),
            "by_time_of_day": self._buckets(snapshot.by_time_of_day),
            "by_market_condition": self._buckets(snapshot.by_market_condition),
            "pnl_by_day": self._periods(snapshot.pnl_by_day),
            "pnl_by_week": self._periods(snapshot.pnl_by_week),
            "pnl_by_month": self._periods(snapshot.pnl_by_month),
            "max_consecutive_wins": snapshot.max_consecutive_wins,
            "max_consecutive_losses": snapshot.max_consecutive_losses,
            "current_streak": snapshot.current_streak,
            "avg_hold_time_hours": r(snapshot.avg_hold_time_hours),
            "sharpe_ratio": r(snapshot.sharpe_ratio),
            "max_drawdown": r(snapshot.max_drawdown),
            "recovery_factor": r(snapshot.recovery_factor),
        }

    def insights_to_dicts(self, insights: Iterable[Insight]) -> list[dict[str, Any]]:
        rows = []
        for insight in insights:
            row = insight.to_dict()
            row["metrics"] = {
                k: self._round(v) if isinstance(v, float) else v
                for k, v in row["metrics"].items()
            }
            rows.append(row)
        return rows

    def analysis_to_dict(self, analysis: TradeAnalysis) -> dict[str, Any]:
        return {
            "score": analysis.score,
            "summary": analysis.summary,
            "insights": self.insights_to_dicts(analysis.insights),
        }

    # ------------------------------------------------------------------ #
    # Text export                                                          #
    # ------------------------------------------------------------------ #

    def to_json(self, payload: Any, *, indent: int = 2) -> str:
        return json.dumps(payload, indent=indent, default=str)

    def periods_to_csv(
        self,
        snapshot: AnalyticsSnapshot,
        *,
        period: str = "daily",
    ) -> str:
        """Period P&L as CSV with ``period,pnl,cumulative_pnl`` columns.

        Raises
        ------
        ValueError
            ``period`` is not one of daily, weekly, monthly.
        """
        if period not in _PERIODS:
            raise ValueError(f"period must be one of {_PERIODS}, got {period!r}")
        rows = {
            "daily": snapshot.pnl_by_day,
            "weekly": snapshot.pnl_by_week,
            "monthly": snapshot.pnl_by_month,
        }[period]

        buf = io.StringIO()
        writer = csv.writer(buf)
        writer.writerow(["period", "pnl", "cumulative_pnl"])
        cumulative = 0.0
        for row in rows:
            cumulative += row.pnl
            writer.writerow([row.period, self._round(row.pnl), self._round(cumulative)])
        return buf.getvalue()

    # ------------------------------------------------------------------ #
    # Private helpers                                                      #
    # ------------------------------------------------------------------ #

    def _round(self, value: float) -> float:
        return round(float(value), self._dp)

    def _trade_ref(self, trade: Trade | None) -> dict[str, Any] | None:
        if trade is None:
            return None
        return {
            "id": trade.id,
            "symbol": trade.symbol,
            "net_pnl": self._round(trade.net_pnl),
            "exit_date": trade.exit_date.isoformat() if trade.exit_date else None,
        }

    def _buckets(self, buckets: Mapping[str, BucketStats]) -> dict[str, dict[str, Any]]:
        return {
            key: {
                "trades": b.trades,
                "wins": b.wins,
                "win_rate": self._round(b.win_rate),
                "total_pnl": self._round(b.total_pnl),
            }
            for key, b in buckets.items()
        }

    def _periods(self, rows: Iterable[PeriodPnl]) -> list[dict[str, Any]]:
        return [{"period": p.period, "pnl": self._round(p.pnl)} for p in rows]
