"""Journal snapshot documents.

A snapshot bundles everything the engine needs for one account:
``{"account": {...}, "trades": [...], "strategies": [...],
"checklists": [...]}``.  Loading validates the document into immutable
records; nothing here writes back.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ..core.errors import SnapshotError, TradeNotFoundError
from ..core.models import Account, ChecklistTemplate, Record, Strategy, Trade
from .metrics import sort_chronologically

logger = logging.getLogger(__name__)


class JournalSnapshot(Record):
    """Immutable bundle of one account's journal records."""

    account: Account
    trades: tuple[Trade, ...] = ()
    strategies: tuple[Strategy, ...] = ()
    checklists: tuple[ChecklistTemplate, ...] = ()

    def chronological_trades(self) -> list[Trade]:
        """Trades ordered for the analytics precondition."""
        return sort_chronologically(self.trades)

    def trade(self, trade_id: str) -> Trade:
        for t in self.trades:
            if t.id == trade_id:
                return t
        raise TradeNotFoundError(trade_id)

    def strategy_for(self, trade: Trade) -> Strategy | None:
        if trade.strategy_id is None:
            return None
        return next((s for s in self.strategies if s.id == trade.strategy_id), None)

    @property
    def active_checklist(self) -> ChecklistTemplate | None:
        return self.checklists[0] if self.checklists else None


def parse_snapshot(data: dict[str, Any], *, source: str = "<dict>") -> JournalSnapshot:
    """Validate a decoded snapshot document."""
    try:
        snapshot = JournalSnapshot.model_validate(data)
    except ValidationError as exc:
        raise SnapshotError(source, f"{exc.error_count()} validation error(s): {exc}") from exc
    logger.debug(
        "Loaded snapshot %s: %d trades, %d strategies, %d checklists",
        source,
        len(snapshot.trades),
        len(snapshot.strategies),
        len(snapshot.checklists),
    )
    return snapshot


def load_snapshot(path: str | Path) -> JournalSnapshot:
    """Read and validate a snapshot JSON file."""
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except OSError as exc:
        raise SnapshotError(str(path), f"cannot read file: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise SnapshotError(str(path), f"invalid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise SnapshotError(str(path), "top-level value must be an object")
    return parse_snapshot(data, source=str(path))
