"""Core journal records: the engine's input entity set.

These are immutable snapshots.  The analytics engine only ever reads
them; creating, updating and persisting records belongs to whatever
storage layer sits in front of the engine.

Field names are snake_case; the camelCase keys written by the journal
web app (``entryPrice``, ``expectedRR``, ``type`` ...) are accepted as
aliases so stored documents validate without translation.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .enums import (
    AccountType,
    ChecklistCategory,
    Direction,
    Emotion,
    MarketCondition,
    TimeOfDay,
    TradeOutcome,
    TradeStatus,
)


def _uuid() -> str:
    return str(uuid.uuid4())


class Record(BaseModel):
    """Base for all journal records: frozen, camelCase-tolerant."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


# ---------------------------------------------------------------------------
# Trades
# ---------------------------------------------------------------------------

class PartialExit(Record):
    """A scale-out leg closed before the final exit."""

    price: float
    quantity: float
    date: datetime
    pnl: float = 0.0


class Trade(Record):
    """One journaled position, open or closed."""

    # Identity
    id: str = Field(default_factory=_uuid)
    account_id: str = ""
    symbol: str = ""
    instrument_id: str = ""
    direction: Direction = Field(default=Direction.LONG, alias="type")

    # Prices and size
    entry_price: float = 0.0
    exit_price: float | None = None
    lot_size: float = 1.0
    quantity: float = 1.0
    stop_loss: float | None = None
    take_profit: float | None = None
    expected_rr: float = Field(default=0.0, alias="expectedRR")
    actual_rr: float = Field(default=0.0, alias="actualRR")

    # Timing
    entry_date: datetime
    exit_date: datetime | None = None

    # Result
    status: TradeStatus = TradeStatus.OPEN
    outcome: TradeOutcome = TradeOutcome.PENDING
    pnl: float = 0.0  # Gross
    pnl_percentage: float = 0.0
    fees: float = 0.0
    commissions: float = 0.0
    slippage: float = 0.0  # Per unit, in price terms
    net_pnl: float = 0.0

    # Notes
    notes: str = ""
    pre_trade_notes: str = ""
    post_trade_notes: str = ""
    mistakes: str = ""
    lessons_learned: str = ""
    tags: tuple[str, ...] = ()

    # Process and psychology
    strategy_id: str | None = None
    emotion: Emotion | None = None
    checklist_completed: bool = False
    checklist_items: dict[str, bool] = Field(default_factory=dict)
    session_quality: int = Field(default=3, ge=1, le=5)
    time_of_day: TimeOfDay | None = None
    market_condition: MarketCondition | None = None
    followed_plan: bool = True

    partial_exits: tuple[PartialExit, ...] = ()

    @field_validator("entry_date", "exit_date")
    @classmethod
    def _assume_utc(cls, value: datetime | None) -> datetime | None:
        # Naive timestamps are UTC; mixing naive and aware would break ordering
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @property
    def is_closed(self) -> bool:
        return self.status == TradeStatus.CLOSED

    @property
    def hold_hours(self) -> float | None:
        """Hours between entry and exit; None while no exit is recorded."""
        if self.exit_date is None:
            return None
        return (self.exit_date - self.entry_date).total_seconds() / 3600.0

    @property
    def sort_date(self) -> datetime:
        """Exit date when known, entry date otherwise."""
        return self.exit_date or self.entry_date


# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------

class Account(Record):
    """A trading account.

    ``total_pnl`` is derived (sum of the account's trade net P&L); the
    owning storage layer recomputes it with
    :func:`trade_journal.journal.calculations.account_total_pnl`.
    """

    id: str = Field(default_factory=_uuid)
    name: str = ""
    entity: str = ""
    account_type: AccountType = Field(default=AccountType.DEMO, alias="type")
    currency: str = "USD"
    balance: float = 0.0
    invested_amount: float = 0.0
    total_pnl: float = 0.0
    created_at: datetime | None = None


# ---------------------------------------------------------------------------
# Strategies and checklists
# ---------------------------------------------------------------------------

class Strategy(Record):
    """Named rule set.  Descriptive fields are display context only."""

    id: str = Field(default_factory=_uuid)
    name: str = ""
    description: str = ""
    setup: str = ""
    entry: str = ""
    exit: str = ""
    stop_loss: str = ""
    target_rr: float = Field(default=0.0, alias="targetRR")
    timeframes: tuple[str, ...] = ()
    markets: tuple[str, ...] = ()  # Market conditions the strategy is built for
    notes: str = ""
    active: bool = True


class ChecklistItem(Record):
    id: str = Field(default_factory=_uuid)
    text: str = ""
    category: ChecklistCategory = ChecklistCategory.PRE_TRADE
    required: bool = False


class ChecklistTemplate(Record):
    id: str = Field(default_factory=_uuid)
    name: str = ""
    items: tuple[ChecklistItem, ...] = ()

    @property
    def required_items(self) -> tuple[ChecklistItem, ...]:
        return tuple(item for item in self.items if item.required)
