"""Insight value type and ordering."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from ..core.enums import InsightType, Severity


@dataclass(frozen=True)
class Insight:
    """One diagnostic finding about a trader's history or a single trade."""

    # Mapping field: equal-comparable, not hashable
    __hash__ = None

    type: InsightType
    category: str          # e.g. "Performance", "Risk", "Psychology"
    title: str
    message: str           # Human-readable, embeds the computed figures
    severity: Severity
    action: str            # Recommended next step
    related_trades: tuple[str, ...] = ()
    metrics: Mapping[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Export to a flat dictionary for logging / presentation."""
        return {
            "type": self.type.value,
            "category": self.category,
            "title": self.title,
            "message": self.message,
            "severity": self.severity.value,
            "action": self.action,
            "related_trades": list(self.related_trades),
            "metrics": dict(self.metrics),
        }


def sort_by_severity(insights: Iterable[Insight]) -> list[Insight]:
    """High first, then medium, then low.  Ties keep emission order."""
    return sorted(insights, key=lambda i: i.severity.rank)


def format_money(amount: float, currency: str = "USD") -> str:
    """Render an amount for insight messages, e.g. ``-$1,234.50``."""
    symbol = _CURRENCY_SYMBOLS.get(currency.upper())
    sign = "-" if amount < 0 else ""
    if symbol is None:
        return f"{sign}{abs(amount):,.2f} {currency.upper()}"
    return f"{sign}{symbol}{abs(amount):,.2f}"


_CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "INR": "₹",
}
