"""Custom exception hierarchy for the trade journal.

The analytics core never raises; these cover the outer surfaces
(configuration, snapshot loading, the CLI).
"""


class JournalError(Exception):
    """Base exception for all trade journal errors."""


# --- Configuration ---
class ConfigError(JournalError):
    """Invalid or missing configuration."""


# --- Snapshot input ---
class SnapshotError(JournalError):
    """A journal snapshot document could not be read or validated."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Invalid journal snapshot [{source}]: {reason}")


class TradeNotFoundError(JournalError):
    """Requested trade id is not present in the snapshot."""

    def __init__(self, trade_id: str):
        self.trade_id = trade_id
        super().__init__(f"Trade not found: {trade_id}")
