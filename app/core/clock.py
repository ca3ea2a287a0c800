# app/core/clock.py
"""Time normalization shared by the registry and the ledger."""
from datetime import datetime, timezone


def to_utc_naive(moment: datetime) -> datetime:
    """
    Converts an aware datetime to naive UTC, the form every timestamp is
    stored and compared in. Naive input is assumed to already be UTC.
    """
    if moment.tzinfo is None:
        return moment
    return moment.astimezone(timezone.utc).replace(tzinfo=None)


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)
