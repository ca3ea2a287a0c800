# /studio-backend/app/services/database_helpers/transactions.py

"""
Bounded-retry transactions for writes scoped to one class.

A class row and all of its registrations form one contention domain. A unit
of work reads what it needs, writes, and advances the class `version` with a
compare-and-set; losing that race (or a concurrent insert of the same
registration key) raises `TransactionConflict`, and the whole attempt is
rolled back and run again from the start.
"""

import logging
from dataclasses import dataclass
from typing import Callable, TypeVar

from sqlalchemy.exc import IntegrityError

from app.core.config import Settings, get_settings
from app.core.exceptions import ConcurrencyExhausted

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TransactionConflict(Exception):
    """Another writer committed to the same class first; the attempt must restart."""


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 25

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

    @classmethod
    def from_settings(cls, settings: Settings) -> "RetryPolicy":
        return cls(max_attempts=settings.registration_max_attempts)


DEFAULT_RETRY_POLICY = RetryPolicy()


def run_in_transaction(db, scope, work: Callable[[], T], policy: RetryPolicy = DEFAULT_RETRY_POLICY) -> T:
    """
    Runs `work` and commits, retrying on conflict up to `policy.max_attempts`
    times. Any other exception rolls the attempt back and propagates as is.

    Args:
        db: The DatabaseService whose session the work runs in.
        scope: The class ID the transaction is scoped to (used in errors and logs).
        work: A zero-argument callable performing one full attempt.
        policy: The retry bound.
    """
    for attempt in range(1, policy.max_attempts + 1):
        try:
            result = work()
            db.commit()
            return result
        except (TransactionConflict, IntegrityError) as e:
            db.rollback()
            logger.debug(f"Conflict on class {scope} (attempt {attempt}/{policy.max_attempts}): {e}")
        except Exception:
            db.rollback()
            raise
    logger.warning(f"Giving up on class {scope} after {policy.max_attempts} conflicting attempts")
    raise ConcurrencyExhausted(scope, policy.max_attempts)


def get_retry_policy() -> RetryPolicy:
    """FastAPI dependency that provides the configured retry policy."""
    return RetryPolicy.from_settings(get_settings())
