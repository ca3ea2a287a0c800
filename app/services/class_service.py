# /studio-backend/app/services/class_service.py

"""
This service module is the business logic layer for the class/session
registry: the authoritative schedule that the registration ledger checks
capacity and existence against.

It serves as a facade over the `crud` and `ordering` helpers and the
`DatabaseService`. The one write here that must be transactional is
`delete_class`, which runs under the same bounded-retry protocol as the
ledger because it has to agree with concurrent admissions about whether the
class is empty.
"""

import logging
from datetime import datetime
from typing import List, Optional

from ..core.clock import to_utc_naive, utcnow
from ..core.exceptions import ClassNotFound, ClassNotEmpty
from ..db.models.class_session_models import Class, StudioSession
from ..models import class_model, session_model
from ..models.class_model import ClassOrder
from .database_service import DatabaseService
from .database_helpers.transactions import (
    RetryPolicy, DEFAULT_RETRY_POLICY, TransactionConflict, run_in_transaction,
)

# Import the specialist helper modules this service orchestrates.
from .class_helpers import crud, ordering

logger = logging.getLogger(__name__)


# --- Sessions ---

def create_session(session_data: session_model.SessionCreate, db: DatabaseService) -> StudioSession:
    return crud.create_session(session_data=session_data, db=db)


def get_session(session_id: int, db: DatabaseService) -> StudioSession:
    return crud.get_session(session_id=session_id, db=db)


def list_active_sessions(db: DatabaseService, now: Optional[datetime] = None) -> List[StudioSession]:
    """Sessions whose end time is not before `now`, earliest start first."""
    now = to_utc_naive(now) if now is not None else utcnow()
    return ordering.sort_sessions_by_start(db.get_active_sessions(now))


# --- Classes ---

def add_class(class_data: class_model.ClassCreate, db: DatabaseService) -> Class:
    return crud.create_class(class_data=class_data, db=db)


def get_class(class_id: int, db: DatabaseService) -> Class:
    return crud.get_class(class_id=class_id, db=db)


def update_class(class_id: int, class_update: class_model.ClassUpdate, db: DatabaseService) -> Class:
    return crud.update_class(class_id=class_id, class_update=class_update, db=db)


def list_classes_in_session(
    session_id: int,
    db: DatabaseService,
    order: ClassOrder = ClassOrder.TITLE
) -> List[Class]:
    """
    Returns every class in the session, sorted by title, start time, or
    weekday-then-start-time.
    """
    crud.get_session(session_id=session_id, db=db)
    return ordering.sort_classes(db.get_classes_by_session_id(session_id), order)


def list_classes_for_teacher(
    teacher_id: str,
    db: DatabaseService,
    order: ClassOrder = ClassOrder.WEEKDAY
) -> List[Class]:
    """The classes a teacher is assigned to; these are the rosters they may view."""
    return ordering.sort_classes(db.get_classes_by_teacher_id(teacher_id), order)


def delete_class(
    class_id: int,
    db: DatabaseService,
    now: Optional[datetime] = None,
    policy: RetryPolicy = DEFAULT_RETRY_POLICY
) -> None:
    """
    Deletes a class, refusing with `ClassNotEmpty` while any registration in
    it is still active as of `now`. Expired drop-ins are removed with it.
    """
    now = to_utc_naive(now) if now is not None else utcnow()

    def _attempt():
        db_class = db.get_class_for_update(class_id)
        if db_class is None:
            raise ClassNotFound(class_id)
        if db.count_active_registrations(class_id, now) > 0:
            raise ClassNotEmpty(class_id)
        # Advancing the version makes a concurrent admission into this class conflict.
        if not db.bump_class_version(class_id, db_class.version):
            raise TransactionConflict(f"class {class_id} changed during deletion")
        db.remove_class(db_class)

    run_in_transaction(db, class_id, _attempt, policy)
    logger.info(f"Deleted class {class_id}")
