# /studio-backend/app/services/class_helpers/crud.py

import logging
from typing import Optional

from ...core.clock import to_utc_naive
from ...core.exceptions import (
    ClassNotFound, SessionNotFound, InvalidCapacity, InvalidSessionRange,
)
from ...db.models.class_session_models import Class, StudioSession
from ...models import class_model, session_model
from ..database_service import DatabaseService

logger = logging.getLogger(__name__)


# --- SESSION-RELATED CORE BUSINESS LOGIC ---

def create_session(session_data: session_model.SessionCreate, db: DatabaseService) -> StudioSession:
    """Creates a session after checking that its range is not inverted."""
    start, end = to_utc_naive(session_data.start), to_utc_naive(session_data.end)
    if start > end:
        raise InvalidSessionRange(f"Session '{session_data.name}' starts after it ends")
    new_session = db.add_session({"name": session_data.name, "start": start, "end": end})
    logger.info(f"Created session {new_session.id} ({new_session.name})")
    return new_session


def get_session(session_id: int, db: DatabaseService) -> StudioSession:
    session = db.get_session_by_id(session_id)
    if session is None:
        raise SessionNotFound(session_id)
    return session


# --- CLASS-RELATED CORE BUSINESS LOGIC ---

def _check_capacity(capacity: Optional[int]):
    if capacity is not None and capacity <= 0:
        raise InvalidCapacity(f"Class capacity must be positive, got {capacity}")


def create_class(class_data: class_model.ClassCreate, db: DatabaseService) -> Class:
    """
    Creates a new class record in the database. A referenced session must exist.
    """
    _check_capacity(class_data.capacity)
    if class_data.session_id is not None:
        get_session(class_data.session_id, db)
    new_class_record = class_data.model_dump()
    new_class_record["version"] = 0
    new_class_object = db.add_class(new_class_record)
    logger.info(f"Created class {new_class_object.id} ({new_class_object.title})")
    return new_class_object


def get_class(class_id: int, db: DatabaseService) -> Class:
    db_class = db.get_class_by_id(class_id)
    if db_class is None:
        raise ClassNotFound(class_id)
    return db_class


def update_class(class_id: int, class_update: class_model.ClassUpdate, db: DatabaseService) -> Class:
    update_data = class_update.model_dump(exclude_unset=True)
    # These columns are required; an explicit null leaves them unchanged.
    for key in ("title", "capacity", "drop_in_only"):
        if key in update_data and update_data[key] is None:
            del update_data[key]
    if not update_data:
        raise ValueError("No update data provided.")
    _check_capacity(update_data.get("capacity"))
    if update_data.get("session_id") is not None:
        get_session(update_data["session_id"], db)
    updated_class = db.update_class(class_id, update_data)
    if updated_class is None:
        raise ClassNotFound(class_id)
    return updated_class
