# /studio-backend/app/services/registration_helpers/ledger.py

"""
The transactional core of the registration ledger.

Capacity is never stored. Each admission recomputes the class's effective
occupancy (session registrations plus drop-ins whose date has not passed) and
decides inside a transaction scoped to the class. The class `version`
compare-and-set at the end of the attempt is what serializes two admissions
racing for the last place: the loser's attempt is rolled back and rerun
against the new roster, where it will usually find the class full.
"""

import logging
from datetime import date as date_type, datetime, timedelta
from typing import Optional

from ...core.clock import to_utc_naive
from ...core.exceptions import (
    ClassNotFound, ClassFull, RegistrationNotFound,
    InvalidDropInDate, InvalidRegistrationKind,
)
from ...db.models.class_session_models import Class
from ...models.registration_model import (
    RegistrationKind, RegistrationOutcome, RegistrationResult, StudentInfo,
    registration_from_record,
)
from ..database_service import DatabaseService
from ..database_helpers.transactions import (
    RetryPolicy, DEFAULT_RETRY_POLICY, TransactionConflict, run_in_transaction,
)

logger = logging.getLogger(__name__)


def _meeting_day(db_class: Class, date: datetime) -> date_type:
    """The calendar day the class meets for a drop-in that lapses at `date`."""
    if db_class.start_time is None:
        return date.date()
    return (date - timedelta(minutes=db_class.duration_minutes or 0)).date()


def _validate_request(db_class: Class, kind: RegistrationKind, date: Optional[datetime],
                      now: datetime, db: DatabaseService):
    if kind == RegistrationKind.SESSION:
        if db_class.drop_in_only:
            raise InvalidRegistrationKind(f"Class {db_class.id} only accepts drop-ins")
        return
    if date is None:
        raise InvalidDropInDate("A drop-in registration needs a date")
    if date < now:
        raise InvalidDropInDate(f"Drop-in date {date:%Y-%m-%d} is in the past")
    day = _meeting_day(db_class, date)
    if db_class.weekday is not None and day.weekday() != db_class.weekday:
        raise InvalidDropInDate(f"Class {db_class.id} does not meet on {day:%A %Y-%m-%d}")
    if db_class.session_id is not None:
        session = db.get_session_by_id(db_class.session_id)
        if session is not None and not (session.start.date() <= day <= session.end.date()):
            raise InvalidDropInDate(f"{day:%Y-%m-%d} is outside session '{session.name}'")


def admit(
    db: DatabaseService,
    student: StudentInfo,
    class_id: int,
    kind: RegistrationKind,
    date: Optional[datetime],
    now: datetime,
    policy: RetryPolicy = DEFAULT_RETRY_POLICY
) -> RegistrationResult:
    """
    Admits `student` into the class or raises `ClassFull`.

    An existing active registration for the pair is left untouched and
    reported as `ALREADY_REGISTERED`; an expired drop-in under the same key is
    superseded by the new registration.
    """
    kind = RegistrationKind(kind)
    now = to_utc_naive(now)
    date = to_utc_naive(date) if (date is not None and kind == RegistrationKind.DROP_IN) else None

    def _attempt() -> RegistrationResult:
        db_class = db.get_class_for_update(class_id)
        if db_class is None:
            raise ClassNotFound(class_id)
        _validate_request(db_class, kind, date, now, db)

        existing = db.get_registration(class_id, student.student_id)
        if existing is not None:
            current = registration_from_record(existing)
            if current.is_active(now):
                logger.warning(f"Attempted duplicate registration of {student.student_id!r} in {class_id}")
                return RegistrationResult(outcome=RegistrationOutcome.ALREADY_REGISTERED, registration=current)

        version = db_class.version
        occupancy = db.count_active_registrations(class_id, now)
        if occupancy >= db_class.capacity:
            raise ClassFull(class_id, db_class.capacity)

        if existing is not None:
            # Expired drop-in: reuse its key.
            db.delete_registration(existing)
        new_registration = db.add_registration({
            "class_id": class_id,
            "student_id": student.student_id,
            "first_name": student.first_name,
            "last_name": student.last_name,
            "email": student.email,
            "phone": student.phone,
            "kind": kind.value,
            "date": date,
        })
        if not db.bump_class_version(class_id, version):
            raise TransactionConflict(f"class {class_id} changed during registration")
        return RegistrationResult(
            outcome=RegistrationOutcome.REGISTERED,
            registration=registration_from_record(new_registration),
        )

    result = run_in_transaction(db, class_id, _attempt, policy)
    if result.outcome == RegistrationOutcome.REGISTERED:
        logger.info(f"Registered {student.student_id!r} in class {class_id} ({kind.value})")
    return result


def remove(
    db: DatabaseService,
    class_id: int,
    student_id: str,
    policy: RetryPolicy = DEFAULT_RETRY_POLICY
) -> None:
    """Deletes the pair's registration, whatever its state, in a class-scoped transaction."""

    def _attempt():
        db_class = db.get_class_for_update(class_id)
        if db_class is None:
            raise ClassNotFound(class_id)
        existing = db.get_registration(class_id, student_id)
        if existing is None:
            raise RegistrationNotFound(class_id, student_id)
        db.delete_registration(existing)
        if not db.bump_class_version(class_id, db_class.version):
            raise TransactionConflict(f"class {class_id} changed during removal")

    run_in_transaction(db, class_id, _attempt, policy)
    logger.info(f"Removed {student_id!r} from class {class_id}")
