# /studio-backend/app/services/registration_service.py

"""
Business logic layer for the registration ledger.

Writes go through `registration_helpers.ledger`, which owns the transactional
admit/reject decision; everything else here is a read-only view of the ledger
(rosters, per-student listings, exports). Reads are not synchronized with
concurrent admissions and may show a slightly stale roster.
"""

from datetime import date as date_type, datetime, time, timedelta
from typing import List, Optional

from ..core.clock import to_utc_naive, utcnow
from ..core.exceptions import RegistrationNotFound
from ..db.models.class_session_models import Class
from ..models import session_model
from ..models.registration_model import (
    Registration, RegistrationKind, RegistrationResult, StudentInfo,
    registration_from_record,
)
from .database_service import DatabaseService
from .database_helpers.transactions import RetryPolicy, DEFAULT_RETRY_POLICY
from .registration_helpers import ledger, roster_export
from . import class_service

PAPER_REGISTRATION_PREFIX = "PAPERREGISTRATION|"


def _now(now: Optional[datetime]) -> datetime:
    return to_utc_naive(now) if now is not None else utcnow()


def _by_name(registrations: List[Registration]) -> List[Registration]:
    return sorted(registrations, key=lambda r: (r.first_name, r.last_name, r.student_id))


def paper_student_id(email: str) -> str:
    """The student ID under which staff-entered registrations for `email` are stored."""
    return PAPER_REGISTRATION_PREFIX + email


def drop_in_expiry(db_class: Class, day: date_type) -> datetime:
    """
    The moment a drop-in for `day` stops holding a place: the end of that
    day's class, or the end of the day when the class has no set time.
    """
    if db_class.start_time is None:
        return datetime.combine(day, time.max)
    start = datetime.combine(day, db_class.start_time)
    return start + timedelta(minutes=db_class.duration_minutes or 0)


# --- Writes ---

def register(
    db: DatabaseService,
    student: StudentInfo,
    class_id: int,
    kind: RegistrationKind = RegistrationKind.SESSION,
    date: Optional[datetime] = None,
    now: Optional[datetime] = None,
    policy: RetryPolicy = DEFAULT_RETRY_POLICY
) -> RegistrationResult:
    """
    Registers a student for a whole session or, with `date`, as a drop-in
    whose place lapses after `date`. Raises `ClassFull` when the class has no
    room as of `now` and `ConcurrencyExhausted` when every attempt conflicted.
    """
    return ledger.admit(db, student, class_id, kind, date, _now(now), policy)


def register_for_day(
    db: DatabaseService,
    student: StudentInfo,
    class_id: int,
    kind: RegistrationKind,
    day: Optional[date_type] = None,
    now: Optional[datetime] = None,
    policy: RetryPolicy = DEFAULT_RETRY_POLICY
) -> RegistrationResult:
    """Like `register`, but takes a drop-in as a calendar day of the class."""
    date = None
    if kind == RegistrationKind.DROP_IN and day is not None:
        date = drop_in_expiry(class_service.get_class(class_id, db), day)
    return register(db, student, class_id, kind, date, now, policy)


def register_paper_student(
    db: DatabaseService,
    class_id: int,
    first_name: str,
    last_name: str,
    email: str,
    phone: Optional[str] = None,
    kind: RegistrationKind = RegistrationKind.SESSION,
    day: Optional[date_type] = None,
    now: Optional[datetime] = None,
    policy: RetryPolicy = DEFAULT_RETRY_POLICY
) -> RegistrationResult:
    """
    Staff registration of a walk-in student who has no account. The entry is
    keyed by email so it shows up once the student signs up with that address.
    """
    student = StudentInfo(
        student_id=paper_student_id(email),
        first_name=first_name,
        last_name=last_name,
        email=email,
        phone=phone,
    )
    return register_for_day(db, student, class_id, kind, day, now, policy)


def unregister(
    db: DatabaseService,
    class_id: int,
    student_id: str,
    policy: RetryPolicy = DEFAULT_RETRY_POLICY
) -> None:
    ledger.remove(db, class_id, student_id, policy)


# --- Reads ---

def list_active(db: DatabaseService, class_id: int, now: Optional[datetime] = None) -> List[Registration]:
    """The class roster: session registrations plus drop-ins not yet past, sorted by name."""
    class_service.get_class(class_id, db)
    records = db.get_active_registrations_by_class_id(class_id, _now(now))
    return _by_name([registration_from_record(r) for r in records])


def lookup_registration(
    db: DatabaseService,
    class_id: int,
    student_id: str,
    now: Optional[datetime] = None
) -> Registration:
    """Returns the student's active registration in the class, or raises `RegistrationNotFound`."""
    record = db.get_registration(class_id, student_id)
    if record is not None:
        registration = registration_from_record(record)
        if registration.is_active(_now(now)):
            return registration
    raise RegistrationNotFound(class_id, student_id)


def list_by_student(
    db: DatabaseService,
    student_id: str,
    email: Optional[str] = None,
    now: Optional[datetime] = None
) -> List[Registration]:
    """
    Every registration held by a student, including expired drop-ins. When
    `email` is given, staff-entered registrations made under it are included.
    With `now`, only registrations active at that time are returned.
    """
    records = list(db.get_registrations_by_student_id(student_id))
    if email:
        paper_id = paper_student_id(email)
        if paper_id != student_id:
            records.extend(db.get_registrations_by_student_id(paper_id))
            records.sort(key=lambda r: r.created_at, reverse=True)
    registrations = [registration_from_record(r) for r in records]
    if now is not None:
        registrations = [r for r in registrations if r.is_active(_now(now))]
    return registrations


def list_by_email(db: DatabaseService, email: str) -> List[Registration]:
    return [registration_from_record(r) for r in db.get_registrations_by_email(email)]


def export_roster_as_csv(db: DatabaseService, class_id: int, now: Optional[datetime] = None) -> str:
    db_class = class_service.get_class(class_id, db)
    return roster_export.build_roster_csv(db_class.title, list_active(db, class_id, now))


def summarize_session(db: DatabaseService, session_id: int, now: Optional[datetime] = None) -> session_model.SessionOverview:
    """A session together with the effective occupancy of each of its classes, in schedule order."""
    session = class_service.get_session(session_id, db)
    classes = class_service.list_classes_in_session(session_id, db, order="weekday")
    active = db.get_active_registrations_by_class_ids([c.id for c in classes], _now(now))
    return session_model.SessionOverview(
        session=session_model.StudioSession.model_validate(session),
        classes=roster_export.summarize_occupancy(classes, active),
    )
