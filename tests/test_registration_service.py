# /tests/test_registration_service.py

import pytest
from datetime import date, datetime, time

from app.core.exceptions import (
    ClassFull, ClassNotFound, RegistrationNotFound, InvalidDropInDate, InvalidRegistrationKind,
)
from app.models.registration_model import (
    DropInRegistration, RegistrationKind, RegistrationOutcome, SessionRegistration,
)
from app.services import registration_service

TUESDAY = datetime(2030, 3, 5, 10, 0)
WEDNESDAY = datetime(2030, 3, 6, 9, 0)


def _register(db, student, class_id, now, **kwargs):
    return registration_service.register(db, student, class_id, now=now, **kwargs)


def _drop_in(db, student, class_id, when, now):
    return registration_service.register(
        db, student, class_id, kind=RegistrationKind.DROP_IN, date=when, now=now
    )


# --- Capacity ---

def test_occupancy_never_exceeds_capacity(db_service, make_class, make_student, now):
    target = make_class(capacity=3)
    outcomes = []
    for i in range(5):
        try:
            outcomes.append(_register(db_service, make_student(f"stu-{i}"), target.id, now).outcome)
        except ClassFull:
            outcomes.append("full")

    assert outcomes == [RegistrationOutcome.REGISTERED] * 3 + ["full", "full"]
    assert len(registration_service.list_active(db_service, target.id, now=now)) == 3


def test_full_class_rejects_second_student(db_service, make_class, make_student, now):
    """
    GIVEN a class with capacity 1 and one registered student
    WHEN a second student registers at the same moment
    THEN ClassFull is raised and the roster still holds exactly one entry.
    """
    target = make_class(capacity=1)
    _register(db_service, make_student("stu-a"), target.id, now)

    with pytest.raises(ClassFull) as exc_info:
        _register(db_service, make_student("stu-b"), target.id, now)

    assert exc_info.value.capacity == 1
    roster = registration_service.list_active(db_service, target.id, now=now)
    assert [r.student_id for r in roster] == ["stu-a"]


def test_duplicate_active_registration_is_reported_not_rejected(db_service, make_class, make_student, now):
    """
    GIVEN a full class whose only place is held by the student
    WHEN the same student registers again
    THEN the result is ALREADY_REGISTERED, not ClassFull, and nothing changes.
    """
    target = make_class(capacity=1)
    student = make_student("stu-a")
    first = _register(db_service, student, target.id, now)
    version_after_first = db_service.get_class_by_id(target.id).version

    second = _register(db_service, student, target.id, now)

    assert first.outcome == RegistrationOutcome.REGISTERED
    assert second.outcome == RegistrationOutcome.ALREADY_REGISTERED
    assert second.registration.student_id == "stu-a"
    assert db_service.get_class_by_id(target.id).version == version_after_first
    assert len(db_service.get_registrations_by_class_id(target.id)) == 1


def test_expired_drop_in_frees_its_place(db_service, make_class, make_student, now):
    """
    GIVEN capacity 2, one session registration and one drop-in expiring on Tuesday
    WHEN a third student registers on Wednesday
    THEN the expired drop-in is not counted and the registration succeeds.
    """
    target = make_class(capacity=2)
    _register(db_service, make_student("stu-session"), target.id, now)
    _drop_in(db_service, make_student("stu-dropin"), target.id, TUESDAY, now)

    with pytest.raises(ClassFull):
        _drop_in(db_service, make_student("stu-late"), target.id, datetime(2030, 3, 7, 10, 0), now)

    result = _drop_in(db_service, make_student("stu-late"), target.id, datetime(2030, 3, 7, 10, 0), WEDNESDAY)

    assert result.outcome == RegistrationOutcome.REGISTERED
    roster = registration_service.list_active(db_service, target.id, now=WEDNESDAY)
    assert sorted(r.student_id for r in roster) == ["stu-late", "stu-session"]


def test_expired_drop_in_is_replaced_for_same_student(db_service, make_class, make_student, now):
    target = make_class(capacity=1)
    student = make_student("stu-a")
    _drop_in(db_service, student, target.id, TUESDAY, now)

    result = _register(db_service, student, target.id, WEDNESDAY)

    assert result.outcome == RegistrationOutcome.REGISTERED
    assert isinstance(result.registration, SessionRegistration)
    records = db_service.get_registrations_by_class_id(target.id)
    assert len(records) == 1
    assert records[0].kind == "session"
    assert records[0].date is None


def test_active_drop_in_blocks_a_second_registration_of_the_same_student(db_service, make_class, make_student, now):
    target = make_class(capacity=5)
    student = make_student("stu-a")
    _drop_in(db_service, student, target.id, TUESDAY, now)

    result = _register(db_service, student, target.id, now)

    assert result.outcome == RegistrationOutcome.ALREADY_REGISTERED
    assert isinstance(result.registration, DropInRegistration)


def test_register_for_missing_class_raises(db_service, make_student, now):
    with pytest.raises(ClassNotFound):
        _register(db_service, make_student("stu-a"), 999, now)


# --- Drop-in validation ---

def test_drop_in_requires_a_date(db_service, make_class, make_student, now):
    target = make_class()
    with pytest.raises(InvalidDropInDate):
        registration_service.register(
            db_service, make_student("stu-a"), target.id, kind=RegistrationKind.DROP_IN, now=now
        )


def test_drop_in_in_the_past_is_rejected(db_service, make_class, make_student, now):
    target = make_class()
    with pytest.raises(InvalidDropInDate):
        _drop_in(db_service, make_student("stu-a"), target.id, datetime(2030, 3, 1, 10, 0), now)


def test_drop_in_must_fall_on_the_class_weekday(db_service, make_class, make_student, now):
    monday_class = make_class(weekday=0, start_time=time(18, 0))
    with pytest.raises(InvalidDropInDate):
        _drop_in(db_service, make_student("stu-a"), monday_class.id, TUESDAY, now)


def test_drop_in_must_fall_within_the_session(db_service, spring_session, make_class, make_student, now):
    target = make_class(session_id=spring_session.id)
    with pytest.raises(InvalidDropInDate):
        _drop_in(db_service, make_student("stu-a"), target.id, datetime(2030, 6, 10, 10, 0), now)


def test_drop_in_only_class_refuses_session_registrations(db_service, make_class, make_student, now):
    target = make_class(drop_in_only=True)
    with pytest.raises(InvalidRegistrationKind):
        _register(db_service, make_student("stu-a"), target.id, now)
    assert _drop_in(db_service, make_student("stu-a"), target.id, TUESDAY, now).outcome == RegistrationOutcome.REGISTERED


def test_session_registration_ignores_a_date(db_service, make_class, make_student, now):
    target = make_class()
    result = _register(db_service, make_student("stu-a"), target.id, now, date=TUESDAY)
    assert result.registration.kind == "session"
    assert db_service.get_registration(target.id, "stu-a").date is None


def test_register_for_day_expires_at_the_end_of_class(db_service, make_class, make_student, now):
    target = make_class(weekday=0, start_time=time(18, 0), duration_minutes=75)

    result = registration_service.register_for_day(
        db_service, make_student("stu-a"), target.id, RegistrationKind.DROP_IN, day=date(2030, 3, 11), now=now
    )

    assert result.registration.date == datetime(2030, 3, 11, 19, 15)


def test_register_for_day_without_start_time_lasts_all_day(db_service, make_class, make_student, now):
    target = make_class()

    result = registration_service.register_for_day(
        db_service, make_student("stu-a"), target.id, RegistrationKind.DROP_IN, day=date(2030, 3, 12), now=now
    )

    assert result.registration.date == datetime(2030, 3, 12, 23, 59, 59, 999999)


def test_register_for_day_accepts_a_class_running_past_midnight(db_service, spring_session, make_class, make_student, now):
    """
    GIVEN a Monday class starting at 23:30 for an hour, in a session ending on a Monday
    WHEN a student drops in on the last Monday of the session
    THEN the drop-in is accepted and lapses at 00:30 on Tuesday.
    """
    late = make_class(weekday=0, start_time=time(23, 30), duration_minutes=60, session_id=spring_session.id)
    last_monday = date(2030, 5, 27)
    spring_session.end = datetime(2030, 5, 27, 23, 59)
    db_service.commit()

    result = registration_service.register_for_day(
        db_service, make_student("stu-a"), late.id, RegistrationKind.DROP_IN, day=last_monday, now=now
    )

    assert result.outcome == RegistrationOutcome.REGISTERED
    assert result.registration.date == datetime(2030, 5, 28, 0, 30)

    with pytest.raises(InvalidDropInDate):
        registration_service.register_for_day(
            db_service, make_student("stu-b"), late.id, RegistrationKind.DROP_IN, day=date(2030, 5, 28), now=now
        )


# --- Removal and lookup ---

def test_unregister_frees_the_place(db_service, make_class, make_student, now):
    target = make_class(capacity=1)
    _register(db_service, make_student("stu-a"), target.id, now)

    registration_service.unregister(db_service, target.id, "stu-a")

    assert _register(db_service, make_student("stu-b"), target.id, now).outcome == RegistrationOutcome.REGISTERED


def test_unregister_unknown_pair_raises(db_service, make_class):
    target = make_class()
    with pytest.raises(RegistrationNotFound):
        registration_service.unregister(db_service, target.id, "ghost")
    with pytest.raises(ClassNotFound):
        registration_service.unregister(db_service, 999, "ghost")


def test_lookup_registration_hides_expired_drop_ins(db_service, make_class, make_student, now):
    target = make_class()
    _drop_in(db_service, make_student("stu-a"), target.id, TUESDAY, now)

    found = registration_service.lookup_registration(db_service, target.id, "stu-a", now=now)
    assert found.date == TUESDAY

    with pytest.raises(RegistrationNotFound):
        registration_service.lookup_registration(db_service, target.id, "stu-a", now=WEDNESDAY)


def test_list_active_is_sorted_by_name(db_service, make_class, make_student, now):
    target = make_class(capacity=5)
    _register(db_service, make_student("stu-1", "Zoe", "Adams"), target.id, now)
    _register(db_service, make_student("stu-2", "Amir", "Khan"), target.id, now)
    _register(db_service, make_student("stu-3", "Amir", "Bose"), target.id, now)

    roster = registration_service.list_active(db_service, target.id, now=now)

    assert [r.student_id for r in roster] == ["stu-3", "stu-2", "stu-1"]


# --- Per-student views and paper registrations ---

def test_paper_registration_is_keyed_by_email(db_service, make_class, now):
    target = make_class()

    result = registration_service.register_paper_student(
        db_service, target.id, "Grace", "Hopper", "grace@example.com", phone="555-0100", now=now
    )

    assert result.registration.student_id == "PAPERREGISTRATION|grace@example.com"
    assert result.registration.phone == "555-0100"
    assert [r.class_id for r in registration_service.list_by_email(db_service, "grace@example.com")] == [target.id]


def test_list_by_student_includes_paper_and_expired_registrations(db_service, make_class, make_student, now):
    morning, evening, weekend = make_class(title="Morning"), make_class(title="Evening"), make_class(title="Weekend")
    student = make_student("acct-7")
    _register(db_service, student, morning.id, now)
    _drop_in(db_service, student, evening.id, TUESDAY, now)
    registration_service.register_paper_student(
        db_service, weekend.id, "Ada", "Lovelace", "ada@example.com", now=now
    )

    everything = registration_service.list_by_student(db_service, "acct-7", email="ada@example.com")
    current = registration_service.list_by_student(db_service, "acct-7", email="ada@example.com", now=WEDNESDAY)

    assert sorted(r.class_id for r in everything) == sorted([morning.id, evening.id, weekend.id])
    assert sorted(r.class_id for r in current) == sorted([morning.id, weekend.id])
    assert registration_service.list_by_student(db_service, "nobody") == []


# --- Exports ---

def test_export_roster_as_csv(db_service, make_class, make_student, now):
    target = make_class(title="Vinyasa Flow")
    _register(db_service, make_student("stu-1", "Bea", "Stone"), target.id, now)
    _drop_in(db_service, make_student("stu-2", "Ada", "Lovelace"), target.id, TUESDAY, now)

    csv_text = registration_service.export_roster_as_csv(db_service, target.id, now=now)

    lines = csv_text.strip().splitlines()
    assert lines[0] == "First Name,Last Name,Email,Phone,Registration,Date,Class Title"
    assert lines[1] == "Ada,Lovelace,stu-2@example.com,,Drop-in,2030-03-05,Vinyasa Flow"
    assert lines[2] == "Bea,Stone,stu-1@example.com,,Session,,Vinyasa Flow"


def test_export_empty_roster_has_only_a_header(db_service, make_class, now):
    target = make_class()
    csv_text = registration_service.export_roster_as_csv(db_service, target.id, now=now)
    assert csv_text.strip().splitlines() == ["First Name,Last Name,Email,Phone,Registration,Date,Class Title"]


def test_summarize_session_counts_effective_occupancy(db_service, spring_session, make_class, make_student, now):
    busy = make_class(title="Busy", capacity=2, weekday=1, session_id=spring_session.id)
    quiet = make_class(title="Quiet", capacity=4, weekday=3, session_id=spring_session.id)
    _register(db_service, make_student("stu-1"), busy.id, now)
    _drop_in(db_service, make_student("stu-2"), busy.id, TUESDAY, now)

    before = registration_service.summarize_session(db_service, spring_session.id, now=now)
    after = registration_service.summarize_session(db_service, spring_session.id, now=WEDNESDAY)

    assert before.session.name == "Spring"
    assert [(c.id, c.occupancy, c.spacesLeft) for c in before.classes] == [(busy.id, 2, 0), (quiet.id, 0, 4)]
    assert [(c.id, c.occupancy, c.spacesLeft) for c in after.classes] == [(busy.id, 1, 1), (quiet.id, 0, 4)]
