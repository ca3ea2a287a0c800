# /studio-backend/app/services/database_helpers/registration_repository_sql.py

"""
This module contains the raw SQLAlchemy queries for the Registration table.

The write methods flush but do not commit: every ledger write runs inside a
retried transaction (see `transactions.run_in_transaction`) which commits or
rolls back the whole attempt at once.
"""

from datetime import datetime
from typing import List, Dict, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.db.models.registration_models import Registration
from app.models.registration_model import RegistrationKind


class RegistrationRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    @staticmethod
    def _active_as_of(now: datetime):
        # Session-long rows always count; drop-ins count until their date passes.
        return or_(
            Registration.kind == RegistrationKind.SESSION.value,
            Registration.date >= now,
        )

    def get_registration(self, class_id: int, student_id: str) -> Optional[Registration]:
        return (
            self.db.query(Registration)
            .populate_existing()
            .filter(Registration.class_id == class_id, Registration.student_id == student_id)
            .first()
        )

    def get_registrations_by_class_id(self, class_id: int) -> List[Registration]:
        return self.db.query(Registration).filter(Registration.class_id == class_id).all()

    def get_active_registrations_by_class_id(self, class_id: int, now: datetime) -> List[Registration]:
        return (
            self.db.query(Registration)
            .filter(Registration.class_id == class_id, self._active_as_of(now))
            .all()
        )

    def count_active_registrations(self, class_id: int, now: datetime) -> int:
        return (
            self.db.query(Registration)
            .filter(Registration.class_id == class_id, self._active_as_of(now))
            .count()
        )

    def get_active_registrations_by_class_ids(self, class_ids: List[int], now: datetime) -> List[Registration]:
        if not class_ids:
            return []
        return (
            self.db.query(Registration)
            .filter(Registration.class_id.in_(class_ids), self._active_as_of(now))
            .all()
        )

    def get_registrations_by_student_id(self, student_id: str) -> List[Registration]:
        return (
            self.db.query(Registration)
            .filter(Registration.student_id == student_id)
            .order_by(Registration.created_at.desc())
            .all()
        )

    def get_registrations_by_email(self, email: str) -> List[Registration]:
        return (
            self.db.query(Registration)
            .filter(Registration.email == email)
            .order_by(Registration.created_at.desc())
            .all()
        )

    def add_registration(self, record: Dict) -> Registration:
        new_registration = Registration(**record)
        self.db.add(new_registration)
        self.db.flush()
        return new_registration

    def delete_registration(self, registration: Registration) -> None:
        self.db.delete(registration)
        self.db.flush()
