# /studio-backend/app/services/database_service.py

from datetime import datetime
from typing import List, Dict, Optional, Generator

from sqlalchemy.orm import Session
from fastapi import Depends

# --- Core Database Setup ---
from app.db.database import get_db

# --- Repository Imports ---
from .database_helpers.class_session_repository_sql import ClassSessionRepositorySQL
from .database_helpers.registration_repository_sql import RegistrationRepositorySQL

from app.db.models.class_session_models import StudioSession, Class
from app.db.models.registration_models import Registration


class DatabaseService:
    def __init__(self, db_session: Session):
        """
        Initializes the DatabaseService on top of one SQLAlchemy session.
        All repositories share it, so a ledger transaction spans every table.
        """
        if db_session is None:
            raise ValueError("A database session is required.")
        self.session = db_session
        self.class_session_repo = ClassSessionRepositorySQL(db_session)
        self.registration_repo = RegistrationRepositorySQL(db_session)

    # --- TRANSACTION CONTROL ---
    def commit(self): self.session.commit()
    def rollback(self): self.session.rollback()

    # --- SESSION METHODS (DELEGATED) ---
    def get_session_by_id(self, session_id: int) -> Optional[StudioSession]: return self.class_session_repo.get_session_by_id(session_id)
    def add_session(self, session_record: Dict) -> StudioSession: return self.class_session_repo.add_session(session_record)
    def get_active_sessions(self, now: datetime) -> List[StudioSession]: return self.class_session_repo.get_active_sessions(now)

    # --- CLASS METHODS (DELEGATED) ---
    def get_class_by_id(self, class_id: int) -> Optional[Class]: return self.class_session_repo.get_class_by_id(class_id)
    def get_class_for_update(self, class_id: int) -> Optional[Class]: return self.class_session_repo.get_class_for_update(class_id)
    def get_classes_by_session_id(self, session_id: int) -> List[Class]: return self.class_session_repo.get_classes_by_session_id(session_id)
    def get_classes_by_teacher_id(self, teacher_id: str) -> List[Class]: return self.class_session_repo.get_classes_by_teacher_id(teacher_id)
    def add_class(self, class_record: Dict) -> Class: return self.class_session_repo.add_class(class_record)
    def update_class(self, class_id: int, class_update_data: Dict) -> Optional[Class]: return self.class_session_repo.update_class(class_id, class_update_data)
    def bump_class_version(self, class_id: int, expected_version: int) -> bool: return self.class_session_repo.bump_class_version(class_id, expected_version)
    def remove_class(self, db_class: Class) -> None: return self.class_session_repo.remove_class(db_class)

    # --- REGISTRATION METHODS (DELEGATED) ---
    def get_registration(self, class_id: int, student_id: str) -> Optional[Registration]: return self.registration_repo.get_registration(class_id, student_id)
    def get_registrations_by_class_id(self, class_id: int) -> List[Registration]: return self.registration_repo.get_registrations_by_class_id(class_id)
    def get_active_registrations_by_class_id(self, class_id: int, now: datetime) -> List[Registration]: return self.registration_repo.get_active_registrations_by_class_id(class_id, now)
    def get_active_registrations_by_class_ids(self, class_ids: List[int], now: datetime) -> List[Registration]: return self.registration_repo.get_active_registrations_by_class_ids(class_ids, now)
    def count_active_registrations(self, class_id: int, now: datetime) -> int: return self.registration_repo.count_active_registrations(class_id, now)
    def get_registrations_by_student_id(self, student_id: str) -> List[Registration]: return self.registration_repo.get_registrations_by_student_id(student_id)
    def get_registrations_by_email(self, email: str) -> List[Registration]: return self.registration_repo.get_registrations_by_email(email)
    def add_registration(self, registration_record: Dict) -> Registration: return self.registration_repo.add_registration(registration_record)
    def delete_registration(self, registration: Registration) -> None: return self.registration_repo.delete_registration(registration)


def get_db_service(db: Session = Depends(get_db)) -> Generator[DatabaseService, None, None]:
    """
    FastAPI dependency that provides a DatabaseService instance.
    """
    yield DatabaseService(db_session=db)
