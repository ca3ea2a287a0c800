# /studio-backend/app/services/database_helpers/class_session_repository_sql.py

"""
This module contains all the raw SQLAlchemy queries for the Session and Class
tables. It is the direct interface to the database for the schedule.

Methods that take part in a ledger transaction (`get_class_for_update`,
`bump_class_version`, `remove_class`) never commit; the transaction runner
that calls them owns the commit or rollback.
"""

from datetime import datetime
from typing import List, Dict, Optional

from sqlalchemy import update
from sqlalchemy.orm import Session

from app.db.models.class_session_models import StudioSession, Class


class ClassSessionRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    # --- Session Methods ---

    def get_session_by_id(self, session_id: int) -> Optional[StudioSession]:
        return self.db.query(StudioSession).filter(StudioSession.id == session_id).first()

    def add_session(self, record: Dict) -> StudioSession:
        new_session = StudioSession(**record)
        self.db.add(new_session)
        self.db.commit()
        self.db.refresh(new_session)
        return new_session

    def get_active_sessions(self, now: datetime) -> List[StudioSession]:
        """Sessions whose end is not in the past, earliest start first."""
        return (
            self.db.query(StudioSession)
            .filter(StudioSession.end >= now)
            .order_by(StudioSession.start)
            .all()
        )

    # --- Class Methods ---

    def get_class_by_id(self, class_id: int) -> Optional[Class]:
        return self.db.query(Class).filter(Class.id == class_id).first()

    def get_class_for_update(self, class_id: int) -> Optional[Class]:
        """
        Reads the class inside a transaction attempt. `populate_existing`
        refreshes an instance already in the identity map, so the `version`
        seen here is the one stored right now.
        """
        return (
            self.db.query(Class)
            .populate_existing()
            .filter(Class.id == class_id)
            .first()
        )

    def get_classes_by_session_id(self, session_id: int) -> List[Class]:
        return self.db.query(Class).filter(Class.session_id == session_id).all()

    def get_classes_by_teacher_id(self, teacher_id: str) -> List[Class]:
        return self.db.query(Class).filter(Class.teacher_id == teacher_id).all()

    def add_class(self, record: Dict) -> Class:
        new_class = Class(**record)
        self.db.add(new_class)
        self.db.commit()
        self.db.refresh(new_class)
        return new_class

    def update_class(self, class_id: int, data: Dict) -> Optional[Class]:
        """
        Overwrites the supplied fields unconditionally. Staff edits do not take
        part in the registration version check.
        """
        db_class = self.get_class_by_id(class_id)
        if db_class:
            for key, value in data.items():
                setattr(db_class, key, value)
            self.db.commit()
            self.db.refresh(db_class)
        return db_class

    def bump_class_version(self, class_id: int, expected_version: int) -> bool:
        """
        Compare-and-set on the class's transaction-scope key. Returns False
        when another writer advanced the version since it was read.
        """
        result = self.db.execute(
            update(Class)
            .where(Class.id == class_id, Class.version == expected_version)
            .values(version=expected_version + 1)
            .execution_options(synchronize_session="evaluate")
        )
        return result.rowcount == 1

    def remove_class(self, db_class: Class) -> None:
        # The relationship cascade removes the class's remaining (expired) registrations.
        self.db.delete(db_class)
        self.db.flush()
