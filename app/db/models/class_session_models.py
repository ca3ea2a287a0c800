# /studio-backend/app/db/models/class_session_models.py

"""
This module defines the SQLAlchemy ORM models for the `StudioSession` and
`Class` entities: the canonical schedule that students register against.
"""

from sqlalchemy import Column, String, Integer, Boolean, DateTime, Time, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..base_class import Base


class StudioSession(Base):
    """
    SQLAlchemy model representing a session: a named date range (a term)
    which groups classes together.
    """
    __tablename__ = "sessions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    start = Column(DateTime, nullable=False)
    end = Column(DateTime, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    classes = relationship("Class", back_populates="session")


class Class(Base):
    """
    SQLAlchemy model representing a recurring yoga class with a fixed capacity.

    `version` is the transaction-scope key for the class's registrations. Every
    admission into the ledger advances it with a compare-and-set update, so two
    registrations racing for the same class cannot both commit against the
    same view of the roster.
    """
    __tablename__ = "classes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String, index=True, nullable=False)
    description = Column(String, nullable=True)
    teacher_id = Column(String, nullable=True, index=True)

    # 0 is Monday, matching `date.weekday()`.
    weekday = Column(Integer, nullable=True)
    start_time = Column(Time, nullable=True)
    duration_minutes = Column(Integer, nullable=True)

    capacity = Column(Integer, nullable=False)
    session_id = Column(Integer, ForeignKey("sessions.id"), nullable=True, index=True)
    drop_in_only = Column(Boolean, nullable=False, default=False)

    version = Column(Integer, nullable=False, default=0)

    session = relationship("StudioSession", back_populates="classes")

    # Registrations are removed with the class; deletion itself is guarded by
    # the registry, which refuses while any of them is still active.
    registrations = relationship("Registration", back_populates="class_", cascade="all, delete-orphan")
