# /studio-backend/app/db/models/registration_models.py

"""
This module defines the SQLAlchemy ORM model for a `Registration`: one
student's reserved place in one class, either for the whole session or as a
drop-in for a single date.
"""

from sqlalchemy import Column, String, Integer, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..base_class import Base


class Registration(Base):
    """
    SQLAlchemy model for a ledger entry.

    The composite primary key `(class_id, student_id)` makes a row the single
    slot a student can hold in a class. An expired drop-in keeps occupying the
    key until a new registration supersedes it.
    """
    class_id = Column(Integer, ForeignKey("classes.id"), primary_key=True)
    student_id = Column(String, primary_key=True, index=True)

    # Contact snapshot taken when the student registered.
    first_name = Column(String, nullable=False, default="")
    last_name = Column(String, nullable=False, default="")
    email = Column(String, nullable=False, default="", index=True)
    phone = Column(String, nullable=True)

    kind = Column(String, nullable=False)  # 'session' or 'drop_in'
    date = Column(DateTime, nullable=True, index=True)  # drop-ins only
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    class_ = relationship("Class", back_populates="registrations")
