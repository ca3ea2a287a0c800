# /studio-backend/app/models/session_model.py

from datetime import datetime
from typing import List

from pydantic import BaseModel, Field, ConfigDict

from .class_model import ClassSummary


class SessionCreate(BaseModel):
    """
    Defines the contract for creating a session. `start` must not be later
    than `end`; the registry rejects inverted ranges.
    """
    name: str = Field(..., min_length=1)
    start: datetime
    end: datetime


class StudioSession(SessionCreate):
    model_config = ConfigDict(from_attributes=True)

    id: int


class SessionOverview(BaseModel):
    """A session with the occupancy of every class in it."""
    session: StudioSession
    classes: List[ClassSummary]
