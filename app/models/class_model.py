# /studio-backend/app/models/class_model.py

# --- Core Imports ---
from datetime import time
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, ConfigDict


class ClassOrder(str, Enum):
    """The orderings a class listing can be returned in."""
    TITLE = "title"
    START_TIME = "start_time"
    WEEKDAY = "weekday"  # weekday, then start time: the printed schedule order


# --- Model Definitions ---

class ClassBase(BaseModel):
    """
    The base model for a Class. Contains fields common to create and read operations.
    """
    title: str = Field(..., min_length=1, description="The title shown on the schedule.")
    description: Optional[str] = Field(default=None)
    teacher_id: Optional[str] = Field(default=None, description="Account ID of the teacher, if assigned.")
    weekday: Optional[int] = Field(default=None, ge=0, le=6, description="0 is Monday, 6 is Sunday.")
    start_time: Optional[time] = Field(default=None)
    duration_minutes: Optional[int] = Field(default=None, gt=0)
    capacity: int = Field(..., gt=0, description="Maximum number of active registrations.")
    session_id: Optional[int] = Field(default=None, description="The session this class belongs to.")
    drop_in_only: bool = Field(default=False)


class ClassCreate(ClassBase):
    """The model used for creating a new class. Inherits all fields from the base."""
    pass


class ClassUpdate(BaseModel):
    """
    The model for updating a class. All fields are optional to allow for
    partial updates.
    """
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = Field(default=None)
    teacher_id: Optional[str] = Field(default=None)
    weekday: Optional[int] = Field(default=None, ge=0, le=6)
    start_time: Optional[time] = Field(default=None)
    duration_minutes: Optional[int] = Field(default=None, gt=0)
    capacity: Optional[int] = Field(default=None, gt=0)
    session_id: Optional[int] = Field(default=None)
    drop_in_only: Optional[bool] = Field(default=None)


class Class(ClassBase):
    """
    The full representation of a Class resource, as it is stored in the
    database and returned by the API.
    """
    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="The unique, server-generated identifier for the class.")


class ClassSummary(BaseModel):
    """A class together with its effective occupancy at the time of the request."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    capacity: int
    occupancy: int
    spacesLeft: int
