# /studio-backend/app/models/registration_model.py

"""
Data contracts for the registration ledger.

A registration is a tagged variant: `SessionRegistration` holds a place for
the whole session, `DropInRegistration` holds one for a single date. Whether
an entry still counts against capacity is decided by `is_active`, a pure
function of the variant and the evaluation time.
"""

from datetime import date as date_type, datetime
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, ConfigDict

from ..core.clock import to_utc_naive


class RegistrationKind(str, Enum):
    SESSION = "session"
    DROP_IN = "drop_in"


class RegistrationOutcome(str, Enum):
    REGISTERED = "registered"
    # The pair already held an active registration; nothing was written.
    ALREADY_REGISTERED = "already_registered"


class StudentInfo(BaseModel):
    """
    Identity and contact snapshot supplied by the account provider. The ledger
    copies it into the registration; later account edits do not flow back.
    """
    student_id: str = Field(..., min_length=1)
    first_name: str = Field(default="")
    last_name: str = Field(default="")
    email: str = Field(default="")
    phone: Optional[str] = Field(default=None)


class _RegistrationBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    class_id: int
    student_id: str
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: Optional[str] = None
    created_at: Optional[datetime] = None


class SessionRegistration(_RegistrationBase):
    kind: Literal["session"] = "session"

    def is_active(self, now: datetime) -> bool:
        return True


class DropInRegistration(_RegistrationBase):
    kind: Literal["drop_in"] = "drop_in"
    # The moment after which the drop-in no longer holds a place.
    date: datetime

    def is_active(self, now: datetime) -> bool:
        return to_utc_naive(self.date) >= to_utc_naive(now)


Registration = Annotated[Union[SessionRegistration, DropInRegistration], Field(discriminator="kind")]


def registration_from_record(record) -> Registration:
    """Builds the matching variant from an ORM row (or any object with the same attributes)."""
    if RegistrationKind(record.kind) == RegistrationKind.DROP_IN:
        return DropInRegistration.model_validate(record)
    return SessionRegistration.model_validate(record)


class RegistrationResult(BaseModel):
    outcome: RegistrationOutcome
    registration: Registration


# --- API request bodies ---

class RegistrationRequest(BaseModel):
    """
    Body of a self-service registration. Authentication happens upstream; the
    caller forwards the authenticated student's snapshot.
    """
    student: StudentInfo
    kind: RegistrationKind = RegistrationKind.SESSION
    date: Optional[date_type] = Field(default=None, description="Required for drop-ins (YYYY-MM-DD).")


class PaperRegistrationRequest(BaseModel):
    """Body of a staff-entered registration for a student without an account."""
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    phone: Optional[str] = None
    kind: RegistrationKind = RegistrationKind.SESSION
    date: Optional[date_type] = None
