# /studio-backend/app/routers/students_router.py

from fastapi import APIRouter, Depends
from typing import List, Optional

from ..models import registration_model
from ..services import registration_service
from ..services.database_service import DatabaseService, get_db_service

router = APIRouter()


@router.get(
    "/by-email/registrations",
    response_model=List[registration_model.Registration],
    summary="List Registrations Made Under an Email Address"
)
def get_registrations_by_email(email: str, db: DatabaseService = Depends(get_db_service)):
    return registration_service.list_by_email(db=db, email=email)


@router.get(
    "/{student_id}/registrations",
    response_model=List[registration_model.Registration],
    summary="List a Student's Registrations"
)
def get_student_registrations(
    student_id: str,
    email: Optional[str] = None,
    db: DatabaseService = Depends(get_db_service)
):
    """
    Includes expired drop-ins. Passing the student's `email` also returns the
    registrations staff entered for that address before the student had an account.
    """
    return registration_service.list_by_student(db=db, student_id=student_id, email=email)
