# /studio-backend/app/routers/sessions_router.py

from fastapi import APIRouter, Depends, status
from typing import List

from ..models import class_model, session_model
from ..services import class_service, registration_service
from ..services.database_service import DatabaseService, get_db_service

router = APIRouter()


@router.post(
    "",
    response_model=session_model.StudioSession,
    status_code=status.HTTP_201_CREATED,
    summary="Create a Session"
)
def create_session(payload: session_model.SessionCreate, db: DatabaseService = Depends(get_db_service)):
    return class_service.create_session(session_data=payload, db=db)


@router.get(
    "/active",
    response_model=List[session_model.StudioSession],
    summary="List Sessions That Have Not Ended"
)
def get_active_sessions(db: DatabaseService = Depends(get_db_service)):
    return class_service.list_active_sessions(db=db)


@router.get("/{session_id}", response_model=session_model.StudioSession, summary="Get a Session")
def get_session(session_id: int, db: DatabaseService = Depends(get_db_service)):
    return class_service.get_session(session_id=session_id, db=db)


@router.get(
    "/{session_id}/classes",
    response_model=List[class_model.Class],
    summary="List the Classes in a Session"
)
def get_session_classes(
    session_id: int,
    order: class_model.ClassOrder = class_model.ClassOrder.TITLE,
    db: DatabaseService = Depends(get_db_service)
):
    """
    Classes can be ordered by `title`, `start_time`, or `weekday` (weekday,
    then start time).
    """
    return class_service.list_classes_in_session(session_id=session_id, db=db, order=order)


@router.get(
    "/{session_id}/overview",
    response_model=session_model.SessionOverview,
    summary="Get a Session with the Occupancy of Each Class"
)
def get_session_overview(session_id: int, db: DatabaseService = Depends(get_db_service)):
    return registration_service.summarize_session(db=db, session_id=session_id)
