# /studio-backend/app/routers/classes_router.py

from fastapi import APIRouter, Depends, HTTPException, status, Response
from fastapi.responses import StreamingResponse
from typing import List

from ..models import class_model, registration_model
from ..services import class_service, registration_service, database_service
from ..services.database_helpers.transactions import RetryPolicy, get_retry_policy

router = APIRouter()

# --- CLASS COLLECTION ENDPOINTS (/api/classes) ---

@router.post("", response_model=class_model.Class, status_code=status.HTTP_201_CREATED, summary="Create a New Class")
def create_new_class(class_create: class_model.ClassCreate, db: database_service.DatabaseService = Depends(database_service.get_db_service)):
    return class_service.add_class(class_data=class_create, db=db)

@router.get("/teacher/{teacher_id}", response_model=List[class_model.Class], summary="List the Classes a Teacher Is Assigned To")
def get_classes_for_teacher(teacher_id: str, order: class_model.ClassOrder = class_model.ClassOrder.WEEKDAY, db: database_service.DatabaseService = Depends(database_service.get_db_service)):
    return class_service.list_classes_for_teacher(teacher_id=teacher_id, db=db, order=order)

# --- INDIVIDUAL CLASS RESOURCE ENDPOINTS (/api/classes/{class_id}) ---

@router.get("/{class_id}", response_model=class_model.Class, summary="Get a Single Class")
def get_class_by_id(class_id: int, db: database_service.DatabaseService = Depends(database_service.get_db_service)):
    return class_service.get_class(class_id=class_id, db=db)

@router.put("/{class_id}", response_model=class_model.Class, summary="Update a Class")
def update_class_details(class_id: int, class_update: class_model.ClassUpdate, db: database_service.DatabaseService = Depends(database_service.get_db_service)):
    try:
        return class_service.update_class(class_id=class_id, class_update=class_update, db=db)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.delete("/{class_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a Class Without Active Registrations")
def delete_class(class_id: int, db: database_service.DatabaseService = Depends(database_service.get_db_service), policy: RetryPolicy = Depends(get_retry_policy)):
    class_service.delete_class(class_id=class_id, db=db, policy=policy)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.get("/{class_id}/export", summary="Export Class Roster as CSV", response_class=StreamingResponse)
def export_class_roster_csv(class_id: int, db: database_service.DatabaseService = Depends(database_service.get_db_service)):
    csv_string = registration_service.export_roster_as_csv(db=db, class_id=class_id)
    class_details = class_service.get_class(class_id=class_id, db=db)
    file_name = f"roster_{class_details.title.replace(' ', '_').lower()}.csv"
    return StreamingResponse(iter([csv_string]), media_type="text/csv", headers={"Content-Disposition": f"attachment; filename={file_name}"})

# --- REGISTRATION SUB-RESOURCE ENDPOINTS ---

@router.get("/{class_id}/registrations", response_model=List[registration_model.Registration], summary="Get the Active Roster of a Class")
def get_class_roster(class_id: int, db: database_service.DatabaseService = Depends(database_service.get_db_service)):
    return registration_service.list_active(db=db, class_id=class_id)

@router.post("/{class_id}/registrations", response_model=registration_model.RegistrationResult, summary="Register a Student for a Class")
def register_student(class_id: int, request: registration_model.RegistrationRequest, response: Response, db: database_service.DatabaseService = Depends(database_service.get_db_service), policy: RetryPolicy = Depends(get_retry_policy)):
    result = registration_service.register_for_day(db=db, student=request.student, class_id=class_id, kind=request.kind, day=request.date, policy=policy)
    if result.outcome == registration_model.RegistrationOutcome.REGISTERED:
        response.status_code = status.HTTP_201_CREATED
    return result

@router.post("/{class_id}/registrations/paper", response_model=registration_model.RegistrationResult, summary="Register a Student Without an Account")
def register_paper_student(class_id: int, request: registration_model.PaperRegistrationRequest, response: Response, db: database_service.DatabaseService = Depends(database_service.get_db_service), policy: RetryPolicy = Depends(get_retry_policy)):
    result = registration_service.register_paper_student(
        db=db, class_id=class_id, first_name=request.first_name, last_name=request.last_name,
        email=request.email, phone=request.phone, kind=request.kind, day=request.date, policy=policy,
    )
    if result.outcome == registration_model.RegistrationOutcome.REGISTERED:
        response.status_code = status.HTTP_201_CREATED
    return result

@router.get("/{class_id}/registrations/{student_id}", response_model=registration_model.Registration, summary="Get a Student's Active Registration")
def get_registration(class_id: int, student_id: str, db: database_service.DatabaseService = Depends(database_service.get_db_service)):
    return registration_service.lookup_registration(db=db, class_id=class_id, student_id=student_id)

@router.delete("/{class_id}/registrations/{student_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Remove a Student from a Class")
def remove_student_from_class(class_id: int, student_id: str, db: database_service.DatabaseService = Depends(database_service.get_db_service), policy: RetryPolicy = Depends(get_retry_policy)):
    registration_service.unregister(db=db, class_id=class_id, student_id=student_id, policy=policy)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
