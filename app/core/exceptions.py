# app/core/exceptions.py
"""Custom exceptions for the studio registration backend."""
import logging

from fastapi import Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class StudioError(Exception):
    """Base exception for every outcome the services report to their callers."""
    def __init__(self, message: str, status_code: int = 500):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class NotFoundError(StudioError):
    """Resource not found exception"""
    def __init__(self, resource: str, id=None):
        message = f"{resource} not found"
        if id is not None:
            message += f" with id: {id}"
        super().__init__(message, 404)


class ClassNotFound(NotFoundError):
    def __init__(self, class_id):
        super().__init__("Class", class_id)


class SessionNotFound(NotFoundError):
    def __init__(self, session_id):
        super().__init__("Session", session_id)


class RegistrationNotFound(NotFoundError):
    def __init__(self, class_id, student_id: str):
        super().__init__("Registration", f"{student_id} in class {class_id}")


class ClassFull(StudioError):
    """The class had no free space at the moment the registration was decided."""
    def __init__(self, class_id, capacity: int):
        self.class_id = class_id
        self.capacity = capacity
        super().__init__(f"Class {class_id} is full (capacity {capacity})", 409)


class ClassNotEmpty(StudioError):
    """Deletion blocked because the class still has active registrations."""
    def __init__(self, class_id):
        self.class_id = class_id
        super().__init__(f"Class {class_id} still has active registrations", 409)


class ConcurrencyExhausted(StudioError):
    """
    Every attempt of a ledger transaction lost to a concurrent writer. The
    caller may safely try again later.
    """
    def __init__(self, class_id, attempts: int):
        self.class_id = class_id
        self.attempts = attempts
        super().__init__(
            f"Too many concurrent updates to class {class_id} ({attempts} attempts)", 503
        )


class ValidationException(StudioError):
    """Validation error exception"""
    def __init__(self, message: str):
        super().__init__(message, 422)


class InvalidDropInDate(ValidationException):
    pass


class InvalidRegistrationKind(ValidationException):
    pass


class InvalidSessionRange(ValidationException):
    pass


class InvalidCapacity(ValidationException):
    pass


async def studio_exception_handler(request: Request, exc: StudioError):
    """Handle custom studio exceptions"""
    if exc.status_code >= 500:
        logger.error(f"Studio error: {exc.message} - Path: {request.url.path}")
    else:
        logger.info(f"Request rejected: {exc.message} - Path: {request.url.path}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message, "type": exc.__class__.__name__}
    )
