from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from typing import Any, Optional

from .schemas.appointments.appointment import field_errors


def create_error_response(error_message: str, data: Optional[Any] = None) -> dict:
    """Create a standardized error response"""
    return {
        "success": False,
        "data": data,
        "error": error_message
    }

def create_success_response(data: Any) -> dict:
    """Create a standardized success response"""
    return {
        "success": True,
        "data": data,
        "error": None
    }

async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Render HTTPException in the standard envelope"""
    return JSONResponse(
        status_code=exc.status_code,
        content=create_error_response(str(exc.detail))
    )

async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report request validation errors as one message per field"""
    fields = field_errors(exc.errors())
    first = next(iter(fields.values()), "Invalid request")
    return JSONResponse(
        status_code=422,
        content=create_error_response(first, data={"fields": fields})
    )
