"""
Custom exception classes and error handlers
Provides consistent error responses across the application
"""

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from typing import Any, Dict, List, Optional
import logging

from .config import settings

logger = logging.getLogger(__name__)

class WishlistHubException(HTTPException):
    """Base exception class for the Wishlist Hub application"""

    def __init__(
        self,
        status_code: int,
        detail: str,
        error_code: Optional[str] = None,
        headers: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error_code = error_code

class UnauthorizedException(WishlistHubException):
    """401 Unauthorized: missing, invalid or expired credential"""

    def __init__(self, detail: str = "Unauthorized", error_code: str = "UNAUTHORIZED"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            error_code=error_code,
            headers={"WWW-Authenticate": "Bearer"}
        )

class ForbiddenException(WishlistHubException):
    """403 Forbidden"""

    def __init__(self, detail: str = "Forbidden", error_code: str = "FORBIDDEN"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail,
            error_code=error_code
        )

class NotFoundException(WishlistHubException):
    """404 Not Found"""

    def __init__(self, detail: str = "Not found", error_code: str = "NOT_FOUND"):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            error_code=error_code
        )

class ConflictException(WishlistHubException):
    """409 Conflict"""

    def __init__(self, detail: str, error_code: str = "CONFLICT"):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail,
            error_code=error_code
        )

class ValidationException(WishlistHubException):
    """422 Unprocessable Entity with field-level detail"""

    def __init__(
        self,
        detail: str,
        field: Optional[str] = None,
        error_code: str = "VALIDATION_ERROR"
    ):
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=detail,
            error_code=error_code
        )
        self.fields: List[Dict[str, str]] = [{"field": field, "reason": detail}] if field else []

class StoreUnavailableException(WishlistHubException):
    """Persistence layer failure, surfaced as a generic server error"""

    def __init__(
        self,
        detail: str = "Internal server error",
        error_code: str = "STORE_UNAVAILABLE"
    ):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
            error_code=error_code
        )

# Business logic exceptions
class WishlistNotFoundException(NotFoundException):
    """Wishlist absent or not visible to the caller"""

    def __init__(self):
        super().__init__(detail="Wishlist not found", error_code="WISHLIST_NOT_FOUND")

class ProductNotFoundException(NotFoundException):
    """Product absent from the wishlist"""

    def __init__(self):
        super().__init__(detail="Product not found", error_code="PRODUCT_NOT_FOUND")

class DuplicateResourceException(ConflictException):
    """Resource already exists"""

    def __init__(self, resource: str, field: str, value: str):
        super().__init__(
            detail=f"{resource} with {field} '{value}' already exists",
            error_code="DUPLICATE_RESOURCE"
        )

def _error_body(request: Request, code: Optional[str], message: str) -> Dict[str, Any]:
    return {
        "error": {
            "code": code,
            "message": message,
            "request_id": getattr(request.state, "request_id", None)
        }
    }

async def wishlist_hub_exception_handler(request: Request, exc: WishlistHubException) -> JSONResponse:
    body = _error_body(request, exc.error_code, exc.detail)
    fields = getattr(exc, "fields", None)
    if fields:
        body["error"]["fields"] = fields
    if exc.status_code >= 500:
        logger.error(f"{exc.error_code} on {request.method} {request.url.path}: {exc.detail}")
    return JSONResponse(status_code=exc.status_code, content=body, headers=exc.headers)

async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = "NOT_FOUND" if exc.status_code == 404 else "HTTP_ERROR"
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(request, code, str(exc.detail)),
        headers=getattr(exc, "headers", None)
    )

async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        fields.append({
            "field": ".".join(location) or "body",
            "reason": error.get("msg", "Invalid value")
        })

    body = _error_body(request, "VALIDATION_ERROR", "Request validation failed")
    body["error"]["fields"] = fields
    return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content=body)

async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled exception: {str(exc)}")

    # Don't expose internal errors in production
    detail = str(exc) if settings.DEBUG else "An unexpected error occurred"
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(request, "INTERNAL_ERROR", detail)
    )

def register_exception_handlers(app: FastAPI) -> None:
    """Attach the error envelope handlers to the application"""
    app.add_exception_handler(WishlistHubException, wishlist_hub_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
