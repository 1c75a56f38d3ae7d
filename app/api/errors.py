"""Render every HTTP error as {"error": "<message>"}."""
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

INVALID_PAYLOAD = "Invalid request payload"
MISSING_FIELDS = "Required fields are missing"

# Routes whose missing-field error names the fields
MISSING_FIELD_MESSAGES = {
    "/api/v1/auth/login": "Username and password are required",
    "/api/v1/auth/refresh-token": "Refresh token is required",
}

# Pydantic error types that mean "required value absent or empty"
MISSING_ERROR_TYPES = {"missing", "string_too_short"}


def validation_message(exc: RequestValidationError, path: str = "") -> str:
    errors = exc.errors()
    for error in errors:
        loc = tuple(error.get("loc", ()))
        # Unparseable JSON, or a body that is not an object
        if error.get("type") == "json_invalid" or loc == ("body",):
            return INVALID_PAYLOAD
    if errors and all(error.get("type") in MISSING_ERROR_TYPES for error in errors):
        return MISSING_FIELD_MESSAGES.get(path, MISSING_FIELDS)
    return INVALID_PAYLOAD


def install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": validation_message(exc, request.url.path)},
        )
