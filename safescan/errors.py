"""
Exception handlers that turn every failure into the `{message}` envelope.

Validation problems and duplicate keys are 400s, missing records and auth
failures keep the status of the HTTPException that reported them, and
anything unexpected is a 500.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


def format_validation_errors(errors) -> str:
    parts = []
    for err in errors:
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        msg = err.get("msg", "Invalid value")
        parts.append(f"{'.'.join(loc)}: {msg}" if loc else msg)
    return "; ".join(parts) or "Invalid request"


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    logger.warning("%s %s -> %s %s", request.method, request.url.path, exc.status_code, exc.detail)
    return error_response(exc.status_code, str(exc.detail))


async def validation_exception_handler(request: Request, exc):
    message = format_validation_errors(exc.errors())
    logger.warning("%s %s -> 400 %s", request.method, request.url.path, message)
    return error_response(400, message)


async def integrity_error_handler(request: Request, exc: IntegrityError):
    logger.warning("%s %s -> 400 duplicate key: %s", request.method, request.url.path, exc.orig)
    return error_response(400, "Duplicate field value entered")


async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error("Database error on %s %s", request.method, request.url.path, exc_info=exc)
    return error_response(500, "Database error")


async def stored_data_error_handler(request: Request, exc: ValidationError):
    # request bodies fail as RequestValidationError; this is a stored record that no longer fits its schema
    logger.error("Invalid stored data on %s %s: %s", request.method, request.url.path, exc)
    return error_response(500, "Server Error")


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return error_response(500, "Server Error")


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(ValidationError, stored_data_error_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
