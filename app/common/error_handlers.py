"""
Manejadores globales de errores.

- RequestValidationError -> 400 con el primer mensaje y el detalle por campo
- Exception (catch-all) -> 500 {"detail": ...} con traceback en el log

Las HTTPException de los servicios usan el manejador por defecto de FastAPI.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

VALUE_ERROR_PREFIX = "Value error, "


def register_error_handlers(app: FastAPI) -> None:
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"Validation error on {request.url.path}: {exc.errors()}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=build_validation_error_response(exc.errors()),
        )


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": str(exc) or "Internal server error"},
        )


def _field_name(loc) -> str:
    # ("body", "items", 0, "quantity") -> "items.0.quantity"
    parts = [str(part) for part in loc if part not in ("body", "query", "path")]
    return ".".join(parts)


def _clean_message(message: str) -> str:
    if message.startswith(VALUE_ERROR_PREFIX):
        return message[len(VALUE_ERROR_PREFIX):]
    return message


def build_validation_error_response(errors) -> dict:
    details = [
        {"field": _field_name(e.get("loc", ())), "message": _clean_message(e.get("msg", ""))}
        for e in errors
    ]
    return {
        "detail": details[0]["message"] if details else "Invalid request data",
        "errors": details,
    }
