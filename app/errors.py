"""API error type and the exception handlers that render the {error, message} envelope."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.schemas.bien import VALIDATION_MESSAGES

logger = logging.getLogger(__name__)

_HTTP_ERROR_LABELS = {
    400: "Requête invalide",
    401: "Non authentifié",
    403: "Accès refusé",
    404: "Ressource non trouvée",
    405: "Méthode non autorisée",
}


class ApiError(Exception):
    """An error that maps straight onto an HTTP status and a JSON body."""

    def __init__(self, status_code: int, error: str, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.error = error
        self.message = message


def server_error(message: str) -> ApiError:
    """Generic 500: the caller only ever sees the fixed message."""
    return ApiError(500, "Erreur serveur", message)


def validation_details(errors) -> list[dict[str, str]]:
    """Flatten pydantic errors into [{field, message}] using the French field messages."""
    details = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        field = loc[-1] if loc else ""
        details.append({
            "field": field,
            "message": VALIDATION_MESSAGES.get(field, err.get("msg", "Valeur invalide")),
        })
    return details


async def _api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.error, "message": exc.message},
    )


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = validation_details(exc.errors())
    logger.info("Validation failed on %s %s: %s", request.method, request.url.path, details)
    return JSONResponse(status_code=400, content={"error": "Données invalides", "details": details})


async def _http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": _HTTP_ERROR_LABELS.get(exc.status_code, "Erreur"),
            "message": str(exc.detail),
        },
        headers=getattr(exc, "headers", None),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, _api_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)
