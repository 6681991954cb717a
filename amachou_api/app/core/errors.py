"""
Error types and the exception handlers that render them.

Every error leaves the API as an ``application/problem+json`` body::

    {
        "type": "https://www.jhipster.tech/problem/problem-with-message",
        "title": "A new disease cannot already have an ID",
        "status": 400,
        "entityName": "disease",
        "errorKey": "idexists",
        "message": "error.idexists",
        "params": "disease"
    }

``register_exception_handlers`` installs the handlers on an app.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import settings
from .headers import create_failure_alert

logger = logging.getLogger(__name__)

PROBLEM_BASE_URL = "https://www.jhipster.tech/problem"
DEFAULT_TYPE = f"{PROBLEM_BASE_URL}/problem-with-message"
CONSTRAINT_VIOLATION_TYPE = f"{PROBLEM_BASE_URL}/constraint-violation"
PROBLEM_MEDIA_TYPE = "application/problem+json"


class BadRequestAlertException(Exception):
    """Client sent an entity in the wrong identifier state (or similar).

    ``entity_name`` and ``error_key`` are echoed in the body and in the
    failure alert headers.
    """

    def __init__(self, default_message: str, entity_name: str, error_key: str) -> None:
        super().__init__(default_message)
        self.default_message = default_message
        self.entity_name = entity_name
        self.error_key = error_key

    def to_response(self) -> Dict[str, Any]:
        return {
            "type": DEFAULT_TYPE,
            "title": self.default_message,
            "status": status.HTTP_400_BAD_REQUEST,
            "entityName": self.entity_name,
            "errorKey": self.error_key,
            "message": f"error.{self.error_key}",
            "params": self.entity_name,
        }


def problem_response(
    status_code: int,
    title: str,
    message: str,
    *,
    problem_type: str = DEFAULT_TYPE,
    detail: Optional[str] = None,
    extra: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    body: Dict[str, Any] = {
        "type": problem_type,
        "title": title,
        "status": status_code,
        "message": message,
    }
    if detail:
        body["detail"] = detail
    if extra:
        body.update(extra)
    return JSONResponse(
        status_code=status_code,
        content=body,
        headers=headers,
        media_type=PROBLEM_MEDIA_TYPE,
    )


async def bad_request_alert_handler(request: Request, exc: BadRequestAlertException) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=exc.to_response(),
        headers=create_failure_alert(exc.entity_name, exc.error_key, exc.default_message),
        media_type=PROBLEM_MEDIA_TYPE,
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Schema and parameter failures become 400 with per‑field errors."""
    logger.warning("Validation error on %s: %s", request.url.path, exc.errors())
    field_errors = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ())]
        object_name = loc[0] if loc else "request"
        field_errors.append(
            {
                "objectName": object_name,
                "field": ".".join(loc[1:]),
                "message": error.get("msg", ""),
            }
        )
    return problem_response(
        status.HTTP_400_BAD_REQUEST,
        "Method argument not valid",
        "error.validation",
        problem_type=CONSTRAINT_VIOLATION_TYPE,
        extra={"fieldErrors": field_errors},
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    title = str(exc.detail) if exc.detail else "HTTP error"
    return problem_response(
        exc.status_code,
        title,
        f"error.http.{exc.status_code}",
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception on %s", request.url.path)
    return problem_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal Server Error",
        "error.http.500",
        detail=str(exc) if settings.debug else None,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BadRequestAlertException, bad_request_alert_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
