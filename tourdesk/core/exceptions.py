"""RFC 9457 problem-details errors and their FastAPI handlers."""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse

PROBLEM_BASE_URI = "https://tourdesk.dev/problems"

logger = logging.getLogger(__name__)


class ProblemDetailsException(HTTPException):
    """
    Error rendered as an ``application/problem+json`` body.

    ``slug`` names the problem type and becomes the ``type`` URI. Any
    ``extensions`` are merged into the top level of the body.
    """

    def __init__(
        self,
        status_code: int,
        title: str,
        slug: str,
        detail: Optional[str] = None,
        instance: Optional[str] = None,
        extensions: Optional[dict[str, Any]] = None,
    ):
        self.title = title
        self.problem_details: dict[str, Any] = {
            "type": f"{PROBLEM_BASE_URI}/{slug}",
            "title": title,
            "status": status_code,
        }
        if detail:
            self.problem_details["detail"] = detail
        if instance:
            self.problem_details["instance"] = instance
        self.problem_details.update(extensions or {})

        super().__init__(status_code=status_code, detail=self.problem_details)

    def __str__(self) -> str:
        return self.problem_details.get("detail") or self.title


class NotFoundError(ProblemDetailsException):
    """A referenced booking or other resource does not exist."""

    def __init__(
        self,
        resource_type: str = "resource",
        resource_id: Optional[str] = None,
        detail: Optional[str] = None,
    ):
        if not detail:
            target = f"{resource_type} with ID '{resource_id}'" if resource_id else resource_type
            detail = f"The requested {target} could not be found"

        extensions = {"resource_type": resource_type}
        if resource_id:
            extensions["resource_id"] = resource_id

        super().__init__(
            status_code=404,
            title="Resource Not Found",
            slug="resource-not-found",
            detail=detail,
            extensions=extensions,
        )


class PersistenceError(ProblemDetailsException):
    """
    A durable write failed or timed out.

    This is the only error kind of the reconciliation layer. When raised for
    the primary booking write, the optimistic local mutation has already been
    compensated and the caller may retry.
    """

    def __init__(
        self,
        stage: str,
        detail: Optional[str] = None,
        resource_id: Optional[str] = None,
    ):
        extensions: dict[str, Any] = {
            "code": "PERSISTENCE_FAILED",
            "retryable": True,
            "stage": stage,
        }
        if resource_id:
            extensions["resource_id"] = resource_id

        super().__init__(
            status_code=503,
            title="Persistence Failed",
            slug="persistence-failed",
            detail=detail or f"Durable write failed during {stage}",
            extensions=extensions,
        )
        self.stage = stage


def _problem_response(status_code: int, body: dict[str, Any]) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=body,
        media_type="application/problem+json",
    )


async def problem_details_handler(request: Request, exc: ProblemDetailsException) -> JSONResponse:
    """Render a ``ProblemDetailsException`` as its problem body."""
    body = dict(exc.problem_details)
    body.setdefault("instance", request.url.path)
    return _problem_response(exc.status_code, body)


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render an unhandled exception as an opaque 500 problem with an error ID."""
    error_id = uuid.uuid4().hex
    logger.error(
        "Unhandled exception",
        exc_info=exc,
        extra={"error_id": error_id, "path": request.url.path}
    )
    return _problem_response(500, {
        "type": f"{PROBLEM_BASE_URI}/internal-server-error",
        "title": "Internal Server Error",
        "status": 500,
        "detail": "An unexpected error occurred while processing the request",
        "instance": request.url.path,
        "error_id": error_id,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    })
