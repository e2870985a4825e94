"""Error rendering: every failure leaves the API as ``application/problem+json``.

Service errors carry a stable upper-case ``code`` (``INVALID_CREDENTIALS``,
``USER_DELETED``...) that clients branch on; transport-level failures
(routing, schema validation, JWT verification) use lower-case codes. The
``detail`` of a 5xx never contains internal information.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, jsonify, request
from marshmallow import ValidationError as MarshmallowValidationError
from werkzeug.exceptions import HTTPException

from vault_api.core.extensions import jwt
from vault_api.core.logger import ensure_request_id
from vault_api.services._shared.errors import (
    AuthenticationError,
    ConflictError,
    InternalServiceError,
    ServiceError,
    ValidationFailedError,
)

log = logging.getLogger(__name__)

PROBLEM_MIMETYPE = "application/problem+json"
GENERIC_5XX_DETAIL = "Unexpected error"

# Service error family -> HTTP status. First match wins (most specific first).
SERVICE_ERROR_STATUS: tuple[tuple[type[ServiceError], HTTPStatus], ...] = (
    (ValidationFailedError, HTTPStatus.BAD_REQUEST),
    (ConflictError, HTTPStatus.CONFLICT),
    (AuthenticationError, HTTPStatus.UNAUTHORIZED),
    (InternalServiceError, HTTPStatus.INTERNAL_SERVER_ERROR),
)


def status_for(err: ServiceError) -> HTTPStatus:
    """Return the HTTP status for a service error (400 when unmapped)."""
    for error_type, status in SERVICE_ERROR_STATUS:
        if isinstance(err, error_type):
            return status
    return HTTPStatus.BAD_REQUEST


def code_for_status(status: int) -> str:
    """Derive a transport code from the status phrase: 404 -> ``not_found``."""
    try:
        phrase = HTTPStatus(status).phrase
    except ValueError:
        return "error"
    return phrase.lower().replace(" ", "_").replace("-", "_")


@dataclass(slots=True)
class Problem:
    """
    RFC 7807 problem document plus the ``code`` and ``request_id`` extensions.

    :param status: HTTP status.
    :param code: Stable machine-readable identifier.
    :param detail: Client-safe explanation.
    :param details: Optional structured data (e.g. per-field schema errors).
    """

    status: int
    code: str
    detail: str
    details: dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        status = HTTPStatus(self.status)
        doc: dict[str, Any] = {
            "type": "about:blank",
            "title": status.phrase,
            "status": int(status),
            "detail": self.detail,
            "instance": request.path if request else None,
            "code": self.code,
            "request_id": ensure_request_id(),
        }
        if self.details:
            doc["details"] = self.details
        return doc

    def response(self) -> tuple[Response, int]:
        resp = jsonify(self.as_dict())
        resp.mimetype = PROBLEM_MIMETYPE
        return resp, self.status

    def log(self, summary: str, *, exc: BaseException | None = None) -> None:
        """Server faults at ERROR (with traceback when given), client faults at WARNING."""
        level = logging.ERROR if self.status >= 500 else logging.WARNING
        log.log(
            level,
            "%s: code=%s status=%s",
            summary,
            self.code,
            self.status,
            exc_info=exc if self.status >= 500 else None,
            extra={"code": self.code},
        )


class APIError(Exception):
    """
    An error raised directly by a view.

    Parameters
    ----------
    message : str
        Client-safe description.
    status_code : int, optional
        HTTP status. Defaults to ``400``.
    code : str, optional
        Machine-readable identifier. Defaults to the status phrase code.
    details : dict[str, Any] | None, optional
        Structured payload included in the response body.
    """

    def __init__(
        self,
        message: str,
        status_code: int = HTTPStatus.BAD_REQUEST,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.problem = Problem(
            status=int(status_code),
            code=code or code_for_status(int(status_code)),
            detail=message,
            details=details or {},
        )

    @classmethod
    def from_service_error(cls, err: ServiceError) -> APIError:
        """Translate a service error; internal failures never expose detail."""
        status = status_for(err)
        detail = GENERIC_5XX_DETAIL if status >= HTTPStatus.INTERNAL_SERVER_ERROR else str(err)
        return cls(detail, status_code=status, code=err.code)

    @property
    def status_code(self) -> int:
        return self.problem.status

    @property
    def code(self) -> str:
        return self.problem.code


class Unauthorized(APIError):
    """401 for requests whose bearer token was rejected."""

    def __init__(self, message: str = "Unauthorized", code: str = "unauthorized") -> None:
        super().__init__(message, status_code=HTTPStatus.UNAUTHORIZED, code=code)


# --------------------------------------------------------------------------- #
# Handlers
# --------------------------------------------------------------------------- #


def _jwt_rejected(message: str, code: str) -> tuple[Response, int]:
    problem = Unauthorized(message, code=code).problem
    problem.log("JWT rejected")
    return problem.response()


def _register_jwt_loaders() -> None:
    """Render flask-jwt-extended failures as 401 problems."""

    @jwt.unauthorized_loader
    def _missing_token(reason: str):
        return _jwt_rejected(reason, "token_missing")

    @jwt.invalid_token_loader
    def _invalid_token(reason: str):
        return _jwt_rejected(reason, "token_invalid")

    @jwt.expired_token_loader
    def _expired_token(_jwt_header: dict[str, Any], _jwt_payload: dict[str, Any]):
        return _jwt_rejected("Token has expired", "token_expired")


def handle_api_error(err: APIError):
    err.problem.log("APIError")
    return err.problem.response()


def handle_service_error(err: ServiceError):
    problem = APIError.from_service_error(err).problem
    # The service guard already logged the traceback of internal failures
    problem.log("ServiceError")
    return problem.response()


def handle_http_exception(err: HTTPException):
    status = int(err.code or HTTPStatus.INTERNAL_SERVER_ERROR)
    if status == HTTPStatus.NOT_FOUND:
        detail = f"Route '{request.path}' not found"
    elif status >= HTTPStatus.INTERNAL_SERVER_ERROR:
        detail = GENERIC_5XX_DETAIL
    else:
        detail = (err.description or HTTPStatus(status).phrase).strip()
    problem = Problem(status=status, code=code_for_status(status), detail=detail)
    problem.log("HTTPException")
    return problem.response()


def handle_schema_error(err: MarshmallowValidationError):
    problem = Problem(
        status=HTTPStatus.UNPROCESSABLE_ENTITY,
        code="validation_error",
        detail="Validation failed",
        details={"errors": err.messages},
    )
    problem.log("Schema validation failed")
    return problem.response()


def handle_unexpected_error(err: Exception):
    problem = Problem(
        status=HTTPStatus.INTERNAL_SERVER_ERROR,
        code="internal_server_error",
        detail=GENERIC_5XX_DETAIL,
    )
    problem.log("Unhandled exception", exc=err)
    return problem.response()


HANDLERS: tuple[tuple[type[BaseException], Any], ...] = (
    (APIError, handle_api_error),
    (ServiceError, handle_service_error),
    (HTTPException, handle_http_exception),
    (MarshmallowValidationError, handle_schema_error),
    (Exception, handle_unexpected_error),
)


def init_app(app: Flask) -> None:
    """Install the JWT loaders and the problem+json error handlers."""
    _register_jwt_loaders()
    for exc_type, handler in HANDLERS:
        app.register_error_handler(exc_type, handler)
