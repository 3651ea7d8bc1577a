from __future__ import annotations

import csv
import io
from functools import wraps
from typing import Iterable, Sequence

from flask import Flask, Response, g, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from ..core.logging import get_logger
from ..users.identity import identity_from_session

logger = get_logger(__name__)


def role_required(*roles: Role):
    """Resolve the caller's identity before the view runs.

    No identity -> 401, wrong role -> 403 (via the registered error handlers).
    The identity is available to the view as ``g.identity``.
    """

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            g.identity = identity_from_session(session, roles or None)
            return view(*args, **kwargs)

        return wrapper

    return decorator


def json_body() -> dict:
    """The request's JSON object; a missing body counts as empty."""

    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def text_field(data: dict, name: str) -> str:
    value = data.get(name)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(f"Field '{name}' must be a string")
    return value


def error_body(error: Exception, message: str | None = None) -> dict:
    return {
        "success": False,
        "error": getattr(error, "code", "server_error"),
        "message": message or str(error),
    }


def _status_for(error: DomainError) -> int:
    if isinstance(error, AuthenticationError):
        return 401
    if isinstance(error, AuthorizationError):
        return 403
    if isinstance(error, NotFoundError):
        return 404
    return 400


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        return jsonify(error_body(e)), _status_for(e)

    @app.errorhandler(StoreError)
    def handle_store_error(e: StoreError):
        logger.error("store.failure", error=str(e), code=e.code)
        return jsonify(error_body(e, "Server error")), 500

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        if isinstance(e, HTTPException):
            return e
        logger.exception("request.unhandled_error")
        return jsonify(error_body(e, "Server error")), 500


def csv_response(
    rows: Iterable[dict],
    *,
    fieldnames: Sequence[str],
    labels: Sequence[str],
    filename: str,
) -> Response:
    """Write report rows to a CSV download.

    Shared helper used by admin and employee exports.
    """

    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=list(fieldnames), quoting=csv.QUOTE_ALL)
    writer.writerow(dict(zip(fieldnames, labels)))
    for row in rows:
        writer.writerow(row)

    csv_bytes = out.getvalue().encode("utf-8-sig")
    return Response(
        csv_bytes,
        mimetype="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
