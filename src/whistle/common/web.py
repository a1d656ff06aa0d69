from __future__ import annotations

import logging
from functools import wraps

from flask import Flask, g, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.enums import ErrorCode
from ..core.exceptions import AuthenticationError, DomainError, ValidationError
from ..users.service import AuthService

logger = logging.getLogger(__name__)

SESSION_TOKEN_KEY = "session_token"

STATUS_BY_CODE = {
    ErrorCode.UNAUTHENTICATED: 401,
    ErrorCode.INVALID_INPUT: 400,
    ErrorCode.ALREADY_CLOCKED_IN: 400,
    ErrorCode.NOT_CLOCKED_IN: 400,
    ErrorCode.CLOCK_IN_BLOCKED: 403,
    ErrorCode.CLOCK_OUT_BLOCKED: 403,
}


def error_response(code: str, message: str, status: int):
    return jsonify({"success": False, "error": code, "message": message}), status


def json_body() -> dict:
    """Request JSON as a dict; a missing body counts as empty."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object.")
    return data


def login_required(auth_service: AuthService):
    """Resolve the session token to a user and expose it as g.user."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            user = auth_service.current_user(session.get(SESSION_TOKEN_KEY))
            if not user:
                raise AuthenticationError()
            g.user = user
            return view(*args, **kwargs)

        return wrapper

    return decorator


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(exc: DomainError):
        return error_response(exc.code.value, str(exc), STATUS_BY_CODE.get(exc.code, 400))

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        return error_response(exc.name, exc.description or exc.name, exc.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):
        logger.exception("Unhandled error")
        return error_response("InternalError", "Something went wrong. Please try again.", 500)
