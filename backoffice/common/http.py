"""Helpers shared by the JSON controllers."""
from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Optional

from flask import current_app, jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, DomainError, ValidationError

logger = logging.getLogger("backoffice.http")


def log_route_start(route_name: str, params: Any = None) -> None:
    if params:
        logger.info("Starting %s request... params=%s", route_name, params)
    else:
        logger.info("Starting %s request...", route_name)


def log_route_complete(route_name: str, result_count: Optional[int] = None) -> None:
    if result_count:
        logger.info("Completed %s request - found %d items", route_name, result_count)
    else:
        logger.info("Completed %s request", route_name)


def error_response(action: str, err: Exception):
    """Map an exception to a JSON error response."""
    if isinstance(err, DomainError):
        body = {"error": err.message}
        body.update(err.payload)
        return jsonify(body), err.status_code

    logger.exception("API Error in %s", action)
    body = {"error": f"Failed to {action}"}
    if bool(current_app.config.get("DEBUG", False)):
        body["details"] = str(err)
    return jsonify(body), 500


def json_body() -> dict[str, Any]:
    body = request.get_json(silent=True)
    if body is None:
        return {}
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


def arg_int(name: str) -> Optional[int]:
    raw = request.args.get(name)
    if raw is None or raw == "":
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be a number")


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return error_response(view.__name__, AuthenticationError("Please log in to continue"))
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return error_response(view.__name__, AuthenticationError("Please log in to continue"))
        if session.get("role") not in (Role.ADMIN.value, Role.MANAGER.value):
            return error_response(view.__name__, AuthorizationError("Admin access required"))
        return view(*args, **kwargs)

    return wrapper
