from __future__ import annotations

from dataclasses import dataclass
from functools import wraps
from typing import Any

from flask import jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import (
    AlreadyClockedIn,
    AuthorizationError,
    DomainError,
    NotFoundError,
    ValidationError,
)


@dataclass(frozen=True)
class Identity:
    user_id: int
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


def current_identity() -> Identity | None:
    """Caller identity stored in the Flask session by the auth layer."""
    if "user_id" not in session:
        return None
    try:
        return Identity(user_id=int(session["user_id"]), role=Role(session.get("role", Role.STAFF.value)))
    except (TypeError, ValueError):
        return None


def error_response(code: str, message: str, status: int):
    return jsonify({"error": code, "message": message}), status


def status_for(error: DomainError) -> int:
    # Only a duplicate clock-in conflicts with existing state; other clock-state errors are bad requests.
    if isinstance(error, AlreadyClockedIn):
        return 409
    if isinstance(error, AuthorizationError):
        return 403
    if isinstance(error, NotFoundError):
        return 404
    return 400


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        identity = current_identity()
        if identity is None:
            return error_response("unauthorized", "Authentication required", 401)
        return view(identity, *args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        identity = current_identity()
        if identity is None:
            return error_response("unauthorized", "Authentication required", 401)
        if not identity.is_admin:
            return error_response(AuthorizationError.code, "Admin access required", 403)
        return view(identity, *args, **kwargs)

    return wrapper


def json_body() -> dict[str, Any]:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data
