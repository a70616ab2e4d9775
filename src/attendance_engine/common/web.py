"""Session helpers for the JSON controllers.

Login itself happens in the surrounding application; it stores ``user_id``
and ``role`` in the Flask session.
"""

from __future__ import annotations

from functools import wraps
from typing import Optional

from flask import jsonify, session

from ..core.enums import Role


def error_response(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def current_user_id() -> Optional[str]:
    user_id = session.get("user_id")
    return str(user_id) if user_id is not None else None


def current_role() -> Optional[Role]:
    try:
        return Role(session.get("role"))
    except ValueError:
        return None


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if current_user_id() is None:
            return error_response("Login required", 401)
        return view(*args, **kwargs)

    return wrapper


def roles_required(*roles: Role):
    allowed = set(roles)

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if current_user_id() is None:
                return error_response("Login required", 401)
            if current_role() not in allowed:
                return error_response("Forbidden", 403)
            return view(*args, **kwargs)

        return wrapper

    return decorator


STAFF_ROLES = (Role.TEACHER, Role.ADMIN, Role.SUPERADMIN)
ADMIN_ROLES = (Role.ADMIN, Role.SUPERADMIN)
