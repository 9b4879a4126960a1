"""Flask helpers shared by the feature controllers.

The identity layer stores `user_id` and `roles` in the session; everything
below the controllers works with an :class:`Actor` instead.
"""

from __future__ import annotations

from functools import wraps
from typing import Any, Callable, Optional

from flask import jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..core.result import OperationResult, run_operation
from ..staff.model import Actor, parse_roles


def current_actor() -> Actor:
    return Actor(user_id=int(session["user_id"]), roles=parse_roles(session.get("roles")))


def _unauthenticated():
    return jsonify({"success": False, "error": "Authentication required"}), 401


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return _unauthenticated()
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return _unauthenticated()
        if Role.ADMIN.value not in (session.get("roles") or []):
            return jsonify({"success": False, "error": "Admin access required"}), 403
        return view(*args, **kwargs)

    return wrapper


def json_result(result: OperationResult, *, success_status: int = 200):
    status = success_status if result.success else result.status_code
    return jsonify(result.to_dict()), status


def respond(operation: Callable[[], Any], *, name: str, success_status: int = 200):
    """Run a service call and serialize its outcome as the JSON envelope."""

    return json_result(run_operation(operation, name=name), success_status=success_status)


def request_json() -> dict:
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


def optional_int(value: Any, field_name: str) -> Optional[int]:
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")


_TRUE_STRINGS = ("true", "1", "yes")
_FALSE_STRINGS = ("false", "0", "no")


def optional_bool(value: Any, field_name: str) -> Optional[bool]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    raise ValidationError(f"{field_name} must be true or false")


def to_data(value: Any) -> Any:
    """Serialize service return values (dataclasses with to_dict, lists of them, None)."""

    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        return [to_data(v) for v in value]
    if hasattr(value, "to_dict"):
        return value.to_dict()
    return value
