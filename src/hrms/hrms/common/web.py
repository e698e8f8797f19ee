from __future__ import annotations

import logging
from datetime import date
from functools import wraps
from typing import Optional

from flask import Flask, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.enums import Role
from ..core.exceptions import (
    AlreadyReviewed,
    AuthorizationError,
    DomainError,
    DuplicateCheckIn,
    NoActiveCheckIn,
    NotFound,
)
from .datetime_utils import parse_iso_date, parse_month

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (AuthorizationError, 403),
    (NotFound, 404),
    ((DuplicateCheckIn, NoActiveCheckIn, AlreadyReviewed), 409),
)


def current_user_id() -> str:
    return str(session["user_id"])


def current_role() -> Role:
    try:
        return Role(session.get("role", Role.EMPLOYEE.value))
    except ValueError:
        return Role.EMPLOYEE


def fail(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def ok(status: int = 200, **payload):
    return jsonify({"success": True, **payload}), status


def login_required(view):
    """The caller's `user_id` and `role` are put in the session by the auth layer."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return fail("Please sign in to continue", 401)
        return view(*args, **kwargs)

    return wrapper


def reviewer_required(view):
    """Allow only HR and Admin."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return fail("Please sign in to continue", 401)
        if not current_role().is_reviewer:
            return fail("You do not have permission to do this", 403)
        return view(*args, **kwargs)

    return wrapper


def target_user_id() -> str:
    """`?user_id=` lets HR/Admin look at another employee; everyone else sees themselves."""
    requested = (request.args.get("user_id") or "").strip()
    me = current_user_id()
    if not requested or requested == me:
        return me
    if not current_role().is_reviewer:
        raise AuthorizationError("You can only view your own records")
    return requested


def json_body() -> dict:
    return request.get_json(silent=True) or {}


def arg_date(name: str, default: Optional[date] = None) -> Optional[date]:
    value = request.args.get(name)
    return parse_iso_date(value) if value else default


def arg_month(name: str = "month") -> Optional[date]:
    value = request.args.get(name)
    return parse_month(value) if value else None


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def _domain_error(e: DomainError):
        for types, status in _STATUS_BY_ERROR:
            if isinstance(e, types):
                return fail(str(e), status)
        return fail(str(e), 400)

    @app.errorhandler(Exception)
    def _unexpected(e: Exception):
        # Let Flask render its own HTTP errors (404 routes, 405 methods).
        if isinstance(e, HTTPException):
            return e
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return fail("System error, please try again", 500)
