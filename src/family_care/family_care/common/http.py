from __future__ import annotations

from functools import wraps
from typing import Any, Optional, Type, TypeVar

import pydantic
from flask import Flask, jsonify, request, session
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge

from ..core.constants import MAX_UPLOAD_MB
from ..core.enums import StaffGroup
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from .app_logger import get_logger
from .serialization import to_json

logger = get_logger(__name__)

SchemaT = TypeVar("SchemaT", bound=pydantic.BaseModel)


def current_staff_id() -> str:
    return str(session["staff_id"])


def current_group() -> Optional[StaffGroup]:
    raw = session.get("staff_group")
    try:
        return StaffGroup(raw) if raw else None
    except ValueError:
        return None


def require_auth(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if not session.get("staff_id"):
            return jsonify({"message": "Unauthorized"}), 401
        return view(*args, **kwargs)

    return wrapper


def require_admin_access(view):
    """ADM or MGM. Implies require_auth."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        if not session.get("staff_id"):
            return jsonify({"message": "Unauthorized"}), 401
        group = current_group()
        if group is None or not group.is_admin:
            return jsonify({"message": "Admin access required"}), 403
        return view(*args, **kwargs)

    return wrapper


def require_super_admin_access(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if not session.get("staff_id"):
            return jsonify({"message": "Unauthorized"}), 401
        group = current_group()
        if group is None or not group.is_super_admin:
            return jsonify({"message": "Super admin access required"}), 403
        return view(*args, **kwargs)

    return wrapper


def parse_body(schema: Type[SchemaT]) -> SchemaT:
    """Validate the JSON request body; pydantic errors surface as HTTP 400."""
    data = request.get_json(silent=True)
    if data is None:
        data = {}
    return schema.model_validate(data)


def ok(payload: Any, status: int = 200):
    return jsonify(to_json(payload)), status


def _field_errors(exc: pydantic.ValidationError) -> list[dict]:
    return [
        {"path": ".".join(str(p) for p in err.get("loc", ())), "message": err.get("msg", "")}
        for err in exc.errors()
    ]


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(pydantic.ValidationError)
    def _pydantic_error(exc: pydantic.ValidationError):
        return jsonify({"message": "Invalid data", "errors": _field_errors(exc)}), 400

    @app.errorhandler(ValidationError)
    def _validation_error(exc: ValidationError):
        body: dict = {"message": str(exc)}
        if exc.errors:
            body["errors"] = exc.errors
        return jsonify(body), 400

    @app.errorhandler(AuthenticationError)
    def _authentication_error(exc: AuthenticationError):
        return jsonify({"message": str(exc)}), 401

    @app.errorhandler(AuthorizationError)
    def _authorization_error(exc: AuthorizationError):
        return jsonify({"message": str(exc)}), 403

    @app.errorhandler(NotFoundError)
    def _not_found(exc: NotFoundError):
        return jsonify({"message": str(exc)}), 404

    @app.errorhandler(ConflictError)
    def _conflict(exc: ConflictError):
        return jsonify({"message": str(exc)}), 409

    @app.errorhandler(RequestEntityTooLarge)
    def _too_large(exc: RequestEntityTooLarge):
        return jsonify({"message": f"File too large. Maximum size is {MAX_UPLOAD_MB}MB."}), 400

    @app.errorhandler(HTTPException)
    def _http_error(exc: HTTPException):
        return jsonify({"message": exc.description or exc.name}), exc.code or 500

    @app.errorhandler(Exception)
    def _unexpected(exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return jsonify({"message": "Internal server error"}), 500
