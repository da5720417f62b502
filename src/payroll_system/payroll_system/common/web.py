"""Flask boundary helpers: actor resolution, capability checks, JSON mapping."""

from __future__ import annotations

import dataclasses
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from functools import wraps
from typing import Any, Type, TypeVar

from flask import Flask, g, jsonify, request, session

from ..auth.policy import Actor, Capability, Role, require
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainError,
    GeofenceViolationError,
    NotFoundError,
    QuotaExceededError,
    ValidationError,
)
from .validators import require_positive_id

E = TypeVar("E", bound=Enum)

_STATUS_BY_ERROR = (
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ConflictError, 409),
    (ValidationError, 422),
)


def current_actor() -> Actor:
    if "user_id" not in session:
        raise AuthenticationError("Login required")
    employee_id = session.get("employee_id")
    return Actor.resolve(
        user_id=int(session["user_id"]),
        role=Role(session["role"]),
        employee_id=int(employee_id) if employee_id is not None else None,
    )


def requires(*capabilities: Capability):
    """Resolve the actor once per request and check it holds any of ``capabilities``."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            actor = current_actor()
            if capabilities:
                require(actor, *capabilities)
            g.actor = actor
            return view(*args, **kwargs)

        return wrapper

    return decorator


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def parse_enum(enum_cls: Type[E], value: Any, field_name: str) -> E:
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(f"{field_name} must be one of: {allowed}")


def to_json(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_json(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: to_json(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json(v) for v in value]
    return value


def _error_payload(exc: DomainError) -> dict:
    payload = {"error": str(exc), "type": exc.__class__.__name__}
    if isinstance(exc, QuotaExceededError):
        payload.update(count=exc.count, limit=exc.limit, window=exc.window)
    elif isinstance(exc, GeofenceViolationError):
        payload.update(distance=exc.distance)
    elif isinstance(exc, NotFoundError) and exc.resource:
        payload.update(resource=exc.resource)
    return payload


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(exc: DomainError):
        status = next((code for cls, code in _STATUS_BY_ERROR if isinstance(exc, cls)), 400)
        return jsonify(_error_payload(exc)), status


def employee_scope(actor: Actor, requested: Any, manage: Capability) -> int:
    """Employee the request acts on: any employee for managers, otherwise the actor's own."""
    if requested is not None and requested != "":
        employee_id = require_positive_id(requested, "employee_id")
        if not actor.can(manage) and not actor.owns(employee_id):
            raise AuthorizationError("You can only access your own records")
        return employee_id
    if actor.employee_id is None:
        raise ValidationError("employee_id is required")
    return int(actor.employee_id)
