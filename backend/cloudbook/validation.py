from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable


class ValidationError(ValueError):
    """400-level input problem."""


class UnauthorizedError(ValueError):
    """401-level credential problem (bad password, bad or expired token)."""


class NotFoundError(LookupError):
    """404-level missing tenant or record."""


class ConflictError(ValueError):
    """409-level business rule conflict (e.g., duplicate email)."""


@dataclass(frozen=True)
class ResourcePolicy:
    """
    Central policy layer for a CRUD resource:
    - required_on_create: fields that must be present on POST
    - editable_fields: columns a PUT replaces in full
    - required_on_update: subset of editable_fields that must be present on PUT
    - json_fields: fields stored in JSON columns (kept as-is, never stripped)
    """
    required_on_create: tuple[str, ...]
    editable_fields: tuple[str, ...]
    required_on_update: tuple[str, ...] = ()
    json_fields: frozenset[str] = field(default_factory=frozenset)


def is_missing(value: Any) -> bool:
    """A field is missing when it is absent, null or a blank string."""
    if value is None:
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


def require_json_object(payload: Any) -> dict:
    if payload is None:
        raise ValidationError("Invalid JSON payload")
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")
    return payload


def require_fields(payload: dict, fields: Iterable[str], message: str = "Missing required fields") -> None:
    missing = [f for f in fields if is_missing(payload.get(f))]
    if missing:
        raise ValidationError(f"{message}: {', '.join(missing)}")


def require_list(value: Any, key: str) -> list:
    if not isinstance(value, list):
        raise ValidationError(f"{key} must be an array")
    return value


def parse_int(value: Any, key: str) -> int:
    """
    Coerce ids from JSON bodies and query strings.

    Rejects booleans, floats with a fraction and non-numeric strings.
    """
    if isinstance(value, bool):
        raise ValidationError(f"{key} must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value.is_integer():
            return int(value)
        raise ValidationError(f"{key} must be an integer")
    if isinstance(value, str):
        stripped = value.strip()
        if stripped.lstrip("-").isdigit():
            return int(stripped)
    raise ValidationError(f"{key} must be an integer")


def parse_number(value: Any, key: str) -> float | None:
    """Monetary and price fields arrive as numbers or numeric strings."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{key} must be a number")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{key} must be a number")


def validate_payload(*, payload: Any, policy: ResourcePolicy, partial: bool) -> dict:
    """
    Validates + normalizes incoming JSON against a ResourcePolicy.

    partial=False: create semantics (enforce required_on_create, keep user_id)
    partial=True: update semantics (enforce required_on_update, full replace
                  of editable_fields; absent editable fields become None)

    Returns a cleaned dict with only the fields the operation writes.
    String values are stripped; JSON fields are passed through untouched.
    """
    payload = require_json_object(payload)

    if partial:
        require_fields(payload, policy.required_on_update)
        keys = policy.editable_fields
    else:
        require_fields(payload, policy.required_on_create)
        keys = tuple(dict.fromkeys(("user_id",) + policy.editable_fields + policy.required_on_create))

    cleaned: dict = {}
    for k in keys:
        raw = payload.get(k)
        if k in policy.json_fields:
            cleaned[k] = raw
        elif isinstance(raw, str):
            cleaned[k] = raw.strip()
        else:
            cleaned[k] = raw

    if not partial:
        cleaned["user_id"] = parse_int(cleaned["user_id"], "user_id")
    return cleaned
