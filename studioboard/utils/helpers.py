"""Shared request-parsing and persistence helpers used by every service.

UNSET / pick:        partial-update fields ("absent" vs "explicit null")
parse_datetime:      ISO-8601 input → aware datetime (raises ValidationError)
require_text:        mandatory non-empty string fields
optional_text:       optional free-text and id reference fields
string_list:         list-of-strings payload fields
choice:              enum validation
json_body:           request body as a dict
commit:              one commit per request, rollback + 400 on constraint errors
"""
import logging
from datetime import date, datetime, timezone

from flask import request
from sqlalchemy.exc import IntegrityError

from studioboard.core.exceptions import ValidationError
from studioboard.models import db

logger = logging.getLogger(__name__)


class _Unset:
    """Marker for a field the client did not send."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self):
        return False

    def __repr__(self):
        return "UNSET"


UNSET = _Unset()


def json_body() -> dict:
    """Request JSON as a dict; an absent or unparsable body reads as {}."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def pick(data: dict, key: str):
    """Return data[key], or UNSET when the key is absent.

    An explicit JSON null comes back as None, distinct from UNSET.
    """
    return data[key] if key in data else UNSET


def parse_datetime(value, field: str):
    """Parse an ISO-8601 date or datetime string to an aware datetime.

    Returns None for None / empty string. Naive values are taken as UTC.
    Raises ValidationError on anything unparsable.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as exc:
            raise ValidationError(
                f"{field} must be an ISO-8601 date", details={field: str(value)},
            ) from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def require_text(data: dict, *fields: str) -> dict:
    """Return the stripped values of mandatory text fields, or raise."""
    values = {}
    missing = []
    for field in fields:
        value = data.get(field)
        if not isinstance(value, str) or not value.strip():
            missing.append(field)
        else:
            values[field] = value.strip()
    if missing:
        raise ValidationError(
            f"{', '.join(missing)} required",
            details={f: "required" for f in missing},
        )
    return values


def optional_text(value, field: str):
    """Validate an optional string field (None → None)."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(
            f"{field} must be a string", details={field: type(value).__name__},
        )
    return value


def string_list(value, field: str) -> list[str]:
    """Validate a list-of-strings payload field (None → [])."""
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValidationError(f"{field} must be a list of strings", details={field: "list[str]"})
    return value


def choice(value, allowed, field: str) -> str:
    """Validate an enum value before any write."""
    if value not in allowed:
        raise ValidationError(
            f"Invalid {field}. Must be one of: {', '.join(allowed)}",
            details={field: value},
        )
    return value


def non_negative_number(value, field: str):
    """Validate an optional number that must be >= 0."""
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{field} must be a number", details={field: value})
    if value < 0:
        raise ValidationError(f"{field} must be >= 0", details={field: value})
    return float(value)


# ── Database commit helper ───────────────────────────────────────────────────

def commit():
    """Commit the current session; the only commit point of a request.

    IntegrityError → rollback + ValidationError (HTTP 400).
    Anything else → rollback and re-raise (HTTP 500 via the app handler).
    """
    try:
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        logger.warning("Integrity error on commit: %s", exc.orig)
        raise ValidationError("Constraint violation") from exc
    except Exception:
        db.session.rollback()
        logger.exception("Unexpected database error on commit")
        raise
