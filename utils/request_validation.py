"""Utilities for validating incoming Flask requests."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Iterable

from flask import Request
from werkzeug.exceptions import BadRequest


def parse_json_request(
    req: Request,
    *,
    required_keys: Iterable[str] | None = None,
    allow_empty: bool = False,
) -> dict:
    """Return the parsed JSON body or raise a 400 error."""

    if not req.is_json:
        raise BadRequest("Request content type must be application/json.")

    data = req.get_json(silent=True)
    if data is None:
        raise BadRequest("Request JSON body is required.")

    if not isinstance(data, dict):
        raise BadRequest("Request JSON payload must be an object.")

    if not data and not allow_empty:
        raise BadRequest("Request JSON body must not be empty.")

    if required_keys:
        require_fields(data, required_keys)

    return data


def parse_form_or_json(req: Request, *, allow_empty: bool = False) -> dict:
    """Return field values from a JSON body or a (multipart) form."""

    if req.is_json:
        return parse_json_request(req, allow_empty=allow_empty)

    data = req.form.to_dict()
    gallery = [value for value in req.form.getlist("gallery") if value]
    if gallery:
        data["gallery"] = gallery
    if not data and not req.files and not allow_empty:
        raise BadRequest("Request body must not be empty.")
    return data


def require_fields(data: dict, keys: Iterable[str]) -> None:
    """Raise a 400 error naming every key missing from ``data``."""

    missing = [
        key for key in keys if data.get(key) is None or str(data.get(key)).strip() == ""
    ]
    if missing:
        raise BadRequest(
            "Missing required fields: {}.".format(", ".join(sorted(missing)))
        )


def parse_bool(value):
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    lowered = str(value).strip().lower()
    if lowered in {"1", "true", "yes", "y", "on"}:
        return True
    if lowered in {"0", "false", "no", "n", "off"}:
        return False
    return None


def parse_decimal(value) -> Decimal | None:
    """Return ``value`` as a finite Decimal, or None if it is not numeric."""

    if value is None or isinstance(value, bool):
        return None
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    return number if number.is_finite() else None


def parse_optional_int(value, field: str, errors: list[str]) -> int | None:
    """Parse an optional integer field, recording a message on failure."""

    if value in (None, ""):
        return None
    if isinstance(value, bool):
        errors.append(f"{field} must be an integer")
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        errors.append(f"{field} must be an integer")
        return None
