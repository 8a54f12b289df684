"""Response envelope shared by every endpoint."""

from __future__ import annotations

from http import HTTPStatus

from flask import jsonify


def envelope(message: str, data=None, status: int = HTTPStatus.OK, *, include_data: bool = True):
    """Return a ``{statusCode, message, data}`` JSON response tuple."""

    payload = {"statusCode": int(status), "message": message}
    if include_data:
        payload["data"] = data
    return jsonify(payload), int(status)


def error_payload(status: int, message: str, error: str, request_id: str | None) -> dict:
    return {
        "statusCode": int(status),
        "message": message,
        "error": error,
        "request_id": request_id,
    }
