"""Listing photo uploads: validation, storage and cleanup."""

from __future__ import annotations

import os
import uuid
from pathlib import Path
from typing import Iterable

from flask import Request, current_app
from werkzeug.datastructures import FileStorage
from werkzeug.exceptions import BadRequest

from storage import LocalStorage

MAX_UPLOAD_SIZE_DEFAULT = 5 * 1024 * 1024  # 5 MB
ALLOWED_EXTENSIONS_DEFAULT = {"jpeg", "jpg", "png", "webp"}


def get_storage() -> LocalStorage:
    return LocalStorage(current_app.config["UPLOAD_DIR"])


def _allowed_extensions() -> set[str]:
    configured = current_app.config.get("ALLOWED_UPLOAD_TYPES")
    if not configured:
        return set(ALLOWED_EXTENSIONS_DEFAULT)
    if isinstance(configured, str):
        values: Iterable[str] = configured.split(",")
    else:
        values = configured

    normalized: set[str] = set()
    for raw in values:
        if not isinstance(raw, str):
            continue
        item = raw.strip().lower()
        if "/" in item and not item.startswith("."):
            item = item.rsplit("/", 1)[-1]
        item = item.lstrip(".")
        if item:
            normalized.add(item)

    if not normalized:
        return set(ALLOWED_EXTENSIONS_DEFAULT)
    if "jpeg" in normalized:
        normalized.add("jpg")
    if "jpg" in normalized:
        normalized.add("jpeg")
    return normalized


def _validate_image(file: FileStorage) -> None:
    if file.filename is None or file.filename.strip() == "":
        raise BadRequest("Uploaded files must have a filename.")

    extension = file.filename.rsplit(".", 1)[-1].lower() if "." in file.filename else ""
    if extension not in _allowed_extensions():
        allowed = ", ".join(sorted(_allowed_extensions()))
        raise BadRequest(f"File type not allowed. Allowed types: {allowed}.")

    max_size = int(current_app.config.get("MAX_UPLOAD_SIZE", MAX_UPLOAD_SIZE_DEFAULT))
    file.stream.seek(0, os.SEEK_END)
    size = file.stream.tell()
    file.stream.seek(0)
    if size > max_size:
        raise BadRequest(f"File exceeds the maximum upload size of {max_size} bytes.")


def _unique_filename(original: str) -> str:
    return f"{uuid.uuid4().hex}{Path(original).suffix.lower()}"


def attach_property_media(req: Request, data: dict) -> list[str]:
    """Store uploaded ``thumbnail``/``gallery`` files and reference them in ``data``.

    Uploaded gallery files are appended after any gallery references already
    present in ``data``. Returns the stored relative paths.
    """

    thumbnail = req.files.get("thumbnail")
    gallery_files = [item for item in req.files.getlist("gallery") if item and item.filename]
    uploads = ([thumbnail] if thumbnail and thumbnail.filename else []) + gallery_files
    for upload in uploads:
        _validate_image(upload)

    if not uploads:
        return []

    storage = get_storage()
    stored: list[str] = []
    if thumbnail and thumbnail.filename:
        path = storage.save(thumbnail, _unique_filename(thumbnail.filename))
        data["thumbnail"] = path
        stored.append(path)

    if gallery_files:
        gallery = data.get("gallery") or []
        if isinstance(gallery, str):
            gallery = [gallery]
        gallery = list(gallery)
        for upload in gallery_files:
            path = storage.save(upload, _unique_filename(upload.filename or "photo"))
            gallery.append(path)
            stored.append(path)
        data["gallery"] = gallery

    return stored


def remove_stored_media(paths: Iterable[str | None]) -> int:
    """Delete the given references that point at locally stored files."""

    storage = get_storage()
    removed = 0
    for path in paths:
        if not path or not storage.exists(path):
            continue
        storage.delete(path)
        removed += 1
    return removed
