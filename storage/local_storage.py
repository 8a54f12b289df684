"""Local filesystem storage implementation."""

from __future__ import annotations

import os
from pathlib import Path
from typing import IO

from werkzeug.utils import secure_filename

from .abstract_storage import AbstractStorage


class LocalStorage(AbstractStorage):
    """Persist listing photos under the configured upload directory."""

    def __init__(self, upload_dir: str | os.PathLike):
        self.base_directory = Path(upload_dir)
        os.makedirs(self.base_directory, exist_ok=True)

    def _resolve(self, path: str) -> Path | None:
        candidate = (self.base_directory / path).resolve()
        base = self.base_directory.resolve()
        if candidate == base or base not in candidate.parents:
            return None
        return candidate

    def save(self, file_obj: IO[bytes], filename: str) -> str:
        """Save a file and return its path relative to the upload directory."""

        safe_name = secure_filename(filename)
        if not safe_name:
            raise ValueError("Filename must contain at least one valid character.")

        destination = self.base_directory / safe_name
        if hasattr(file_obj, "save"):
            file_obj.save(destination)  # type: ignore[arg-type]
        else:
            with open(destination, "wb") as output:
                output.write(file_obj.read())

        return str(destination.relative_to(self.base_directory))

    def exists(self, path: str) -> bool:
        resolved = self._resolve(path)
        return resolved is not None and resolved.is_file()

    def delete(self, path: str) -> bool:
        resolved = self._resolve(path)
        if resolved is None or not resolved.is_file():
            return False
        resolved.unlink()
        return True
