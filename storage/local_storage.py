"""Local filesystem storage implementation."""

from __future__ import annotations

import os
from pathlib import Path
from typing import IO

from werkzeug.utils import secure_filename

from config import Config

from .abstract_storage import AbstractStorage


class LocalStorage(AbstractStorage):
    """Persist files under the configured upload directory.

    Paths returned by :meth:`save` are relative to the upload directory, so
    they map directly onto the ``/uploads/<path>`` static route.
    """

    def __init__(self, upload_dir: str | None = None, subdirectory: str | None = None):
        self.root_directory = Path(upload_dir or Config.UPLOAD_DIR)
        self.base_directory = self.root_directory / (subdirectory or "")
        os.makedirs(self.base_directory, exist_ok=True)

    def _resolve(self, path: str) -> Path:
        candidate = (self.root_directory / path).resolve()
        if self.root_directory.resolve() not in candidate.parents:
            raise ValueError("Path escapes the upload directory.")
        return candidate

    def save(self, file_obj: IO[bytes], filename: str) -> str:
        """Save a file and return the path relative to the upload directory."""

        safe_name = secure_filename(filename)
        if not safe_name:
            raise ValueError("Filename must contain at least one valid character.")

        destination = self.base_directory / safe_name
        if hasattr(file_obj, "save"):
            file_obj.save(destination)  # type: ignore[arg-type]
        else:
            with open(destination, "wb") as output:
                output.write(file_obj.read())

        return destination.relative_to(self.root_directory).as_posix()

    def exists(self, path: str) -> bool:
        """Return True if the given relative path exists within the upload directory."""

        try:
            return self._resolve(path).is_file()
        except ValueError:
            return False

    def delete(self, path: str) -> bool:
        try:
            target = self._resolve(path)
        except ValueError:
            return False
        if not target.is_file():
            return False
        target.unlink()
        return True
