"""Load and save the standards collection as a whole-file JSON snapshot.

The file is a JSON array of objects.  It is always read completely, changed
in memory and written back in full; saving goes through a temporary file in
the same directory and ``os.replace`` so a failed write never leaves a
truncated collection behind.
"""

import json
import logging
import os
import tempfile
from pathlib import Path

from .exceptions import RepositoryIoError
from .models import StandardEntry

_LOG = logging.getLogger(__name__)


class StandardsRepository:
    """A standards collection stored at *path*."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def load_all(self) -> list[StandardEntry]:
        """Return every entry in the collection.

        Raises RepositoryIoError if the file cannot be read, is not UTF-8,
        is not valid JSON, or is not an array of objects.
        """
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise RepositoryIoError(str(self.path), exc.strerror or str(exc)) from exc
        except UnicodeDecodeError as exc:
            raise RepositoryIoError(str(self.path), f"not UTF-8: {exc}") from exc
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise RepositoryIoError(str(self.path), f"invalid JSON: {exc}") from exc

        if not isinstance(data, list):
            raise RepositoryIoError(str(self.path), "top-level value is not an array")
        if not all(isinstance(item, dict) for item in data):
            raise RepositoryIoError(str(self.path), "array holds non-object entries")

        _LOG.debug("Loaded %d entries from %s", len(data), self.path)
        return [StandardEntry(item) for item in data]

    def save_all(self, entries: list[StandardEntry]) -> None:
        """Atomically replace the collection with *entries*."""
        text = json.dumps([e.data for e in entries], indent=2, ensure_ascii=False) + "\n"
        directory = self.path.parent
        tmp_name: str | None = None
        try:
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=directory,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as fh:
                tmp_name = fh.name
                fh.write(text)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, self.path)
        except OSError as exc:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise RepositoryIoError(str(self.path), exc.strerror or str(exc)) from exc
        _LOG.debug("Wrote %d entries to %s", len(entries), self.path)
