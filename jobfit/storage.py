"""Blob storage for uploaded résumé files, keyed by an opaque file name."""
from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from pathlib import Path

from jobfit.errors import DocumentNotFound, DocumentUnreadable
from jobfit.log import get_logger
from jobfit.models import DocumentFormat, ResumeDocument

log = get_logger(__name__)

MAX_FILE_SIZE = 10 * 1024 * 1024


class DocumentStore(ABC):
    @abstractmethod
    def read(self, key: str) -> bytes:
        """Return the stored bytes or raise DocumentNotFound."""


class LocalDocumentStore(DocumentStore):
    """Files under a single directory; keys are random UUIDs plus the original extension."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        # Keys are bare file names; anything else could escape the root.
        if not key or key in (".", "..") or Path(key).name != key:
            raise DocumentNotFound(key)
        return self.root / key

    def save(self, file_name: str, data: bytes) -> str:
        fmt = DocumentFormat.from_filename(file_name)
        if len(data) > MAX_FILE_SIZE:
            raise ValueError(f"{file_name} exceeds the {MAX_FILE_SIZE // (1024 * 1024)} MB upload limit")
        key = f"{uuid.uuid4()}{fmt.extension}"
        self._path(key).write_bytes(data)
        log.info("Stored %s as %s (%d bytes)", file_name, key, len(data))
        return key

    def read(self, key: str) -> bytes:
        path = self._path(key)
        try:
            return path.read_bytes()
        except FileNotFoundError as exc:
            raise DocumentNotFound(key) from exc
        except OSError as exc:
            raise DocumentUnreadable(key, exc.strerror or type(exc).__name__) from exc

    def delete(self, key: str) -> None:
        path = self._path(key)
        if path.exists():
            path.unlink()
            log.info("Deleted %s", key)

    def replace(self, document: ResumeDocument, file_name: str, data: bytes) -> ResumeDocument:
        """Store a new upload for *document* and delete the file it supersedes."""
        key = self.save(file_name, data)
        self.delete(document.storage_key)
        return document.replaced(key, DocumentFormat.from_filename(file_name), file_name)
