"""Error taxonomy for résumé extraction and job matching.

``ResumeError`` subclasses are user-visible: the résumé could not be read.
``MatchingError`` subclasses never reach the end user; the pipeline logs them
and returns no recommendations.
"""
from __future__ import annotations


class JobfitError(Exception):
    """Base class for every error raised by this package."""


# ── Extraction ───────────────────────────────────────────────────────────


class ResumeError(JobfitError):
    """The résumé could not be read."""


class UnsupportedFormat(ResumeError):
    def __init__(self, extension: str) -> None:
        self.extension = extension
        super().__init__(
            f"File type {extension or '(none)'} is not supported. Use PDF, DOCX or TXT."
        )


class DocumentNotFound(ResumeError):
    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Resume file not found: {key}")


class CorruptDocument(ResumeError):
    pass


class EmptyDocument(CorruptDocument):
    """Extraction succeeded but produced no readable text."""


class DocumentUnreadable(ResumeError):
    """The stored file exists but the store could not read it."""

    def __init__(self, key: str, reason: str) -> None:
        self.key = key
        super().__init__(f"Resume file could not be read: {key} ({reason})")


# ── Matching service ─────────────────────────────────────────────────────


class MatchingError(JobfitError):
    pass


class ServiceUnavailable(MatchingError):
    pass


class ServiceNotConfigured(ServiceUnavailable):
    pass


class ServiceTimeout(MatchingError):
    pass


class MalformedReply(MatchingError):
    pass
