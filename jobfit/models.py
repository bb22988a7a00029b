"""Data models for résumés, jobs and recommendations."""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timezone
from enum import Enum
from pathlib import PurePath
from typing import Any

from jobfit.errors import UnsupportedFormat


class DocumentFormat(Enum):
    PDF = ".pdf"
    DOCX = ".docx"
    TXT = ".txt"

    @property
    def extension(self) -> str:
        return self.value

    @classmethod
    def from_filename(cls, name: str) -> "DocumentFormat":
        suffix = PurePath(name).suffix.lower()
        for fmt in cls:
            if fmt.value == suffix:
                return fmt
        raise UnsupportedFormat(suffix)


@dataclass(frozen=True)
class ResumeDocument:
    id: int
    storage_key: str
    format: DocumentFormat
    candidate_id: uuid.UUID
    name: str = ""
    file_name: str = ""
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    is_default: bool = False

    def replaced(self, storage_key: str, format: DocumentFormat, file_name: str = "") -> "ResumeDocument":
        """The document that supersedes this one after a re-upload."""
        return replace(
            self,
            storage_key=storage_key,
            format=format,
            file_name=file_name or self.file_name,
            created_at=datetime.now(timezone.utc),
        )


@dataclass(frozen=True)
class ExtractedText:
    document_id: int | None
    text: str


def _as_datetime(value: Any) -> datetime | None:
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    else:
        dt = datetime.fromisoformat(str(value))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


@dataclass(frozen=True)
class JobSummary:
    """Matching-relevant projection of a job posting."""

    id: uuid.UUID
    title: str
    description: str = ""
    location: str = ""
    country: str = ""
    city: str = ""
    company: str = ""
    industry: str = ""
    is_remote: bool = False
    salary_from: float | None = None
    salary_to: float | None = None
    skills: tuple[str, ...] = ()
    posted_at: datetime | None = None
    expires_at: datetime | None = None

    def is_active(self, now: datetime | None = None) -> bool:
        if self.expires_at is None:
            return True
        return self.expires_at > (now or datetime.now(timezone.utc))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "JobSummary":
        salary_from = data.get("salary_from")
        salary_to = data.get("salary_to")
        return cls(
            id=uuid.UUID(str(data["id"])),
            title=data.get("title", ""),
            description=data.get("description") or "",
            location=data.get("location") or "",
            country=data.get("country") or "",
            city=data.get("city") or "",
            company=data.get("company") or "",
            industry=data.get("industry") or "",
            is_remote=bool(data.get("is_remote", False)),
            salary_from=float(salary_from) if salary_from is not None else None,
            salary_to=float(salary_to) if salary_to is not None else None,
            skills=tuple(str(s) for s in data.get("skills") or ()),
            posted_at=_as_datetime(data.get("posted_at")),
            expires_at=_as_datetime(data.get("expires_at")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "title": self.title,
            "description": self.description,
            "location": self.location,
            "country": self.country,
            "city": self.city,
            "company": self.company,
            "industry": self.industry,
            "isRemote": self.is_remote,
            "salaryFrom": self.salary_from,
            "salaryTo": self.salary_to,
            "skills": list(self.skills),
            "postedAt": self.posted_at.isoformat() if self.posted_at else None,
            "expiresAt": self.expires_at.isoformat() if self.expires_at else None,
        }


@dataclass
class RecommendationCandidate:
    """What the model claimed about one job, before reconciliation."""

    job_id: str
    match_score: int
    reason: str


@dataclass
class Recommendation:
    job: JobSummary
    match_score: int
    reason: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "job": self.job.to_dict(),
            "matchScore": self.match_score,
            "reason": self.reason,
        }
