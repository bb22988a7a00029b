from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from jobfit.config import MatcherSettings
from jobfit.errors import DocumentNotFound
from jobfit.models import DocumentFormat, JobSummary, ResumeDocument
from jobfit.storage import DocumentStore

NOW = datetime(2026, 10, 1, tzinfo=timezone.utc)


class MemoryStore(DocumentStore):
    def __init__(self, files: dict[str, bytes] | None = None) -> None:
        self.files = dict(files or {})
        self.reads = 0

    def read(self, key: str) -> bytes:
        self.reads += 1
        if key not in self.files:
            raise DocumentNotFound(key)
        return self.files[key]


class FakeClient:
    """Stands in for MatchingClient; records calls and replays a reply or error."""

    def __init__(self, reply=None, error: Exception | None = None) -> None:
        self.settings = MatcherSettings(api_key="test-key")
        self.reply = reply
        self.error = error
        self.calls = []

    def send(self, request):
        self.calls.append(request)
        if self.error is not None:
            raise self.error
        return self.reply


def make_job(title: str = "Backend Engineer", **overrides) -> JobSummary:
    fields = dict(
        id=uuid.uuid4(),
        title=title,
        description="Python services",
        location="Tirana",
        country="Albania",
        city="Tirana",
        company="Acme",
        industry="Software",
        is_remote=False,
        salary_from=1000.0,
        salary_to=2000.0,
        skills=("Python", "SQL"),
        posted_at=NOW - timedelta(days=3),
        expires_at=NOW + timedelta(days=30),
    )
    fields.update(overrides)
    return JobSummary(**fields)


def make_envelope(content):
    return {"choices": [{"index": 0, "message": {"role": "assistant", "content": content}}]}


def make_resume(key: str = "cv.txt", fmt: DocumentFormat = DocumentFormat.TXT, id: int = 1) -> ResumeDocument:
    return ResumeDocument(id=id, storage_key=key, format=fmt, candidate_id=uuid.uuid4(), name="My CV")


@pytest.fixture
def jobs() -> list[JobSummary]:
    return [make_job("Backend Engineer"), make_job("Data Analyst"), make_job("Frontend Developer")]


@pytest.fixture
def envelope():
    return make_envelope


@pytest.fixture
def job_factory():
    return make_job


@pytest.fixture
def resume_factory():
    return make_resume


@pytest.fixture
def memory_store():
    return MemoryStore


@pytest.fixture
def fake_client():
    return FakeClient
