"""Job catalog collaborators: the source of the job corpus snapshot."""
from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Iterable

import yaml

from jobfit.log import get_logger
from jobfit.models import JobSummary

log = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def filter_active(jobs: Iterable[JobSummary], now: datetime | None = None) -> list[JobSummary]:
    now = now or _utcnow()
    return [j for j in jobs if j.is_active(now)]


class JobCatalog(ABC):
    @abstractmethod
    def list_active_jobs(self) -> list[JobSummary]:
        """Jobs whose expiry is unset or in the future."""


class StaticJobCatalog(JobCatalog):
    def __init__(self, jobs: Iterable[JobSummary], clock: Callable[[], datetime] = _utcnow) -> None:
        self.jobs = list(jobs)
        self.clock = clock

    def list_active_jobs(self) -> list[JobSummary]:
        return filter_active(self.jobs, self.clock())


class YamlJobCatalog(JobCatalog):
    """Job postings read from a YAML list (or a mapping with a ``jobs`` key)."""

    def __init__(self, path: Path, clock: Callable[[], datetime] = _utcnow) -> None:
        self.path = Path(path)
        self.clock = clock

    def _load(self) -> list[JobSummary]:
        if not self.path.exists():
            raise FileNotFoundError(f"Job catalog not found: {self.path}")
        with self.path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or []
        if isinstance(data, dict):
            data = data.get("jobs", [])
        if not isinstance(data, list):
            raise ValueError(f"Job catalog must be a YAML list. Got: {type(data).__name__}")
        return [JobSummary.from_dict(item) for item in data]

    def list_active_jobs(self) -> list[JobSummary]:
        jobs = self._load()
        active = filter_active(jobs, self.clock())
        log.info("Job catalog %s: %d active of %d", self.path.name, len(active), len(jobs))
        return active
