"""
Résumé → job recommendations.

Runs: extract text → snapshot active jobs → compose prompt → call model → reconcile → rank.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Iterable

from jobfit.catalog import JobCatalog
from jobfit.client import MatchingClient
from jobfit.errors import DocumentNotFound, MatchingError, ResumeError
from jobfit.extractor import extract
from jobfit.log import get_logger
from jobfit.models import Recommendation, ResumeDocument
from jobfit.parser import parse
from jobfit.prompt import compose
from jobfit.ranking import rank
from jobfit.storage import DocumentStore

log = get_logger(__name__)


class ResumeLookup(ABC):
    @abstractmethod
    def find(self, resume_id: int, owner: str) -> ResumeDocument | None:
        """The résumé if it exists and belongs to *owner*."""


class InMemoryResumeLookup(ResumeLookup):
    def __init__(self, owners: dict[int, tuple[str, ResumeDocument]] | None = None) -> None:
        self._owners = dict(owners or {})

    def add(self, owner: str, document: ResumeDocument) -> None:
        self._owners[document.id] = (owner, document)

    def find(self, resume_id: int, owner: str) -> ResumeDocument | None:
        entry = self._owners.get(resume_id)
        if entry is None or entry[0] != owner:
            return None
        return entry[1]


class RecommendationPipeline:
    def __init__(
        self,
        store: DocumentStore,
        catalog: JobCatalog,
        client: MatchingClient,
        resumes: ResumeLookup | None = None,
    ) -> None:
        self.store = store
        self.catalog = catalog
        self.client = client
        self.resumes = resumes

    def get_recommendations(self, resume_id: int, user: str) -> list[Recommendation]:
        if self.resumes is None:
            raise RuntimeError("No resume lookup configured")
        document = self.resumes.find(resume_id, user)
        if document is None:
            raise DocumentNotFound(f"resume {resume_id}")
        return self.recommend(document)

    def recommend(self, document: ResumeDocument) -> list[Recommendation]:
        """Raises ResumeError when the résumé cannot be read; otherwise never fails."""
        extracted = extract(document, self.store)

        jobs = self.catalog.list_active_jobs()
        request = compose(extracted.text, jobs, self.client.settings)
        if request is None:
            return []

        try:
            reply = self.client.send(request)
            results = rank(parse(reply, jobs))
        except MatchingError as exc:
            log.warning("Job recommendations unavailable for resume %s: %s", document.id, exc)
            return []

        log.info("Resume %s: %d recommendation(s) from %d active job(s)", document.id, len(results), len(jobs))
        return results

    def recommend_many(
        self,
        documents: Iterable[ResumeDocument],
        max_workers: int = 4,
    ) -> list[list[Recommendation] | Exception]:
        """Independent runs in parallel, one result per input in input order.

        A run that fails is reported as its exception in that slot; the other
        runs are unaffected.
        """
        docs = list(documents)
        if not docs:
            return []
        results: list[list[Recommendation] | Exception] = [[] for _ in docs]
        with ThreadPoolExecutor(max_workers=min(max_workers, len(docs))) as pool:
            futures = {pool.submit(self.recommend, doc): i for i, doc in enumerate(docs)}
            for future in as_completed(futures):
                i = futures[future]
                try:
                    results[i] = future.result()
                except ResumeError as exc:
                    log.error("Could not read resume %s: %s", docs[i].id, exc)
                    results[i] = exc
                except Exception as exc:
                    log.error("Recommendation run for resume %s FAILED: %s", docs[i].id, exc)
                    results[i] = exc
        return results
