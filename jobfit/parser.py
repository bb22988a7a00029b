"""Turn the model's reply into recommendations for jobs that actually exist.

The model is asked for a bare JSON array but may wrap it in Markdown fences
or prose, repeat jobs, or invent IDs. Anything that does not reconcile with
the job snapshot that was sent is dropped.
"""
from __future__ import annotations

import json
import math
import re
import uuid
from typing import Any, Sequence

from jobfit.errors import MalformedReply
from jobfit.log import get_logger
from jobfit.models import JobSummary, Recommendation, RecommendationCandidate

log = get_logger(__name__)

_FENCE_OPEN_RE = re.compile(r"^```[\w+-]*[ \t]*\n?")
_FENCE_CLOSE_RE = re.compile(r"\n?```$")


def message_content(envelope: Any) -> str:
    """``choices[0].message.content`` from a chat-completions envelope, or ''."""
    if isinstance(envelope, (str, bytes)):
        try:
            envelope = json.loads(envelope)
        except ValueError:
            log.warning("Matching service envelope is not JSON")
            return ""
    if not isinstance(envelope, dict):
        return ""
    choices = envelope.get("choices") or []
    if not choices or not isinstance(choices[0], dict):
        return ""
    message = choices[0].get("message") or {}
    content = message.get("content") if isinstance(message, dict) else None
    return content.strip() if isinstance(content, str) else ""


def strip_fences(text: str) -> str:
    text = text.strip()
    text = _FENCE_OPEN_RE.sub("", text, count=1)
    text = _FENCE_CLOSE_RE.sub("", text, count=1)
    return text.strip()


def extract_json_array(text: str) -> list[Any]:
    """Decode the JSON array in *text*, tolerating fences and surrounding prose."""
    body = strip_fences(text)
    start = body.find("[")
    end = body.rfind("]") + 1
    if start == -1 or end <= start:
        raise MalformedReply("Reply does not contain a JSON array")
    try:
        data = json.loads(body[start:end])
    except (ValueError, RecursionError) as exc:
        raise MalformedReply(f"Reply is not valid JSON: {exc}") from exc
    if not isinstance(data, list):
        raise MalformedReply("Reply JSON is not an array")
    return data


def _score(value: Any) -> int:
    if value is None:
        return 0
    if isinstance(value, bool):
        raise ValueError("boolean match score")
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"non-finite match score {value!r}")
    score = round(number)
    return max(0, min(100, score))


def to_candidate(item: Any) -> RecommendationCandidate | None:
    if not isinstance(item, dict) or "jobId" not in item:
        return None
    try:
        score = _score(item.get("matchScore"))
    except (TypeError, ValueError, OverflowError):
        log.debug("Dropping entry with unusable matchScore %r", item.get("matchScore"))
        return None
    reason = item.get("reason")
    return RecommendationCandidate(
        job_id=str(item["jobId"]),
        match_score=score,
        reason=reason if isinstance(reason, str) else "",
    )


def reconcile(
    candidates: Sequence[RecommendationCandidate],
    jobs: Sequence[JobSummary],
) -> list[Recommendation]:
    """Keep candidates whose jobId is in *jobs*; a repeated job keeps its best score."""
    by_id = {job.id: job for job in jobs}
    picked: dict[uuid.UUID, Recommendation] = {}

    for cand in candidates:
        try:
            job_id = uuid.UUID(cand.job_id.strip())
        except ValueError:
            log.debug("Dropping malformed jobId %r", cand.job_id)
            continue
        job = by_id.get(job_id)
        if job is None:
            log.debug("Dropping unknown jobId %s", job_id)
            continue
        seen = picked.get(job_id)
        if seen is None:
            picked[job_id] = Recommendation(job=job, match_score=cand.match_score, reason=cand.reason)
        elif cand.match_score > seen.match_score:
            seen.match_score = cand.match_score
            seen.reason = cand.reason

    return list(picked.values())


def parse(raw_reply: Any, jobs: Sequence[JobSummary]) -> list[Recommendation]:
    content = message_content(raw_reply)
    if not content:
        log.warning("Matching service returned no content")
        return []
    try:
        items = extract_json_array(content)
    except MalformedReply as exc:
        log.error("Error parsing AI recommendations: %s", exc)
        return []

    candidates = [c for c in (to_candidate(item) for item in items) if c is not None]
    recommendations = reconcile(candidates, jobs)
    dropped = len(items) - len(recommendations)
    if dropped:
        log.info("Discarded %d of %d recommendation(s) that did not reconcile", dropped, len(items))
    return recommendations
