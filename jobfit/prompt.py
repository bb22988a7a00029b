"""Build the chat request that asks the model to match a résumé against jobs."""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Sequence

from jobfit.config import MatcherSettings
from jobfit.log import get_logger
from jobfit.models import JobSummary

log = get_logger(__name__)

MIN_MATCH_SCORE = 60

_SYSTEM_PROMPT = (
    "You are an expert AI job matching assistant specializing in analyzing CVs/resumes "
    "in Albanian and English. Analyze the candidate's qualifications, skills, experience, "
    "education and preferences, then match them with the available job positions. "
    f"Only recommend jobs with genuine compatibility (minimum {MIN_MATCH_SCORE}% match). "
    "If no suitable matches exist, return an empty array. "
    "Always respond in the same language as the CV."
)

_MATCH_PROMPT = """\
Analyze the candidate's CV/resume and find the best matching job positions.
Only the positions listed below may be recommended.

CANDIDATE'S CV/RESUME:
{resume_text}

AVAILABLE JOB POSITIONS:
{jobs_json}

EVALUATE EACH JOB ON:
- Skill compatibility: how many required skills the candidate has; weight critical skills higher.
- Experience level: years and seniority (junior / mid-level / senior) against the role.
- Education: does the candidate's education meet or exceed the role's needs?
- Industry/domain fit: relevant industry experience in the CV.
- Location: remote jobs (isRemote: true) suit anyone; otherwise consider country and city.
- Salary: does the salary range (salaryFrom-salaryTo) fit the candidate's level?

MATCH SCORE (integer 0-100):
- 90-100: Excellent match, candidate exceeds requirements
- 75-89: Very good match, candidate meets all key requirements
- 60-74: Good match, candidate meets most requirements with some gaps
- Below {min_score}: do NOT return the job

REASON: 2-4 specific sentences naming the matching skills, experience, education,
domain and location fit, and any minor gaps. Write it in the language of the CV.

OUTPUT FORMAT:
Return ONLY a valid JSON array. No markdown, no code blocks, no text outside the array.
If no job scores {min_score} or more, return: []

[
  {{
    "jobId": "<id copied exactly from the job list>",
    "matchScore": 88,
    "reason": "Excellent match: ..."
  }}
]
"""


@dataclass
class MatchRequest:
    messages: list[dict[str, str]]
    job_ids: list[str] = field(default_factory=list)


def _date(value) -> str:
    return value.strftime("%Y-%m-%d") if value else ""


def job_payload(job: JobSummary, max_description_chars: int) -> dict[str, Any]:
    """The only job fields the model is allowed to see."""
    return {
        "id": str(job.id),
        "title": job.title,
        "description": job.description[:max_description_chars],
        "location": job.location,
        "country": job.country,
        "city": job.city,
        "company": job.company,
        "industry": job.industry,
        "requiredSkills": list(job.skills),
        "isRemote": job.is_remote,
        "salaryFrom": job.salary_from,
        "salaryTo": job.salary_to,
        "postedAt": _date(job.posted_at),
        "expiresAt": _date(job.expires_at),
    }


def compose(
    resume_text: str,
    jobs: Sequence[JobSummary],
    settings: MatcherSettings | None = None,
) -> MatchRequest | None:
    """Return the request, or None when there is nothing worth asking about."""
    if not resume_text or not resume_text.strip():
        log.info("Blank resume text, skipping matching request")
        return None
    if not jobs:
        log.info("No active jobs, skipping matching request")
        return None

    settings = settings or MatcherSettings()
    payload = [job_payload(j, settings.max_description_chars) for j in jobs]
    text = resume_text.strip()
    if len(text) > settings.max_resume_chars:
        log.debug("Truncating resume text from %d to %d chars", len(text), settings.max_resume_chars)
        text = text[: settings.max_resume_chars]

    prompt = _MATCH_PROMPT.format(
        resume_text=text,
        jobs_json=json.dumps(payload, ensure_ascii=False, indent=2),
        min_score=MIN_MATCH_SCORE,
    )
    return MatchRequest(
        messages=[
            {"role": "system", "content": _SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ],
        job_ids=[p["id"] for p in payload],
    )
