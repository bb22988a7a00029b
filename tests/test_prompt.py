from __future__ import annotations

import json

from jobfit.config import MatcherSettings
from jobfit.prompt import MIN_MATCH_SCORE, compose, job_payload


def _jobs_in_prompt(request) -> list[dict]:
    user = request.messages[1]["content"]
    start = user.index("AVAILABLE JOB POSITIONS:\n") + len("AVAILABLE JOB POSITIONS:\n")
    end = user.index("\n\nEVALUATE EACH JOB ON:")
    return json.loads(user[start:end])


def test_no_jobs_short_circuits():
    assert compose("Experienced Python developer", []) is None


def test_blank_resume_short_circuits(jobs):
    assert compose("   \n\t", jobs) is None
    assert compose("", jobs) is None


def test_request_lists_every_job_once(jobs):
    request = compose("Python developer, 5 years", jobs)

    assert request.job_ids == [str(j.id) for j in jobs]
    assert [p["id"] for p in _jobs_in_prompt(request)] == request.job_ids


def test_job_payload_contains_only_matching_fields(job_factory):
    payload = job_payload(job_factory(skills=("Python", "Docker")), 2000)
    assert set(payload) == {
        "id", "title", "description", "location", "country", "city", "company",
        "industry", "requiredSkills", "isRemote", "salaryFrom", "salaryTo",
        "postedAt", "expiresAt",
    }
    assert payload["requiredSkills"] == ["Python", "Docker"]
    assert payload["postedAt"] == "2026-09-28"
    assert payload["expiresAt"] == "2026-10-31"


def test_open_ended_job_has_blank_expiry(job_factory):
    assert job_payload(job_factory(expires_at=None), 2000)["expiresAt"] == ""


def test_prompt_carries_rubric_and_output_contract(jobs):
    request = compose("Python developer", jobs)
    system, user = request.messages

    assert system["role"] == "system"
    assert "same language as the CV" in system["content"]
    assert user["role"] == "user"
    for band in ("90-100", "75-89", "60-74", f"Below {MIN_MATCH_SCORE}"):
        assert band in user["content"]
    for criterion in ("Skill", "Experience", "Education", "Industry", "Location", "Salary"):
        assert criterion in user["content"]
    assert "Return ONLY a valid JSON array" in user["content"]
    assert '"jobId"' in user["content"] and '"matchScore"' in user["content"]


def test_payload_is_bounded(job_factory):
    settings = MatcherSettings(max_resume_chars=50, max_description_chars=10)
    resume = "R" * 500
    request = compose(resume, [job_factory(description="D" * 300)], settings)

    user = request.messages[1]["content"]
    assert "R" * 50 in user and "R" * 51 not in user
    assert _jobs_in_prompt(request)[0]["description"] == "D" * 10


def test_braces_in_resume_are_kept_verbatim(jobs):
    request = compose("Skills: {python} and {{sql}}", jobs)
    assert "Skills: {python} and {{sql}}" in request.messages[1]["content"]
