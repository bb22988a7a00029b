from __future__ import annotations

import json
import uuid

import pytest

from jobfit.errors import MalformedReply
from jobfit.parser import extract_json_array, message_content, parse, strip_fences


def _reply(jobs, *scores):
    return json.dumps(
        [{"jobId": str(job.id), "matchScore": s, "reason": f"fit {s}"} for job, s in zip(jobs, scores)]
    )


def test_fenced_and_bare_replies_parse_identically(jobs):
    body = _reply(jobs, 91, 77)
    variants = [f"```json\n{body}\n```", f"```\n{body}\n```", body, f"  ```JSON {body}```  "]
    parsed = [extract_json_array(v) for v in variants]
    assert all(p == json.loads(body) for p in parsed)


def test_array_is_found_inside_surrounding_prose(jobs):
    body = _reply(jobs, 80)
    text = f"Here are the matches you asked for:\n{body}\nLet me know if you need more."
    assert extract_json_array(text) == json.loads(body)


def test_strip_fences_leaves_plain_text_alone():
    assert strip_fences("  [1, 2]  ") == "[1, 2]"
    assert strip_fences("```python\n[]\n```") == "[]"


@pytest.mark.parametrize("text", ["Sorry, I cannot help.", "[not json]", '{"jobId": "x"}', "]["])
def test_extract_json_array_rejects_non_arrays(text):
    with pytest.raises(MalformedReply):
        extract_json_array(text)


def test_non_json_reply_yields_no_recommendations(jobs, envelope):
    assert parse(envelope("Sorry, I cannot help."), jobs) == []


@pytest.mark.parametrize(
    "raw",
    [
        {"choices": []},
        {"choices": [{"message": {"content": None}}]},
        {"choices": [{"message": {"content": "   "}}]},
        {},
        None,
        "not an envelope",
    ],
)
def test_missing_content_yields_no_recommendations(jobs, raw):
    assert parse(raw, jobs) == []


def test_unknown_job_ids_are_dropped(jobs, envelope):
    reply = json.dumps([
        {"jobId": str(jobs[0].id), "matchScore": 88, "reason": "Strong Python"},
        {"jobId": str(uuid.uuid4()), "matchScore": 99, "reason": "Hallucinated"},
    ])
    result = parse(envelope(reply), jobs)

    assert len(result) == 1
    assert result[0].job is jobs[0]
    assert result[0].match_score == 88
    assert result[0].reason == "Strong Python"


def test_entries_without_usable_job_id_are_dropped(jobs, envelope):
    reply = json.dumps([
        {"matchScore": 90, "reason": "no id"},
        {"jobId": "job-1", "matchScore": 90},
        {"jobId": 12, "matchScore": 90},
        "not an object",
        {"jobId": str(jobs[1].id).upper(), "matchScore": 70},
    ])
    result = parse(envelope(reply), jobs)
    assert [r.job for r in result] == [jobs[1]]


def test_missing_score_and_reason_default(jobs, envelope):
    result = parse(envelope(json.dumps([{"jobId": str(jobs[2].id)}])), jobs)
    assert result[0].match_score == 0
    assert result[0].reason == ""


def test_scores_are_coerced_and_clamped(jobs, envelope):
    reply = json.dumps([
        {"jobId": str(jobs[0].id), "matchScore": "82"},
        {"jobId": str(jobs[1].id), "matchScore": 74.6},
        {"jobId": str(jobs[2].id), "matchScore": 140},
    ])
    assert [r.match_score for r in parse(envelope(reply), jobs)] == [82, 75, 100]


def test_non_numeric_score_drops_entry(jobs, envelope):
    reply = json.dumps([
        {"jobId": str(jobs[0].id), "matchScore": "high"},
        {"jobId": str(jobs[1].id), "matchScore": True},
        {"jobId": str(jobs[2].id), "matchScore": 65},
    ])
    assert [r.job for r in parse(envelope(reply), jobs)] == [jobs[2]]


def test_duplicate_job_keeps_highest_score_at_first_position(jobs, envelope):
    reply = json.dumps([
        {"jobId": str(jobs[0].id), "matchScore": 65, "reason": "first"},
        {"jobId": str(jobs[1].id), "matchScore": 70, "reason": "other"},
        {"jobId": str(jobs[0].id), "matchScore": 85, "reason": "better"},
        {"jobId": str(jobs[0].id), "matchScore": 60, "reason": "worse"},
    ])
    result = parse(envelope(reply), jobs)

    assert [r.job for r in result] == [jobs[0], jobs[1]]
    assert (result[0].match_score, result[0].reason) == (85, "better")


def test_no_threshold_is_reapplied(jobs, envelope):
    result = parse(envelope(_reply(jobs, 40)), jobs)
    assert result[0].match_score == 40


def test_envelope_may_be_json_text(jobs, envelope):
    raw = json.dumps(envelope(f"```json\n{_reply(jobs, 90)}\n```"))
    assert message_content(raw).startswith("```json")
    assert len(parse(raw, jobs)) == 1


def test_empty_array_is_a_valid_answer(jobs, envelope):
    assert parse(envelope("[]"), jobs) == []


@pytest.mark.parametrize("score", ["Infinity", "-Infinity", "1e999", "NaN"])
def test_non_finite_score_drops_entry(jobs, envelope, score):
    reply = (
        f'[{{"jobId": "{jobs[0].id}", "matchScore": {score}}},'
        f' {{"jobId": "{jobs[1].id}", "matchScore": 70}}]'
    )
    assert [r.job for r in parse(envelope(reply), jobs)] == [jobs[1]]


def test_deeply_nested_array_is_malformed(jobs, envelope):
    body = "[" * 100_000 + "]" * 100_000
    with pytest.raises(MalformedReply):
        extract_json_array(body)
    assert parse(envelope(body), jobs) == []
