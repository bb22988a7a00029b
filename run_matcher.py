#!/usr/bin/env python3
"""Match a local résumé file against a YAML job list and print recommendations."""
from __future__ import annotations

import argparse
import json
import sys
import uuid
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent))

from jobfit.catalog import YamlJobCatalog
from jobfit.client import MatchingClient
from jobfit.config import SETTINGS_PATH, load_settings
from jobfit.errors import ResumeError
from jobfit.log import get_logger
from jobfit.models import DocumentFormat, ResumeDocument
from jobfit.pipeline import RecommendationPipeline
from jobfit.storage import LocalDocumentStore

log = get_logger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Recommend jobs for a resume (PDF, DOCX or TXT).")
    parser.add_argument("--resume", required=True, help="path to the resume file")
    parser.add_argument("--jobs", default="config/jobs.yaml", help="YAML list of job postings")
    parser.add_argument("--settings", default=str(SETTINGS_PATH))
    parser.add_argument("--json", action="store_true", help="print the result as JSON")
    args = parser.parse_args(argv)

    resume_path = Path(args.resume).expanduser().resolve()
    settings = load_settings(Path(args.settings).expanduser())

    try:
        document = ResumeDocument(
            id=0,
            storage_key=resume_path.name,
            format=DocumentFormat.from_filename(resume_path.name),
            candidate_id=uuid.uuid4(),
            file_name=resume_path.name,
        )
        pipeline = RecommendationPipeline(
            store=LocalDocumentStore(resume_path.parent),
            catalog=YamlJobCatalog(Path(args.jobs).expanduser()),
            client=MatchingClient(settings),
        )
        results = pipeline.recommend(document)
    except ResumeError as exc:
        print(f"Could not read resume: {exc}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps([r.to_dict() for r in results], ensure_ascii=False, indent=2))
        return 0

    if not results:
        print("No sufficiently good match.")
        return 0
    for r in results:
        print(f"{r.match_score:>3}  {r.job.title} @ {r.job.company}")
        if r.reason:
            print(f"     {r.reason}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
