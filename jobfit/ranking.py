"""Order recommendations for display."""
from __future__ import annotations

from typing import Iterable

from jobfit.models import Recommendation


def rank(recommendations: Iterable[Recommendation]) -> list[Recommendation]:
    """Highest match score first; equal scores keep their input order."""
    return sorted(recommendations, key=lambda r: -r.match_score)
