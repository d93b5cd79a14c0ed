"""Template context builders for recommendation reports.

Contexts are plain dicts of strings and numbers so templates never reach
into domain objects.
"""

from datetime import datetime
from typing import Dict, List

from app.domain.models import Recommendation
from app.recommendation.models import MatchBreakdown
from app.utils.timestamps import format_timestamp


def build_digest_context(
    student_id: int, recommendations: List[Recommendation], generated_at: datetime
) -> Dict:
    """Build the context for the ranked recommendation digest.

    Args:
        student_id: Student the recommendations belong to
        recommendations: Ordered recommendations (best first)
        generated_at: When the recommendations were computed

    Returns:
        Dictionary with:
        - student_id, generated_at: Header fields
        - count: Number of recommendations
        - items: One dict per recommendation, with a 1-based rank
    """
    items = []
    for rank, rec in enumerate(recommendations, start=1):
        items.append(
            {
                "rank": rank,
                "match_id": rec.match_id,
                "scholarship_id": rec.scholarship_id,
                "title": rec.title,
                "organization_name": rec.organization_name or "Unknown organization",
                "country": rec.country or "Unspecified",
                "deadline": rec.deadline.date().isoformat(),
                "match_score": rec.match_score,
                "matched_criteria": list(rec.matched_criteria),
                "unmatched_criteria": list(rec.unmatched_criteria),
            }
        )

    return {
        "student_id": student_id,
        "generated_at": format_timestamp(generated_at),
        "count": len(items),
        "items": items,
    }


def build_breakdown_context(student_id: int, breakdown: MatchBreakdown) -> Dict:
    """Build the context for a single match breakdown."""
    return {
        "student_id": student_id,
        **breakdown.to_payload(),
    }
