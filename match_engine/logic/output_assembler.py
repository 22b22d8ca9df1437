"""
Output Assembler

Transforms ranked ScoredCandidates into the Recommendation / RecommendationPage
contracts and serializes them into the external JSON shape:

    {
        "candidateId": str,
        "compositeScore": number,
        "matchedSkills": [str],
        "missingSkills": [str],
        "breakdown": [{"signal": str, "score": number, "weight": number}]
    }
"""

import logging
import uuid
from typing import Any, Dict, List, Optional

from .constants import SignalName, SubjectType, ENGINE_VERSION
from .contracts import (
    Recommendation,
    RecommendationPage,
    ScoredCandidate,
    SignalBreakdown,
)

logger = logging.getLogger(__name__)

LOW_RESULT_COUNT = 5


def assemble_recommendation(scored: ScoredCandidate) -> Recommendation:
    """
    Convert a ScoredCandidate into a Recommendation.

    Matched/missing skills come from the skills alignment evidence and are
    empty when the scoring profile does not include that signal.
    """
    skills = scored.signal_results.get(SignalName.SKILLS_ALIGNMENT)
    evidence = skills.evidence if skills is not None else {}

    return Recommendation(
        candidate_id=scored.candidate_id,
        composite_score=scored.composite.value,
        breakdown=list(scored.composite.breakdown),
        matched_skills=list(evidence.get("matched_skills", [])),
        missing_skills=list(evidence.get("missing_skills", [])),
    )


def assemble_page(
    ranked: List[ScoredCandidate],
    total: int,
    subject_id: str,
    subject_type: SubjectType,
    scoring_profile: str,
    partial: bool = False,
    request_id: Optional[str] = None,
    processing_time_ms: Optional[float] = None
) -> RecommendationPage:
    """
    Assemble the final RecommendationPage.

    Args:
        ranked: One page of ranked candidates, best first
        total: Candidates available across all pages
        subject_id: Who the page was computed for
        subject_type: student or listing
        scoring_profile: Profile name used for scoring
        partial: True when a deadline cut scoring short
        request_id: Caller-supplied id, generated when missing
        processing_time_ms: Processing time in milliseconds

    Returns:
        Complete RecommendationPage
    """
    recommendations = [assemble_recommendation(s) for s in ranked]

    if total < LOW_RESULT_COUNT:
        logger.warning(f"⚠️ Low recommendation count for {subject_type.value} {subject_id}: {total}")

    return RecommendationPage(
        recommendations=recommendations,
        total=total,
        request_id=request_id or str(uuid.uuid4()),
        subject_id=subject_id,
        subject_type=subject_type,
        scoring_profile=scoring_profile,
        partial=partial,
        processing_time_ms=processing_time_ms,
        engine_version=ENGINE_VERSION,
    )


# =============================================================================
# SERIALIZATION
# =============================================================================

def format_breakdown(breakdown: List[SignalBreakdown]) -> List[Dict[str, Any]]:
    """One entry per registered signal, in registry order."""
    return [
        {
            "signal": entry.signal.value,
            "score": round(entry.score, 4),
            "weight": entry.weight,
        }
        for entry in breakdown
    ]


def serialize_recommendation(rec: Recommendation) -> Dict[str, Any]:
    """Convert a Recommendation to its JSON-serializable dict."""
    return {
        "candidateId": rec.candidate_id,
        "compositeScore": round(rec.composite_score, 2),
        "matchedSkills": list(rec.matched_skills),
        "missingSkills": list(rec.missing_skills),
        "breakdown": format_breakdown(rec.breakdown),
    }


def serialize_page(page: RecommendationPage) -> Dict[str, Any]:
    return {
        "requestId": page.request_id,
        "subjectId": page.subject_id,
        "subjectType": page.subject_type.value if page.subject_type else None,
        "scoringProfile": page.scoring_profile,
        "recommendations": [serialize_recommendation(r) for r in page.recommendations],
        "total": page.total,
        "partial": page.partial,
        "processingTimeMs": page.processing_time_ms,
        "engineVersion": page.engine_version,
    }
