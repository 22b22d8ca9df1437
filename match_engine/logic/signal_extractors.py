"""
Signal Extractors

Individual scoring functions for each match signal.
Each extractor takes a (student, listing) pair plus the request's scoring
context and produces a SignalResult with a score between 0.0 and 1.0.
All logic is deterministic - no AI/ML components, no I/O.

Extractors never raise on missing data; every gap maps to a documented default.
"""

import math
import re
from datetime import date, datetime, timezone
from typing import Dict, Iterable, List, Optional, Tuple
from pydantic import BaseModel, Field

from .contracts import StudentProfile, ProjectListing, SignalResult
from .constants import (
    SignalName,
    NEUTRAL_SCORE,
    NO_REQUIREMENT_SCORE,
    NO_AFFINITY_SCORE,
    INSTITUTION_AFFINITY_SHARE,
    CATEGORY_AFFINITY_SHARE,
    RECENCY_LOOKBACK_DAYS,
)


class ScoringContext(BaseModel):
    """
    Request-scoped values the extractors may read.
    Fixing `as_of` per request keeps recency scoring reproducible.
    """
    as_of: datetime
    recency_lookback_days: int = Field(default=RECENCY_LOOKBACK_DAYS, gt=0)

    class Config:
        frozen = True


def score_skills_alignment(
    student: StudentProfile,
    listing: ProjectListing,
    context: ScoringContext
) -> SignalResult:
    """
    Score the share of the listing's required skills the student holds.

    score = |student ∩ required| / |required|, compared on normalized tags.
    A listing with no requirements is trivially satisfied (1.0).
    """
    required = _unique_tags(listing.required_skills)
    held = set(_unique_tags(student.skills))

    if not required:
        return SignalResult(
            signal=SignalName.SKILLS_ALIGNMENT,
            score=NO_REQUIREMENT_SCORE,
            evidence={
                "matched_skills": [],
                "missing_skills": [],
                "total_required": 0,
                "reason": "no_required_skills",
            },
        )

    matched = [tag for tag in required if tag in held]
    missing = [tag for tag in required if tag not in held]

    return SignalResult(
        signal=SignalName.SKILLS_ALIGNMENT,
        score=len(matched) / len(required),
        evidence={
            "matched_skills": matched,
            "missing_skills": missing,
            "total_required": len(required),
        },
    )


def score_temporal_fit(
    student: StudentProfile,
    listing: ProjectListing,
    context: ScoringContext
) -> SignalResult:
    """
    Score how much of the listing's date range the student is available for.

    Days are counted inclusively. Full containment scores 1.0, partial overlap
    scores the covered fraction, no overlap scores 0.0. Unknown dates on
    either side are neutral.
    """
    start, end = listing.start_date, listing.end_date
    windows = _merge_windows(
        (w.start_date, w.end_date) for w in student.availability
    )

    if start is None or end is None or end < start or not windows:
        return SignalResult(
            signal=SignalName.TEMPORAL_FIT,
            score=NEUTRAL_SCORE,
            evidence={"reason": "missing_dates"},
        )

    listing_days = (end - start).days + 1
    covered_days = 0
    for window_start, window_end in windows:
        overlap_start = max(start, window_start)
        overlap_end = min(end, window_end)
        if overlap_start <= overlap_end:
            covered_days += (overlap_end - overlap_start).days + 1

    return SignalResult(
        signal=SignalName.TEMPORAL_FIT,
        score=min(1.0, covered_days / listing_days),
        evidence={
            "listing_days": listing_days,
            "available_days": covered_days,
            "fully_contained": covered_days >= listing_days,
        },
    )


def score_sustainability(
    student: StudentProfile,
    listing: ProjectListing,
    context: ScoringContext
) -> SignalResult:
    """
    Penalize mismatch between the student's weekly capacity and the listing's
    weekly hours: max(0, 1 - |s - l| / max(s, l, 1)).
    """
    student_hours = _non_negative(student.weekly_hours)
    listing_hours = _non_negative(listing.hours_per_week)

    if student_hours is None or listing_hours is None:
        return SignalResult(
            signal=SignalName.SUSTAINABILITY,
            score=NEUTRAL_SCORE,
            evidence={
                "student_hours": student_hours,
                "listing_hours": listing_hours,
                "reason": "missing_hours",
            },
        )

    gap = abs(student_hours - listing_hours)
    raw_score = max(0.0, 1.0 - gap / max(student_hours, listing_hours, 1.0))

    return SignalResult(
        signal=SignalName.SUSTAINABILITY,
        score=raw_score,
        evidence={
            "student_hours": student_hours,
            "listing_hours": listing_hours,
            "hours_gap": gap,
        },
    )


def score_growth_trajectory(
    student: StudentProfile,
    listing: ProjectListing,
    context: ScoringContext
) -> SignalResult:
    """
    Recency boost: newer listings score higher, decaying linearly to 0.0
    over the lookback window. Never negative.
    """
    if listing.published_at is None:
        return SignalResult(
            signal=SignalName.GROWTH_TRAJECTORY,
            score=NEUTRAL_SCORE,
            evidence={"reason": "missing_published_at"},
        )

    age = as_utc(context.as_of) - as_utc(listing.published_at)
    age_days = age.total_seconds() / 86400.0
    lookback = float(context.recency_lookback_days)

    if age_days <= 0:
        raw_score = 1.0
    else:
        raw_score = max(0.0, 1.0 - age_days / lookback)

    return SignalResult(
        signal=SignalName.GROWTH_TRAJECTORY,
        score=raw_score,
        evidence={
            "age_days": round(age_days, 2),
            "lookback_days": context.recency_lookback_days,
        },
    )


def score_trust_reliability(
    student: StudentProfile,
    listing: ProjectListing,
    context: ScoringContext
) -> SignalResult:
    """
    Student's historical completion ratio: completed / max(completed + dropped, 1).
    Students with no finished or dropped projects are not penalized (0.5).
    """
    outcomes = student.outcomes
    finished = outcomes.completed + outcomes.dropped

    if finished == 0:
        return SignalResult(
            signal=SignalName.TRUST_RELIABILITY,
            score=NEUTRAL_SCORE,
            evidence={
                "completed": outcomes.completed,
                "dropped": outcomes.dropped,
                "reason": "cold_start",
            },
        )

    return SignalResult(
        signal=SignalName.TRUST_RELIABILITY,
        score=outcomes.completed / max(finished, 1),
        evidence={
            "completed": outcomes.completed,
            "dropped": outcomes.dropped,
            "active": outcomes.active,
            "pending": outcomes.pending,
        },
    )


def score_network_affinity(
    student: StudentProfile,
    listing: ProjectListing,
    context: ScoringContext
) -> SignalResult:
    """
    Graded overlap between the student's network and the listing's sponsor:
    half for a shared institution, half for prior work in the listing's category.
    """
    student_institution = normalize_tag(student.institution or "")
    sponsor_institution = normalize_tag(listing.sponsor.institution or "")
    category = normalize_tag(listing.category or "")
    history = set(_unique_tags(student.category_history))

    same_institution = bool(student_institution) and student_institution == sponsor_institution
    category_overlap = bool(category) and category in history

    if not same_institution and not category_overlap:
        return SignalResult(
            signal=SignalName.NETWORK_AFFINITY,
            score=NO_AFFINITY_SCORE,
            evidence={"shared_institution": False, "category_overlap": False},
        )

    raw_score = 0.0
    if same_institution:
        raw_score += INSTITUTION_AFFINITY_SHARE
    if category_overlap:
        raw_score += CATEGORY_AFFINITY_SHARE

    return SignalResult(
        signal=SignalName.NETWORK_AFFINITY,
        score=raw_score,
        evidence={
            "shared_institution": same_institution,
            "category_overlap": category_overlap,
        },
    )


# Extractor lookup used when building registries
EXTRACTORS = {
    SignalName.SKILLS_ALIGNMENT: score_skills_alignment,
    SignalName.TEMPORAL_FIT: score_temporal_fit,
    SignalName.SUSTAINABILITY: score_sustainability,
    SignalName.GROWTH_TRAJECTORY: score_growth_trajectory,
    SignalName.TRUST_RELIABILITY: score_trust_reliability,
    SignalName.NETWORK_AFFINITY: score_network_affinity,
}


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

_WHITESPACE = re.compile(r"\s+")


def normalize_tag(tag: str) -> str:
    """Canonical form of a skill/category tag: trimmed, lowercase, single-spaced, no leading '#'."""
    if not isinstance(tag, str):
        return ""
    return _WHITESPACE.sub(" ", tag.strip().lstrip("#").strip().lower())


def _unique_tags(tags: Iterable[str]) -> List[str]:
    """Normalize and de-duplicate, keeping first-seen order."""
    seen: Dict[str, None] = {}
    for tag in tags or []:
        norm = normalize_tag(tag)
        if norm:
            seen.setdefault(norm, None)
    return list(seen)


def _merge_windows(windows: Iterable[Tuple[date, date]]) -> List[Tuple[date, date]]:
    """Merge overlapping or adjacent availability windows; drop inverted ones."""
    valid = sorted((s, e) for s, e in windows if s is not None and e is not None and s <= e)
    merged: List[Tuple[date, date]] = []
    for start, end in valid:
        if merged and (start - merged[-1][1]).days <= 1:
            if end > merged[-1][1]:
                merged[-1] = (merged[-1][0], end)
        else:
            merged.append((start, end))
    return merged


def _non_negative(value: Optional[float]) -> Optional[float]:
    if value is None or not math.isfinite(value) or value < 0:
        return None
    return float(value)


def as_utc(moment: datetime) -> datetime:
    """Naive datetimes are read as UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)
