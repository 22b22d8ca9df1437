"""
Listing Attractiveness

Reverse-direction scoring: how attractive a listing is to students,
independent of any one student. Five rule-based sub-scores in [0, 1] are
combined into a 0-100 score with the same breakdown shape as a match.
"""

import re
from typing import Any, Dict, List, Tuple
from pydantic import BaseModel, Field

from .contracts import ProjectListing, SponsorRecord
from .constants import NEUTRAL_SCORE
from .registry import validate_weights


ATTRACTIVENESS_WEIGHTS: Dict[str, float] = {
    "compensation": 0.25,
    "flexibility": 0.20,
    "reputation": 0.25,
    "completion": 0.15,
    "growth_opportunity": 0.15,
}

validate_weights(ATTRACTIVENESS_WEIGHTS)

# (keyword, boost) pairs searched in title + description
GROWTH_KEYWORDS: List[Tuple[str, float]] = [
    ("mentor", 0.15),
    ("training", 0.10),
    ("learn", 0.08),
    ("develop", 0.08),
    ("growth", 0.10),
    ("leadership", 0.12),
    ("full-time", 0.15),
    ("hire", 0.12),
    ("career", 0.10),
    ("advancement", 0.10),
    ("certification", 0.10),
    ("presentation", 0.08),
]

HOURS_PER_MONTH = 160
DEFAULT_LISTING_HOURS = 20
SMALL_SAMPLE_RATINGS = 5

_AMOUNT = re.compile(r"\$?(\d[\d,]*)")


class AttractivenessSignal(BaseModel):
    name: str
    score: float = Field(ge=0.0, le=1.0)
    weight: float
    details: Dict[str, Any] = Field(default_factory=dict)

    class Config:
        frozen = True


class ListingAttractiveness(BaseModel):
    listing_id: str
    score: float = Field(ge=0.0, le=100.0)
    breakdown: List[AttractivenessSignal] = Field(default_factory=list)

    class Config:
        frozen = True


# =============================================================================
# SUB-SCORES
# =============================================================================

def score_compensation(listing: ProjectListing) -> Tuple[float, Dict[str, Any]]:
    if not listing.is_paid:
        return 0.2, {"is_paid": False}

    text = (listing.compensation or "").strip().lower()
    if not text:
        return 0.4, {"is_paid": True, "note": "compensation not specified"}

    if "negotiable" in text or "competitive" in text:
        return 0.7, {"is_paid": True, "compensation": listing.compensation}

    match = _AMOUNT.search(text)
    if match is None:
        return 0.55, {"is_paid": True, "compensation": listing.compensation}

    amount = int(match.group(1).replace(",", ""))
    is_hourly = "/hr" in text or "per hour" in text or "hourly" in text
    hourly_rate = amount if is_hourly else amount / HOURS_PER_MONTH

    if hourly_rate >= 25:
        score = 0.95
    elif hourly_rate >= 18:
        score = 0.8
    elif hourly_rate >= 12:
        score = 0.65
    else:
        score = 0.45

    return score, {
        "is_paid": True,
        "compensation": listing.compensation,
        "estimated_hourly_rate": round(hourly_rate),
    }


def score_flexibility(listing: ProjectListing) -> Tuple[float, Dict[str, Any]]:
    hours = listing.hours_per_week or DEFAULT_LISTING_HOURS
    score = 0.5

    if listing.remote_allowed:
        score += 0.25

    if hours <= 10:
        score += 0.2
    elif hours <= 20:
        score += 0.1
    else:
        score -= 0.05

    return min(1.0, max(0.0, score)), {
        "remote": listing.remote_allowed,
        "hours_per_week": hours,
    }


def score_reputation(sponsor: SponsorRecord) -> Tuple[float, Dict[str, Any]]:
    """Sponsor's average rating, pulled toward neutral when few ratings exist."""
    if sponsor.rating_count == 0 or sponsor.avg_rating is None:
        return NEUTRAL_SCORE, {"rating_count": 0}

    rating = sponsor.avg_rating
    if rating >= 4.5:
        score = 1.0
    elif rating >= 4.0:
        score = 0.85
    elif rating >= 3.5:
        score = 0.7
    elif rating >= 3.0:
        score = 0.5
    else:
        score = 0.25

    if sponsor.rating_count < SMALL_SAMPLE_RATINGS:
        score = score * 0.8 + NEUTRAL_SCORE * 0.2

    return score, {"avg_rating": rating, "rating_count": sponsor.rating_count}


def score_completion(sponsor: SponsorRecord) -> Tuple[float, Dict[str, Any]]:
    rate = sponsor.completion_rate
    if rate is None:
        return NEUTRAL_SCORE, {"note": "no completed projects yet"}

    if rate >= 0.9:
        score = 1.0
    elif rate >= 0.75:
        score = 0.8
    elif rate >= 0.5:
        score = 0.6
    else:
        score = 0.35

    return score, {"completion_rate": round(rate, 2)}


def score_growth_opportunity(listing: ProjectListing) -> Tuple[float, Dict[str, Any]]:
    combined = f"{listing.title} {listing.description}".lower()
    score = 0.5
    indicators = []

    for keyword, boost in GROWTH_KEYWORDS:
        if keyword in combined:
            score += boost
            indicators.append(keyword)

    return min(1.0, score), {"indicators": indicators}


# =============================================================================
# AGGREGATE
# =============================================================================

def compute_attractiveness(listing: ProjectListing) -> ListingAttractiveness:
    """
    Score a listing's attractiveness to students.

    Args:
        listing: Listing snapshot, including its sponsor record

    Returns:
        ListingAttractiveness with a 0-100 score and per-signal breakdown
    """
    sub_scores = {
        "compensation": score_compensation(listing),
        "flexibility": score_flexibility(listing),
        "reputation": score_reputation(listing.sponsor),
        "completion": score_completion(listing.sponsor),
        "growth_opportunity": score_growth_opportunity(listing),
    }

    breakdown = []
    total = 0.0
    for name, weight in ATTRACTIVENESS_WEIGHTS.items():
        score, details = sub_scores[name]
        total += weight * score
        breakdown.append(AttractivenessSignal(
            name=name, score=score, weight=weight, details=details,
        ))

    return ListingAttractiveness(
        listing_id=listing.listing_id,
        score=max(0.0, min(100.0, 100.0 * total)),
        breakdown=breakdown,
    )


def serialize_attractiveness(result: ListingAttractiveness) -> Dict[str, Any]:
    return {
        "listingId": result.listing_id,
        "attractivenessScore": round(result.score, 2),
        "breakdown": [
            {
                "signal": s.name,
                "score": round(s.score, 4),
                "weight": s.weight,
                "details": s.details,
            }
            for s in result.breakdown
        ],
    }
