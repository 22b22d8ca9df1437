"""
Match Engine API Routes

Exposes the match engine via REST API.
Main endpoint: POST /match-engine/recommendations
"""

from typing import Optional, Dict, Any
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from db import get_db
from .logic.adapter import load_subject
from .logic.constants import DEFAULT_LIMIT, DEFAULT_PROFILE, ENGINE_VERSION
from .logic.engine import MatchEngine
from .logic.errors import InvalidArgument, SubjectNotFound
from .logic.attractiveness import serialize_attractiveness
from .logic.output_assembler import serialize_page
from .logic.runner import run_recommendations, run_attractiveness
from .ai.explainer import explainer
from .settings import load_settings

router = APIRouter(prefix="/match-engine", tags=["match-engine"])

# Built at import so a bad weight table stops the app from starting
settings = load_settings()
match_engine = MatchEngine.from_settings(settings)


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================

class RecommendationRequest(BaseModel):
    """Request body for the recommendations endpoint."""
    subject_id: str = Field(..., description="Student id or listing id")
    subject_type: str = Field(
        default="student",
        description="'student' ranks listings for a student, 'listing' ranks students for a listing"
    )
    # Range checks happen in the engine so they surface as 400, not 422
    limit: int = Field(default=DEFAULT_LIMIT, description="Page size")
    offset: int = Field(default=0, description="Page start")
    profile: str = Field(default=DEFAULT_PROFILE, description="Scoring profile name")
    min_score: Optional[float] = Field(default=None, description="Drop candidates below this composite score")
    explain: bool = Field(default=False, description="Include AI-generated explanation")


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.post("/recommendations", summary="Get ranked matches")
def get_recommendations(
    request: RecommendationRequest,
    db: Session = Depends(get_db)
):
    """
    Rank listings for a student, or students for a listing.

    **Response:**
    - `recommendations`: one page, best first, each with a per-signal breakdown
    - `total`: candidates available across all pages
    - `partial`: true when the scoring deadline cut the pool short
    """
    try:
        page = run_recommendations(
            db=db,
            engine=match_engine,
            subject_id=request.subject_id,
            subject_type=request.subject_type,
            limit=request.limit,
            offset=request.offset,
            profile=request.profile,
            pool_limit=settings.pool_limit,
            min_score=request.min_score,
        )
    except InvalidArgument as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SubjectNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))

    response_data = serialize_page(page)

    # AI Explanation Layer
    if request.explain:
        subject = load_subject(db, request.subject_id, page.subject_type)
        explanation = explainer.get_explanation(
            request_id=page.request_id,
            subject=subject.model_dump(mode="json"),
            page=response_data
        )
        if explanation:
            response_data["aiExplanation"] = explanation

    return response_data


@router.get("/listings/{listing_id}/attractiveness", summary="Listing attractiveness to students")
def get_listing_attractiveness(listing_id: str, db: Session = Depends(get_db)):
    try:
        result = run_attractiveness(db, listing_id)
    except SubjectNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return serialize_attractiveness(result)


@router.get("/config", summary="Active scoring profiles and limits")
def get_config() -> Dict[str, Any]:
    return {
        "profiles": {
            name: [
                {"signal": signal.name.value, "weight": signal.weight}
                for signal in profile.registry
            ]
            for name, profile in match_engine.profiles.items()
        },
        "defaultProfile": DEFAULT_PROFILE,
        "maxLimit": match_engine.max_limit,
        "minScore": match_engine.min_score,
        "recencyLookbackDays": match_engine.recency_lookback_days,
        "deadlineMs": match_engine.deadline_ms,
    }


# =============================================================================
# HEALTH CHECK
# =============================================================================

@router.get("/health", summary="Match engine health check")
def health_check():
    """Check if the match engine is operational."""
    return {"status": "ok", "engine": "match-engine", "version": ENGINE_VERSION}
