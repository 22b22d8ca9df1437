"""
Data Contracts for the Match Engine

Defines pydantic models for the StudentProfile and ProjectListing snapshots
(input) and the Recommendation / RecommendationPage (output).
These contracts are the API boundary for the match engine.
"""

from datetime import date, datetime
from typing import Any, Dict, List, Optional, Union
from pydantic import BaseModel, Field

from .constants import SignalName, SubjectType, SCHEMA_VERSION, ENGINE_VERSION


# =============================================================================
# INPUT CONTRACTS
# =============================================================================

class AvailabilityWindow(BaseModel):
    """A date range in which the student can take on project work."""
    start_date: date
    end_date: date

    class Config:
        frozen = True


class ProjectOutcomes(BaseModel):
    """Counts of the student's prior project placements by outcome."""
    completed: int = Field(default=0, ge=0)
    active: int = Field(default=0, ge=0)
    pending: int = Field(default=0, ge=0)
    dropped: int = Field(default=0, ge=0)

    class Config:
        frozen = True


class StudentProfile(BaseModel):
    """
    Input snapshot of a student for one scoring request.
    Read-only to the engine; owned by the profile store.
    """
    student_id: str

    # Skills, in the order the student listed them
    skills: List[str] = Field(default_factory=list)

    # Availability
    availability: List[AvailabilityWindow] = Field(default_factory=list)
    weekly_hours: Optional[float] = None

    # Academic
    academic_level: Optional[str] = None  # e.g. sophomore/junior/senior/graduate
    graduation_year: Optional[int] = None
    gpa: Optional[float] = None

    # Track record
    outcomes: ProjectOutcomes = Field(default_factory=ProjectOutcomes)
    category_history: List[str] = Field(default_factory=list)

    # Affiliation
    institution: Optional[str] = None

    # Tie-break for student ranking
    updated_at: Optional[datetime] = None

    schema_version: int = SCHEMA_VERSION

    class Config:
        frozen = True


class SponsorRecord(BaseModel):
    """Aggregate track record of the organization behind a listing."""
    organization_id: Optional[str] = None
    institution: Optional[str] = None
    completion_rate: Optional[float] = None  # completed / accepted, 0-1
    avg_rating: Optional[float] = None       # 1-5 scale
    rating_count: int = 0
    listing_count: int = 0

    class Config:
        frozen = True


class ProjectListing(BaseModel):
    """
    Input snapshot of a published project listing for one scoring request.
    """
    listing_id: str
    title: str = ""
    description: str = ""

    # Matching data
    required_skills: List[str] = Field(default_factory=list)
    category: Optional[str] = None

    # Terms
    compensation: Optional[str] = None
    is_paid: bool = False
    remote_allowed: bool = False
    hours_per_week: Optional[float] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    # Marketplace state
    published_at: Optional[datetime] = None
    applicant_count: int = 0
    max_applicants: Optional[int] = None

    sponsor: SponsorRecord = Field(default_factory=SponsorRecord)

    schema_version: int = SCHEMA_VERSION

    class Config:
        frozen = True


Candidate = Union[ProjectListing, StudentProfile]


# =============================================================================
# SCORING STRUCTURES
# =============================================================================

class SignalResult(BaseModel):
    """
    Output of one signal extractor.
    Evidence is for explainability only and never feeds the ranking.
    """
    signal: SignalName
    score: float
    evidence: Dict[str, Any] = Field(default_factory=dict)

    class Config:
        frozen = True


class SignalBreakdown(BaseModel):
    """One signal's contribution to a composite score."""
    signal: SignalName
    score: float = Field(ge=0.0, le=1.0)
    weight: float = Field(gt=0.0, le=1.0)

    class Config:
        frozen = True


class CompositeScore(BaseModel):
    """Weighted aggregate of all signals, 0-100."""
    value: float = Field(ge=0.0, le=100.0)
    breakdown: List[SignalBreakdown] = Field(default_factory=list)

    class Config:
        frozen = True


class ScoredCandidate(BaseModel):
    """
    A candidate with computed scores.
    Used between the ranker and the breakdown formatter.
    """
    candidate_id: str
    candidate: Candidate
    composite: CompositeScore
    signal_results: Dict[SignalName, SignalResult] = Field(default_factory=dict)

    class Config:
        frozen = True


# =============================================================================
# OUTPUT CONTRACTS
# =============================================================================

class Recommendation(BaseModel):
    """Single ranked candidate with its explainable breakdown."""
    candidate_id: str
    composite_score: float = Field(ge=0.0, le=100.0)
    breakdown: List[SignalBreakdown] = Field(default_factory=list)
    matched_skills: List[str] = Field(default_factory=list)
    missing_skills: List[str] = Field(default_factory=list)

    class Config:
        frozen = True


class RecommendationPage(BaseModel):
    """
    Output contract for the match engine: one page of ranked recommendations.
    """
    recommendations: List[Recommendation] = Field(default_factory=list)
    total: int = 0

    # Request tracking
    request_id: Optional[str] = None
    subject_id: Optional[str] = None
    subject_type: Optional[SubjectType] = None
    scoring_profile: Optional[str] = None

    # True when a deadline stopped scoring before the whole pool was evaluated
    partial: bool = False

    processing_time_ms: Optional[float] = None
    engine_version: str = ENGINE_VERSION


class RankedPool(BaseModel):
    """
    Ranker output: one page of scored candidates plus pool counts.
    `total` counts candidates that survived the score threshold, before slicing.
    """
    items: List[ScoredCandidate] = Field(default_factory=list)
    total: int = 0
    evaluated: int = 0
    pool_size: int = 0
    partial: bool = False
