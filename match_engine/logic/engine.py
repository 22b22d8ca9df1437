"""
Match Engine

Main orchestrator that combines all scoring components into a single pipeline.
This is the primary entry point for generating recommendations.
"""

import logging
import time
from datetime import datetime, timezone
from typing import Dict, Optional, Sequence, Tuple, Union

from .constants import (
    SubjectType,
    DEFAULT_LIMIT,
    DEFAULT_PROFILE,
    MAX_LIMIT,
    RECENCY_LOOKBACK_DAYS,
)
from .contracts import (
    Candidate,
    ProjectListing,
    RecommendationPage,
    ScoredCandidate,
    StudentProfile,
)
from .errors import InvalidArgument
from .output_assembler import assemble_page
from .ranker import candidate_id, rank_pool, score_candidate, validate_pagination
from .registry import ScoringProfile, build_default_profiles
from .signal_extractors import ScoringContext

logger = logging.getLogger(__name__)


class MatchEngine:
    """
    Scores and ranks a candidate pool against one subject.

    Pipeline flow:
    1. Validation - pagination, subject type, scoring profile (nothing is scored on failure)
    2. Signal Scoring - every registered signal per (student, listing) pair, in parallel
    3. Aggregation - weighted composite 0-100
    4. Ranking - deterministic order, optional score threshold, page slice
    5. Output Assembly - RecommendationPage with per-signal breakdown

    The engine holds only immutable configuration and can be shared across
    threads and requests.
    """

    def __init__(
        self,
        profiles: Optional[Dict[str, ScoringProfile]] = None,
        max_workers: Optional[int] = None,
        max_limit: int = MAX_LIMIT,
        recency_lookback_days: int = RECENCY_LOOKBACK_DAYS,
        deadline_ms: Optional[float] = None,
        min_score: float = 0.0
    ):
        self.profiles = profiles if profiles is not None else build_default_profiles()
        self.max_workers = max_workers
        self.max_limit = max_limit
        self.recency_lookback_days = recency_lookback_days
        self.deadline_ms = deadline_ms
        self.min_score = min_score

    @classmethod
    def from_settings(cls, settings) -> "MatchEngine":
        """Build an engine from EngineSettings; raises ConfigurationError on bad weights."""
        return cls(
            profiles=build_default_profiles(settings.signal_weights),
            max_workers=settings.max_workers,
            max_limit=settings.max_limit,
            recency_lookback_days=settings.recency_lookback_days,
            deadline_ms=settings.deadline_ms,
            min_score=settings.min_score,
        )

    def get_profile(self, name: str) -> ScoringProfile:
        profile = self.profiles.get(name)
        if profile is None:
            known = ", ".join(sorted(self.profiles))
            raise InvalidArgument(f"Unknown scoring profile '{name}' (known: {known})")
        return profile

    def validate_request(
        self,
        limit: int,
        offset: int,
        subject_type: Union[SubjectType, str],
        profile: str = DEFAULT_PROFILE
    ) -> Tuple[SubjectType, ScoringProfile]:
        """
        Check request arguments without touching any data.

        Raises:
            InvalidArgument: bad pagination, unknown subject type or profile
        """
        validate_pagination(limit, offset, self.max_limit)
        return parse_subject_type(subject_type), self.get_profile(profile)

    def context(self, as_of: Optional[datetime] = None) -> ScoringContext:
        return ScoringContext(
            as_of=as_of or datetime.now(timezone.utc),
            recency_lookback_days=self.recency_lookback_days,
        )

    def get_recommendations(
        self,
        subject: Candidate,
        subject_type: Union[SubjectType, str],
        pool: Sequence[Candidate],
        limit: int = DEFAULT_LIMIT,
        offset: int = 0,
        profile: str = DEFAULT_PROFILE,
        as_of: Optional[datetime] = None,
        min_score: Optional[float] = None,
        deadline_ms: Optional[float] = None,
        request_id: Optional[str] = None
    ) -> RecommendationPage:
        """
        Rank `pool` for `subject` and return one page.

        Args:
            subject: StudentProfile (ranking listings) or ProjectListing (ranking students)
            subject_type: "student" or "listing"
            pool: Eligible candidates of the opposite type
            limit: Page size, 1..max_limit
            offset: Page start, >= 0
            profile: Scoring profile name
            as_of: Reference time for recency scoring, defaults to now (UTC)
            min_score: Drop candidates below this composite, overrides the engine default
            deadline_ms: Scoring budget, overrides the engine default
            request_id: Propagated to the page for tracing

        Returns:
            RecommendationPage

        Raises:
            InvalidArgument: before any scoring, for bad pagination, an unknown
                subject type or profile, or a subject of the wrong type
        """
        start_time = time.perf_counter()

        subject_type, scoring_profile = self.validate_request(limit, offset, subject_type, profile)
        _check_subject(subject, subject_type)

        budget_ms = self.deadline_ms if deadline_ms is None else deadline_ms
        deadline = time.monotonic() + budget_ms / 1000.0 if budget_ms is not None else None
        threshold = self.min_score if min_score is None else min_score

        subject_id = candidate_id(subject)
        logger.info(
            f"Ranking {len(pool)} candidates for {subject_type.value} {subject_id} "
            f"(profile={scoring_profile.name}, limit={limit}, offset={offset})"
        )

        ranked = rank_pool(
            subject=subject,
            subject_type=subject_type,
            pool=pool,
            profile=scoring_profile,
            context=self.context(as_of),
            limit=limit,
            offset=offset,
            min_score=threshold,
            max_workers=self.max_workers,
            deadline=deadline,
        )

        processing_time = (time.perf_counter() - start_time) * 1000

        return assemble_page(
            ranked=ranked.items,
            total=ranked.total,
            subject_id=subject_id,
            subject_type=subject_type,
            scoring_profile=scoring_profile.name,
            partial=ranked.partial,
            request_id=request_id,
            processing_time_ms=round(processing_time, 2),
        )

    def score_pair(
        self,
        student: StudentProfile,
        listing: ProjectListing,
        profile: str = DEFAULT_PROFILE,
        as_of: Optional[datetime] = None
    ) -> ScoredCandidate:
        """
        Score a single (student, listing) pair.

        Useful for getting the detailed breakdown of one listing the student
        is looking at.
        """
        return score_candidate(
            subject=student,
            subject_type=SubjectType.STUDENT,
            candidate=listing,
            profile=self.get_profile(profile),
            context=self.context(as_of),
        )


def parse_subject_type(value: Union[SubjectType, str]) -> SubjectType:
    if isinstance(value, SubjectType):
        return value
    try:
        return SubjectType(str(value).strip().lower())
    except ValueError:
        raise InvalidArgument(
            f"Unknown subject type '{value}' (expected 'student' or 'listing')"
        ) from None


def _check_subject(subject: Candidate, subject_type: SubjectType) -> None:
    expected = StudentProfile if subject_type == SubjectType.STUDENT else ProjectListing
    if not isinstance(subject, expected):
        raise InvalidArgument(
            f"Subject type '{subject_type.value}' requires a {expected.__name__}, "
            f"got {type(subject).__name__}"
        )

