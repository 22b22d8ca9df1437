"""
Engine Runner

Orchestrates the recommendation pipeline:
1. Validates the request
2. Loads the subject snapshot and its eligible pool via the adapter
3. Runs the match engine
4. Returns one ranked page

This is a pure orchestration layer - NO scoring, NO direct DB queries.
"""

import logging
import time
from datetime import datetime, timezone
from typing import Optional, Union

from sqlalchemy.orm import Session

from .adapter import fetch_listing_pool, fetch_student_pool, load_listing, load_subject
from .attractiveness import ListingAttractiveness, compute_attractiveness
from .constants import SubjectType, DEFAULT_LIMIT, DEFAULT_POOL_LIMIT, DEFAULT_PROFILE
from .contracts import RecommendationPage
from .engine import MatchEngine

logger = logging.getLogger(__name__)


def run_recommendations(
    db: Session,
    engine: MatchEngine,
    subject_id: str,
    subject_type: Union[SubjectType, str],
    limit: int = DEFAULT_LIMIT,
    offset: int = 0,
    profile: str = DEFAULT_PROFILE,
    pool_limit: int = DEFAULT_POOL_LIMIT,
    as_of: Optional[datetime] = None,
    min_score: Optional[float] = None,
    request_id: Optional[str] = None
) -> RecommendationPage:
    """
    Main entry point: GetRecommendations(subjectId, subjectType, limit, offset).

    Args:
        db: Database session
        engine: Configured MatchEngine
        subject_id: Student or listing id
        subject_type: "student" ranks listings, "listing" ranks students
        limit: Page size
        offset: Page start
        profile: Scoring profile name
        pool_limit: Max candidates loaded from the store
        as_of: Reference time, defaults to now (UTC)
        min_score: Optional composite threshold
        request_id: Optional id for tracing

    Returns:
        RecommendationPage

    Raises:
        InvalidArgument: before any data is read
        SubjectNotFound: unknown subject id
    """
    subject_type, _ = engine.validate_request(limit, offset, subject_type, profile)
    as_of = as_of or datetime.now(timezone.utc)

    logger.info(f"🚀 Starting match pipeline for {subject_type.value}: {subject_id}")
    start_time = time.perf_counter()

    subject = load_subject(db, subject_id, subject_type)
    if subject_type == SubjectType.STUDENT:
        pool = fetch_listing_pool(db, subject_id, as_of, limit=pool_limit)
    else:
        pool = fetch_student_pool(db, subject_id, limit=pool_limit)

    if not pool:
        logger.warning(f"⚠️ No eligible candidates for {subject_type.value} {subject_id}")

    load_ms = (time.perf_counter() - start_time) * 1000
    logger.info(f"📦 Loaded {len(pool)} candidates ({load_ms:.2f}ms)")

    page = engine.get_recommendations(
        subject=subject,
        subject_type=subject_type,
        pool=pool,
        limit=limit,
        offset=offset,
        profile=profile,
        as_of=as_of,
        min_score=min_score,
        request_id=request_id,
    )

    if page.partial:
        logger.warning(f"⚠️ Partial results for {subject_type.value} {subject_id}: deadline reached")

    logger.info(
        f"✨ Match pipeline complete: {len(page.recommendations)}/{page.total} returned "
        f"({(time.perf_counter() - start_time) * 1000:.2f}ms)"
    )
    return page


def run_attractiveness(db: Session, listing_id: str) -> ListingAttractiveness:
    """
    Score how attractive one listing is to students.

    Raises:
        SubjectNotFound: unknown listing id
    """
    listing = load_listing(db, listing_id)
    result = compute_attractiveness(listing)
    logger.info(f"🏷️ Attractiveness for listing {listing_id}: {result.score:.1f}")
    return result
