"""
Ranker

Scores a candidate pool against one subject, orders it deterministically
and returns the requested page.

Ordering:
    1. composite score, descending (rounded to SCORE_TIE_PRECISION places)
    2. freshness timestamp, descending, missing timestamps last
       (published_at for listings, updated_at for students)
    3. candidate id, ascending
"""

import logging
import os
import time
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from datetime import datetime
from typing import Dict, List, Optional, Sequence, Set, Tuple

from .aggregator import aggregate_scores
from .constants import SubjectType, SCORE_TIE_PRECISION, MAX_LIMIT
from .contracts import (
    Candidate,
    ProjectListing,
    RankedPool,
    ScoredCandidate,
)
from .errors import InvalidArgument
from .registry import ScoringProfile
from .signal_extractors import ScoringContext, as_utc

logger = logging.getLogger(__name__)


# =============================================================================
# VALIDATION
# =============================================================================

def validate_pagination(limit: int, offset: int, max_limit: int = MAX_LIMIT) -> None:
    """
    Reject pagination the ranker cannot honor.

    Raises:
        InvalidArgument: limit outside [1, max_limit] or negative offset
    """
    if isinstance(limit, bool) or not isinstance(limit, int):
        raise InvalidArgument(f"limit must be an integer, got {limit!r}")
    if isinstance(offset, bool) or not isinstance(offset, int):
        raise InvalidArgument(f"offset must be an integer, got {offset!r}")
    if limit <= 0:
        raise InvalidArgument(f"limit must be positive, got {limit}")
    if limit > max_limit:
        raise InvalidArgument(f"limit must be at most {max_limit}, got {limit}")
    if offset < 0:
        raise InvalidArgument(f"offset must not be negative, got {offset}")


# =============================================================================
# ORDERING
# =============================================================================

def candidate_id(candidate: Candidate) -> str:
    if isinstance(candidate, ProjectListing):
        return candidate.listing_id
    return candidate.student_id


def freshness(candidate: Candidate) -> Optional[datetime]:
    """Timestamp used to break score ties."""
    if isinstance(candidate, ProjectListing):
        return candidate.published_at
    return candidate.updated_at


def sort_key(scored: ScoredCandidate) -> Tuple[float, int, float, str]:
    stamp = freshness(scored.candidate)
    return (
        -round(scored.composite.value, SCORE_TIE_PRECISION),
        0 if stamp is not None else 1,
        -as_utc(stamp).timestamp() if stamp is not None else 0.0,
        scored.candidate_id,
    )


def rank_candidates(scored_candidates: List[ScoredCandidate]) -> List[ScoredCandidate]:
    """
    Order scored candidates by the full tie-break key.

    Args:
        scored_candidates: candidates in any order

    Returns:
        New list, best first
    """
    return sorted(scored_candidates, key=sort_key)


def paginate(ranked: List[ScoredCandidate], limit: int, offset: int) -> List[ScoredCandidate]:
    return ranked[offset:offset + limit]


# =============================================================================
# SCORING
# =============================================================================

def score_candidate(
    subject: Candidate,
    subject_type: SubjectType,
    candidate: Candidate,
    profile: ScoringProfile,
    context: ScoringContext
) -> ScoredCandidate:
    """Score one pool member, orienting the pair as (student, listing)."""
    if subject_type == SubjectType.STUDENT:
        student, listing = subject, candidate
    else:
        student, listing = candidate, subject

    return aggregate_scores(
        registry=profile.registry,
        student=student,
        listing=listing,
        candidate=candidate,
        candidate_id=candidate_id(candidate),
        context=context,
    )


def default_worker_count() -> int:
    return max(1, os.cpu_count() or 1)


def score_pool(
    subject: Candidate,
    subject_type: SubjectType,
    pool: Sequence[Candidate],
    profile: ScoringProfile,
    context: ScoringContext,
    max_workers: Optional[int] = None,
    deadline: Optional[float] = None
) -> Tuple[List[ScoredCandidate], bool]:
    """
    Score every pool member on a bounded thread pool.

    Workers share no mutable state: each task reads frozen snapshots and
    returns a new ScoredCandidate. At most 2 x workers evaluations are in
    flight at once.

    Args:
        deadline: time.monotonic() value after which no new evaluations are
            dispatched. Evaluations already running are allowed to finish.

    Returns:
        (scored candidates in pool order, partial flag)

    Raises:
        Any exception raised by an extractor.
    """
    if not pool:
        return [], False

    workers = min(max_workers or default_worker_count(), default_worker_count(), len(pool))
    max_in_flight = workers * 2

    results: Dict[int, ScoredCandidate] = {}
    in_flight: Dict[Future, int] = {}
    partial = False

    def _collect(done: Set[Future]) -> None:
        for future in done:
            index = in_flight.pop(future)
            results[index] = future.result()

    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="match-score") as executor:
        try:
            for index, candidate in enumerate(pool):
                if deadline is not None and time.monotonic() >= deadline:
                    partial = True
                    break

                if len(in_flight) >= max_in_flight:
                    done, _ = wait(set(in_flight), return_when=FIRST_COMPLETED)
                    _collect(done)
                    if deadline is not None and time.monotonic() >= deadline:
                        partial = True
                        break

                future = executor.submit(
                    score_candidate, subject, subject_type, candidate, profile, context
                )
                in_flight[future] = index

            if in_flight:
                done, _ = wait(set(in_flight))
                _collect(done)
        except BaseException:
            for future in in_flight:
                future.cancel()
            raise

    if partial:
        logger.warning(
            f"Scoring deadline reached: {len(results)}/{len(pool)} candidates evaluated"
        )

    return [results[i] for i in sorted(results)], partial


def rank_pool(
    subject: Candidate,
    subject_type: SubjectType,
    pool: Sequence[Candidate],
    profile: ScoringProfile,
    context: ScoringContext,
    limit: int,
    offset: int,
    min_score: float = 0.0,
    max_workers: Optional[int] = None,
    deadline: Optional[float] = None
) -> RankedPool:
    """
    Score, threshold, order and slice a candidate pool.

    `total` counts candidates at or above `min_score`; the page is
    ranked[offset:offset + limit] of that filtered list.
    """
    scored, partial = score_pool(
        subject, subject_type, pool, profile, context,
        max_workers=max_workers, deadline=deadline,
    )

    kept = [s for s in scored if s.composite.value >= min_score] if min_score > 0 else scored
    ranked = rank_candidates(kept)

    return RankedPool(
        items=paginate(ranked, limit, offset),
        total=len(ranked),
        evaluated=len(scored),
        pool_size=len(pool),
        partial=partial,
    )
