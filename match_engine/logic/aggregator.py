"""
Score Aggregator

Runs every signal of a registry against a (student, listing) pair and
combines the results into a composite score:

    composite = 100 * sum(weight_i * clamp(score_i, 0, 1))
"""

from typing import Dict, List

from .contracts import (
    StudentProfile,
    ProjectListing,
    Candidate,
    CompositeScore,
    ScoredCandidate,
    SignalBreakdown,
    SignalResult,
)
from .constants import SignalName
from .registry import SignalRegistry
from .signal_extractors import ScoringContext


def clamp01(x: float) -> float:
    return 0.0 if x < 0.0 else (1.0 if x > 1.0 else x)


def evaluate_signals(
    registry: SignalRegistry,
    student: StudentProfile,
    listing: ProjectListing,
    context: ScoringContext
) -> Dict[SignalName, SignalResult]:
    """Evaluate each registered signal, keyed by name in registry order."""
    return {
        signal.name: signal.evaluate(student, listing, context)
        for signal in registry
    }


def compute_composite(
    registry: SignalRegistry,
    results: Dict[SignalName, SignalResult]
) -> CompositeScore:
    """
    Aggregate signal results into a CompositeScore.

    Scores are clamped to [0, 1] before weighting, so a faulty extractor can
    never push the composite outside [0, 100].
    """
    breakdown: List[SignalBreakdown] = []
    total = 0.0

    for signal in registry:
        score = clamp01(results[signal.name].score)
        total += signal.weight * score
        breakdown.append(SignalBreakdown(
            signal=signal.name,
            score=score,
            weight=signal.weight,
        ))

    value = max(0.0, min(100.0, 100.0 * total))
    return CompositeScore(value=value, breakdown=breakdown)


def aggregate_scores(
    registry: SignalRegistry,
    student: StudentProfile,
    listing: ProjectListing,
    candidate: Candidate,
    candidate_id: str,
    context: ScoringContext
) -> ScoredCandidate:
    """
    Compute all signal scores for one pair and aggregate into a ScoredCandidate.

    Args:
        registry: Signals and weights to apply
        student: Student side of the pair
        listing: Listing side of the pair
        candidate: Whichever side is being ranked
        candidate_id: Identity of the ranked side
        context: Request-scoped scoring context

    Returns:
        ScoredCandidate with composite score and raw signal results
    """
    results = evaluate_signals(registry, student, listing, context)
    return ScoredCandidate(
        candidate_id=candidate_id,
        candidate=candidate,
        composite=compute_composite(registry, results),
        signal_results=results,
    )
