"""
Tests for composite score aggregation.
"""

import pytest

from conftest import make_listing, make_student
from match_engine.logic.aggregator import aggregate_scores, clamp01, compute_composite
from match_engine.logic.constants import SignalName
from match_engine.logic.contracts import SignalResult
from match_engine.logic.registry import build_default_profiles, build_registry


def _results(scores):
    return {name: SignalResult(signal=name, score=score) for name, score in scores.items()}


def test_clamp01():
    assert clamp01(-0.3) == 0.0
    assert clamp01(0.4) == 0.4
    assert clamp01(7.0) == 1.0


def test_composite_is_weighted_sum_times_100():
    registry = build_registry({"skills_alignment": 0.6, "temporal_fit": 0.4})
    composite = compute_composite(registry, _results({
        SignalName.SKILLS_ALIGNMENT: 0.5,
        SignalName.TEMPORAL_FIT: 1.0,
    }))
    assert composite.value == pytest.approx(70.0)


def test_out_of_range_signal_scores_are_clamped():
    registry = build_registry({"skills_alignment": 0.5, "temporal_fit": 0.5})

    high = compute_composite(registry, _results({
        SignalName.SKILLS_ALIGNMENT: 1.7,
        SignalName.TEMPORAL_FIT: 1.2,
    }))
    low = compute_composite(registry, _results({
        SignalName.SKILLS_ALIGNMENT: -0.4,
        SignalName.TEMPORAL_FIT: -3.0,
    }))

    assert high.value == pytest.approx(100.0)
    assert low.value == 0.0
    assert [b.score for b in high.breakdown] == [1.0, 1.0]
    assert [b.score for b in low.breakdown] == [0.0, 0.0]


def test_breakdown_follows_registry_order(context):
    registry = build_default_profiles()["match_engine"].registry
    scored = aggregate_scores(
        registry=registry,
        student=make_student(),
        listing=make_listing(),
        candidate=make_listing(),
        candidate_id="lst-1",
        context=context,
    )

    assert [b.signal for b in scored.composite.breakdown] == registry.names
    assert [b.weight for b in scored.composite.breakdown] == [s.weight for s in registry]
    assert set(scored.signal_results) == set(registry.names)
    assert 0.0 <= scored.composite.value <= 100.0
