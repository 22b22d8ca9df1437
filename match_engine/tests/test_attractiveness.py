"""
Tests for listing attractiveness scoring.
"""

import pytest

from conftest import make_listing
from match_engine.logic.attractiveness import (
    ATTRACTIVENESS_WEIGHTS,
    compute_attractiveness,
    score_compensation,
    score_completion,
    score_flexibility,
    score_growth_opportunity,
    score_reputation,
    serialize_attractiveness,
)
from match_engine.logic.contracts import SponsorRecord


@pytest.mark.parametrize("is_paid, compensation, expected", [
    (False, "$40/hr", 0.2),
    (True, None, 0.4),
    (True, "Competitive", 0.7),
    (True, "$30/hr", 0.95),
    (True, "$20 per hour", 0.8),
    (True, "$3200 per month", 0.8),
    (True, "$3,200 per month", 0.8),
    (True, "$1,500/month", 0.45),
    (True, "$1000 stipend", 0.45),
    (True, "Equity", 0.55),
])
def test_compensation(is_paid, compensation, expected):
    listing = make_listing(is_paid=is_paid, compensation=compensation)
    score, _ = score_compensation(listing)
    assert score == pytest.approx(expected)


@pytest.mark.parametrize("remote, hours, expected", [
    (True, 8, 0.95),
    (False, 15, 0.6),
    (False, 30, 0.45),
    (True, None, 0.85),
])
def test_flexibility(remote, hours, expected):
    listing = make_listing(remote_allowed=remote, hours_per_week=hours)
    score, _ = score_flexibility(listing)
    assert score == pytest.approx(expected)


def test_reputation_regresses_small_samples():
    few, _ = score_reputation(SponsorRecord(avg_rating=4.6, rating_count=3))
    many, _ = score_reputation(SponsorRecord(avg_rating=4.6, rating_count=12))
    none, _ = score_reputation(SponsorRecord())

    assert many == pytest.approx(1.0)
    assert few == pytest.approx(0.9)
    assert none == 0.5


@pytest.mark.parametrize("rate, expected", [
    (None, 0.5),
    (0.95, 1.0),
    (0.8, 0.8),
    (0.5, 0.6),
    (0.2, 0.35),
])
def test_completion(rate, expected):
    score, _ = score_completion(SponsorRecord(completion_rate=rate))
    assert score == pytest.approx(expected)


def test_growth_keywords():
    listing = make_listing(title="Analytics intern", description="Weekly mentorship and training sessions")
    score, details = score_growth_opportunity(listing)
    assert score == pytest.approx(0.75)
    assert details["indicators"] == ["mentor", "training"]


def test_growth_is_capped():
    listing = make_listing(
        title="Leadership track with mentor",
        description="Full-time hire path, career advancement, certification, training and growth",
    )
    score, _ = score_growth_opportunity(listing)
    assert score == 1.0


def test_attractiveness_weights_sum_to_one():
    assert sum(ATTRACTIVENESS_WEIGHTS.values()) == pytest.approx(1.0)


def test_compute_attractiveness_plain_listing():
    listing = make_listing(
        title="Data intern",
        description="",
        is_paid=False,
        remote_allowed=False,
        hours_per_week=None,
        sponsor=SponsorRecord(),
    )
    result = compute_attractiveness(listing)

    # 0.25*0.2 + 0.20*0.6 + 0.25*0.5 + 0.15*0.5 + 0.15*0.5
    assert result.score == pytest.approx(44.5)
    assert [s.name for s in result.breakdown] == list(ATTRACTIVENESS_WEIGHTS)

    data = serialize_attractiveness(result)
    assert data["listingId"] == "lst-1"
    assert data["attractivenessScore"] == 44.5
    assert len(data["breakdown"]) == 5
