"""
Tests for signal registries and scoring profiles.
"""

import math

import pytest

from match_engine.logic.constants import (
    SignalName,
    SIGNAL_WEIGHTS,
    PROFILE_MATCH_ENGINE,
    PROFILE_SKILL_OVERLAP,
)
from match_engine.logic.errors import ConfigurationError
from match_engine.logic.registry import (
    Signal,
    SignalRegistry,
    build_default_profiles,
    build_registry,
    validate_weights,
)
from match_engine.logic.signal_extractors import score_skills_alignment


def test_default_weights_sum_to_one():
    assert math.isclose(sum(SIGNAL_WEIGHTS.values()), 1.0, abs_tol=1e-9)


def test_default_profiles():
    profiles = build_default_profiles()

    assert set(profiles) == {PROFILE_MATCH_ENGINE, PROFILE_SKILL_OVERLAP}

    full = profiles[PROFILE_MATCH_ENGINE].registry
    assert full.names == [
        SignalName.SKILLS_ALIGNMENT,
        SignalName.TEMPORAL_FIT,
        SignalName.SUSTAINABILITY,
        SignalName.GROWTH_TRAJECTORY,
        SignalName.TRUST_RELIABILITY,
        SignalName.NETWORK_AFFINITY,
    ]
    assert full.weights()[SignalName.SKILLS_ALIGNMENT] == 0.30
    assert full.weights()[SignalName.TEMPORAL_FIT] == 0.25

    overlap = profiles[PROFILE_SKILL_OVERLAP].registry
    assert overlap.names == [SignalName.SKILLS_ALIGNMENT]
    assert overlap.weights() == {SignalName.SKILLS_ALIGNMENT: 1.0}


def test_build_registry_accepts_string_names():
    registry = build_registry({"skills_alignment": 0.6, "Temporal_Fit": 0.4})
    assert registry.names == [SignalName.SKILLS_ALIGNMENT, SignalName.TEMPORAL_FIT]
    assert len(registry) == 2


def test_weight_overrides_replace_full_profile_only():
    profiles = build_default_profiles({"skills_alignment": 0.5, "temporal_fit": 0.5})
    assert profiles[PROFILE_MATCH_ENGINE].registry.names == [
        SignalName.SKILLS_ALIGNMENT, SignalName.TEMPORAL_FIT,
    ]
    assert profiles[PROFILE_SKILL_OVERLAP].registry.names == [SignalName.SKILLS_ALIGNMENT]


@pytest.mark.parametrize("weights", [
    {"skills_alignment": 0.5, "temporal_fit": 0.4},
    {"skills_alignment": 0.7, "temporal_fit": 0.4},
    {"skills_alignment": 1.0, "temporal_fit": 0.0},
    {"skills_alignment": 1.5, "temporal_fit": -0.5},
    {"skills_alignment": float("nan")},
    {},
])
def test_invalid_weight_tables_are_rejected(weights):
    with pytest.raises(ConfigurationError):
        build_registry(weights)


def test_weight_sum_tolerance():
    validate_weights({"a": 0.5, "b": 0.5 + 1e-12})
    with pytest.raises(ConfigurationError):
        validate_weights({"a": 0.5, "b": 0.5 + 1e-6})


def test_unknown_signal_name_is_rejected():
    with pytest.raises(ConfigurationError, match="Unknown signal"):
        build_registry({"charisma": 1.0})


def test_duplicate_signals_are_rejected():
    with pytest.raises(ConfigurationError, match="more than once"):
        SignalRegistry([
            Signal(SignalName.SKILLS_ALIGNMENT, 0.5, score_skills_alignment),
            Signal(SignalName.SKILLS_ALIGNMENT, 0.5, score_skills_alignment),
        ])


def test_non_numeric_weight_is_rejected():
    with pytest.raises(ConfigurationError):
        build_registry({"skills_alignment": "1.0"})
