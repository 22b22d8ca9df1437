"""
Match Engine Constants

Defines signal names, default weights, neutral defaults and ranking limits
used by the match engine. All values are deterministic with no AI/ML components.
"""

from enum import Enum
from typing import Dict


# =============================================================================
# SIGNALS
# =============================================================================

class SignalName(str, Enum):
    """The fixed set of signals a registry may reference."""
    SKILLS_ALIGNMENT = "skills_alignment"
    TEMPORAL_FIT = "temporal_fit"
    SUSTAINABILITY = "sustainability"
    GROWTH_TRAJECTORY = "growth_trajectory"
    TRUST_RELIABILITY = "trust_reliability"
    NETWORK_AFFINITY = "network_affinity"


class SubjectType(str, Enum):
    """Who the recommendations are for."""
    STUDENT = "student"    # rank listings for a student
    LISTING = "listing"    # rank students for a listing


# Default weights for the full match engine profile (must sum to 1.0).
# Dict order is the breakdown order exposed to the UI.
SIGNAL_WEIGHTS: Dict[SignalName, float] = {
    SignalName.SKILLS_ALIGNMENT: 0.30,
    SignalName.TEMPORAL_FIT: 0.25,
    SignalName.SUSTAINABILITY: 0.15,
    SignalName.GROWTH_TRAJECTORY: 0.10,
    SignalName.TRUST_RELIABILITY: 0.10,
    SignalName.NETWORK_AFFINITY: 0.10,
}

WEIGHT_SUM_TOLERANCE = 1e-9

# =============================================================================
# SCORING PROFILES
# =============================================================================

PROFILE_MATCH_ENGINE = "match_engine"
PROFILE_SKILL_OVERLAP = "skill_overlap"
DEFAULT_PROFILE = PROFILE_MATCH_ENGINE

# =============================================================================
# NEUTRAL DEFAULTS
# =============================================================================

NEUTRAL_SCORE = 0.5          # unknown data, neither rewarded nor penalized
NO_REQUIREMENT_SCORE = 1.0   # listing asks for nothing, trivially satisfied
NO_AFFINITY_SCORE = 0.0      # network signal with nothing to compare

# Network affinity components
INSTITUTION_AFFINITY_SHARE = 0.5
CATEGORY_AFFINITY_SHARE = 0.5

# =============================================================================
# GROWTH TRAJECTORY
# =============================================================================

RECENCY_LOOKBACK_DAYS = 90

# =============================================================================
# RANKING
# =============================================================================

# Composite scores closer than this are ties
SCORE_TIE_PRECISION = 9

DEFAULT_LIMIT = 20
MAX_LIMIT = 200
DEFAULT_POOL_LIMIT = 200

ENGINE_VERSION = "1.0.0"
SCHEMA_VERSION = 1
