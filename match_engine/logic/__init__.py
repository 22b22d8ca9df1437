"""
Match Engine Logic Module

Provides the deterministic scoring engine that ranks project listings for
students and students for listings.
"""

from .contracts import (
    AvailabilityWindow,
    ProjectOutcomes,
    StudentProfile,
    SponsorRecord,
    ProjectListing,
    SignalResult,
    SignalBreakdown,
    CompositeScore,
    ScoredCandidate,
    Recommendation,
    RecommendationPage,
)
from .constants import SignalName, SubjectType
from .errors import MatchEngineError, ConfigurationError, InvalidArgument, SubjectNotFound
from .registry import Signal, SignalRegistry, ScoringProfile, build_registry, build_default_profiles
from .engine import MatchEngine

__all__ = [
    # Main engine
    "MatchEngine",

    # Registry
    "Signal",
    "SignalRegistry",
    "ScoringProfile",
    "build_registry",
    "build_default_profiles",

    # Contracts
    "AvailabilityWindow",
    "ProjectOutcomes",
    "StudentProfile",
    "SponsorRecord",
    "ProjectListing",
    "SignalResult",
    "SignalBreakdown",
    "CompositeScore",
    "ScoredCandidate",
    "Recommendation",
    "RecommendationPage",

    # Enums
    "SignalName",
    "SubjectType",

    # Errors
    "MatchEngineError",
    "ConfigurationError",
    "InvalidArgument",
    "SubjectNotFound",
]
