"""
Signal Registry and Scoring Profiles

A registry is the ordered, weighted set of signals a composite score is built
from. Registries are validated once, when they are built, so a bad weight
table stops the service at startup instead of surfacing per request.

A ScoringProfile names a registry so interchangeable strategies (full match
engine, skill-overlap fallback) can be handed to the ranker explicitly.
"""

import logging
import math
from typing import Callable, Dict, List, Mapping, Optional, Tuple, Union

from .constants import (
    SignalName,
    SIGNAL_WEIGHTS,
    WEIGHT_SUM_TOLERANCE,
    PROFILE_MATCH_ENGINE,
    PROFILE_SKILL_OVERLAP,
)
from .contracts import StudentProfile, ProjectListing, SignalResult
from .errors import ConfigurationError
from .signal_extractors import EXTRACTORS, ScoringContext

logger = logging.getLogger(__name__)

Extractor = Callable[[StudentProfile, ProjectListing, ScoringContext], SignalResult]


class Signal:
    """A named, weighted scoring rule."""

    __slots__ = ("name", "weight", "extractor")

    def __init__(self, name: SignalName, weight: float, extractor: Extractor):
        self.name = name
        self.weight = weight
        self.extractor = extractor

    def evaluate(
        self,
        student: StudentProfile,
        listing: ProjectListing,
        context: ScoringContext
    ) -> SignalResult:
        return self.extractor(student, listing, context)

    def __repr__(self) -> str:
        return f"Signal({self.name.value}, weight={self.weight})"


class SignalRegistry:
    """
    Ordered, immutable collection of signals whose weights sum to 1.0.

    Raises:
        ConfigurationError: on an empty table, duplicate signals, a weight
            outside (0, 1], or a weight sum off 1.0 by more than 1e-9.
    """

    def __init__(self, signals: List[Signal]):
        validate_weights({s.name: s.weight for s in signals}, count=len(signals))
        self._signals: Tuple[Signal, ...] = tuple(signals)

    @property
    def signals(self) -> Tuple[Signal, ...]:
        return self._signals

    @property
    def names(self) -> List[SignalName]:
        return [s.name for s in self._signals]

    def weights(self) -> Dict[SignalName, float]:
        return {s.name: s.weight for s in self._signals}

    def __iter__(self):
        return iter(self._signals)

    def __len__(self) -> int:
        return len(self._signals)


class ScoringProfile:
    """A named scoring strategy passed to the ranker at call time."""

    __slots__ = ("name", "registry")

    def __init__(self, name: str, registry: SignalRegistry):
        self.name = name
        self.registry = registry

    def __repr__(self) -> str:
        return f"ScoringProfile({self.name!r}, signals={[n.value for n in self.registry.names]})"


# =============================================================================
# VALIDATION
# =============================================================================

def validate_weights(weights: Mapping, count: Optional[int] = None) -> None:
    """
    Check a weight table: non-empty, no duplicates, each weight in (0, 1],
    total within WEIGHT_SUM_TOLERANCE of 1.0.
    """
    if not weights:
        raise ConfigurationError("Weight table is empty")

    if count is not None and count != len(weights):
        raise ConfigurationError("Weight table lists the same signal more than once")

    for name, weight in weights.items():
        label = getattr(name, "value", name)
        if not isinstance(weight, (int, float)) or isinstance(weight, bool) or math.isnan(weight):
            raise ConfigurationError(f"Weight for '{label}' is not a number: {weight!r}")
        if weight <= 0.0 or weight > 1.0:
            raise ConfigurationError(f"Weight for '{label}' must be in (0, 1], got {weight}")

    total = sum(weights.values())
    if abs(total - 1.0) > WEIGHT_SUM_TOLERANCE:
        raise ConfigurationError(f"Signal weights must sum to 1.0, got {total!r}")


# =============================================================================
# BUILDERS
# =============================================================================

def build_registry(weights: Mapping[Union[SignalName, str], float]) -> SignalRegistry:
    """
    Build a registry from a {signal name: weight} table.

    Keys may be SignalName members or their string values. Order of the
    table is kept as the breakdown order.

    Raises:
        ConfigurationError: for unknown signal names or invalid weights.
    """
    signals: List[Signal] = []
    for raw_name, weight in weights.items():
        name = _resolve_signal_name(raw_name)
        signals.append(Signal(name, weight, EXTRACTORS[name]))
    return SignalRegistry(signals)


def build_default_profiles(
    weight_overrides: Optional[Mapping[str, float]] = None
) -> Dict[str, ScoringProfile]:
    """
    Build the built-in scoring profiles.

    Args:
        weight_overrides: optional replacement weight table for the full
            match engine profile (e.g. from configuration)

    Returns:
        Dict mapping profile name to ScoringProfile
    """
    weights = dict(weight_overrides) if weight_overrides else dict(SIGNAL_WEIGHTS)
    if weight_overrides:
        logger.info(f"Using configured signal weights: {weights}")

    return {
        PROFILE_MATCH_ENGINE: ScoringProfile(PROFILE_MATCH_ENGINE, build_registry(weights)),
        PROFILE_SKILL_OVERLAP: ScoringProfile(
            PROFILE_SKILL_OVERLAP,
            build_registry({SignalName.SKILLS_ALIGNMENT: 1.0}),
        ),
    }


def _resolve_signal_name(raw_name: Union[SignalName, str]) -> SignalName:
    if isinstance(raw_name, SignalName):
        return raw_name
    try:
        return SignalName(str(raw_name).strip().lower())
    except ValueError:
        known = ", ".join(n.value for n in SignalName)
        raise ConfigurationError(f"Unknown signal '{raw_name}' (known: {known})") from None
