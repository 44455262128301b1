"""
Core domain models for the globe flight search.
These are framework-agnostic and can be used across all services.
"""
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class Location:
    """A named place the camera can fly to."""
    name: str
    code: str  # ISO country code, may be empty for raw predictor labels
    latitude: float
    longitude: float
    capital: Optional[str] = None


@dataclass(frozen=True)
class CameraPose:
    """Camera point of view. Altitude is in globe radii above the surface."""
    lat: float
    lng: float
    altitude: float


@dataclass(frozen=True)
class FlightPhase:
    name: str  # "zoom_out", "rotate", "zoom_in"
    target: CameraPose
    duration_ms: float


@dataclass(frozen=True)
class FlightPlan:
    """Ordered camera legs computed from a start pose and a destination."""
    start: CameraPose
    destination: Location
    phases: Tuple[FlightPhase, ...]

    @property
    def total_duration_ms(self) -> float:
        return sum(phase.duration_ms for phase in self.phases)


@dataclass(frozen=True)
class Marker:
    lat: float
    lng: float
    label: str
    size: float = 0.05
    color: str = "#ff6b6b"


@dataclass(frozen=True)
class Prediction:
    """Unresolved candidate from the external predictor."""
    token: str  # provider-specific opaque id
    description: str
    provider: str = "osm"


@dataclass(frozen=True)
class ResolvedPlace:
    lat: float
    lng: float
    display_name: str


class SuggestionKind(str, Enum):
    """Which lane a suggestion came from."""
    LOCAL = "local"
    REMOTE = "remote"


class SuggestionState(str, Enum):
    IDLE = "idle"
    QUERYING = "querying"
    SHOWING = "showing"


@dataclass(frozen=True)
class SuggestionItem:
    kind: SuggestionKind
    label: str
    location: Optional[Location] = None
    prediction: Optional[Prediction] = None

    @classmethod
    def from_location(cls, location: Location) -> "SuggestionItem":
        return cls(kind=SuggestionKind.LOCAL, label=location.name, location=location)

    @classmethod
    def from_prediction(cls, prediction: Prediction) -> "SuggestionItem":
        return cls(kind=SuggestionKind.REMOTE, label=prediction.description, prediction=prediction)


@dataclass(frozen=True)
class SuggestionList:
    """
    Local matches followed by remote predictions.

    `selected_index` addresses the concatenation [local..., remote...];
    -1 means nothing is explicitly selected.
    """
    local: Tuple[SuggestionItem, ...] = field(default_factory=tuple)
    remote: Tuple[SuggestionItem, ...] = field(default_factory=tuple)
    selected_index: int = -1

    @classmethod
    def empty(cls) -> "SuggestionList":
        return cls()

    @classmethod
    def build(
        cls,
        locations: List[Location],
        predictions: Optional[List[Prediction]] = None,
    ) -> "SuggestionList":
        return cls(
            local=tuple(SuggestionItem.from_location(loc) for loc in locations),
            remote=tuple(SuggestionItem.from_prediction(p) for p in (predictions or [])),
        )

    @property
    def items(self) -> Tuple[SuggestionItem, ...]:
        return self.local + self.remote

    @property
    def total(self) -> int:
        return len(self.local) + len(self.remote)

    def item_at(self, index: int) -> Optional[SuggestionItem]:
        if 0 <= index < self.total:
            return self.items[index]
        return None

    @property
    def selected_item(self) -> Optional[SuggestionItem]:
        return self.item_at(self.selected_index)

    def with_selected_index(self, index: int) -> "SuggestionList":
        clamped = max(-1, min(index, self.total - 1))
        return replace(self, selected_index=clamped)
