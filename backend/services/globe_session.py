"""
A search box wired to a globe: committed suggestions fly the camera.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

from domain.models import Location
from services.country_dataset import CountryDataset
from services.flight_engine import CameraFlightEngine, Flight
from services.predictor import PlacePredictor
from services.render_surface import HeadlessGlobe
from services.scheduling import Scheduler
from services.suggestions import SuggestionController

logger = logging.getLogger(__name__)


class GlobeSession:
    def __init__(
        self,
        dataset: CountryDataset,
        surface: HeadlessGlobe,
        scheduler: Scheduler,
        predictor: Optional[PlacePredictor] = None,
    ):
        self.dataset = dataset
        self.surface = surface
        self.scheduler = scheduler
        self.engine = CameraFlightEngine(surface, scheduler)
        self.controller = SuggestionController(dataset, predictor, scheduler)
        self.last_flight: Optional[Flight] = None
        self._unsubscribe: Optional[Callable[[], None]] = None

    def start(self) -> None:
        self.engine.start()
        self.controller.start()
        if self._unsubscribe is None:
            self._unsubscribe = self.controller.subscribe(self._on_location_selected)

    def stop(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self.controller.stop()
        self.engine.stop()

    def fly_to_code(self, code: str) -> Optional[Flight]:
        country = self.dataset.get_country_by_code(code)
        if country is None:
            return None
        return self.fly_to(country)

    def fly_to(self, location: Location) -> Flight:
        self.last_flight = self.engine.fly_to(location)
        return self.last_flight

    def _on_location_selected(self, location: Location) -> None:
        self.fly_to(location)

    def snapshot(self) -> Dict[str, Any]:
        """Plain-data view of the search box and camera."""
        flight = self.last_flight
        if flight is None:
            flight_status = "idle"
        elif flight.completed:
            flight_status = "completed"
        elif flight.cancelled:
            flight_status = "cancelled"
        else:
            flight_status = "flying"

        suggestions = self.controller.suggestions
        return {
            "text": self.controller.text,
            "visible": self.controller.visible,
            "state": self.controller.state.value,
            "selected_index": suggestions.selected_index,
            "suggestions": [
                {"kind": item.kind.value, "label": item.label, "code": item.location.code if item.location else None}
                for item in suggestions.items
            ],
            "pose": self.surface.get_pose(),
            "auto_rotate": self.surface.auto_rotate,
            "markers": list(self.surface.markers),
            "flight": {
                "status": flight_status,
                "destination": flight.destination if flight else None,
                "phase": flight.current_phase.name if flight and flight.current_phase else None,
            },
        }
