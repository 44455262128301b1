"""
Composite suggestion controller.

Merges a synchronous local country search with asynchronous predictions from
an optional external predictor into a single list with one selection index,
and emits a Location when the user commits a choice.

Every input change rebuilds the list and bumps a generation counter. Remote
work (predict and resolve) remembers the generation it started under and its
result is dropped if the generation has moved on, so only the most recent
query can ever change what the user sees.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Callable, List, Optional, Set

from domain.errors import NearestLookupEmpty, PredictorError
from domain.models import (
    Location,
    Prediction,
    ResolvedPlace,
    SuggestionItem,
    SuggestionKind,
    SuggestionList,
    SuggestionState,
)
from services.country_dataset import CountryDataset
from services.predictor import PlacePredictor
from services.scheduling import AsyncioScheduler, Cancellable, Scheduler
from settings import settings

logger = logging.getLogger(__name__)

LocationListener = Callable[[Location], None]


class SuggestionController:
    def __init__(
        self,
        dataset: CountryDataset,
        predictor: Optional[PlacePredictor] = None,
        scheduler: Optional[Scheduler] = None,
        *,
        blur_delay_ms: Optional[float] = None,
        predictor_timeout: Optional[float] = None,
    ):
        self._dataset = dataset
        self._predictor = predictor
        self._scheduler = scheduler or AsyncioScheduler()
        self.blur_delay_ms = settings.BLUR_HIDE_DELAY_MS if blur_delay_ms is None else blur_delay_ms
        self.predictor_timeout = (
            settings.PREDICTOR_TIMEOUT_SECONDS if predictor_timeout is None else predictor_timeout
        )

        self.text = ""
        self.visible = False
        self._suggestions = SuggestionList.empty()
        self._dismissed = False
        self._generation = 0
        self._tasks: Set[asyncio.Task] = set()
        self._blur_timer: Optional[Cancellable] = None
        self._listeners: List[LocationListener] = []
        self._running = True

    # -- observable state -------------------------------------------------

    @property
    def suggestions(self) -> SuggestionList:
        return self._suggestions

    @property
    def selected_index(self) -> int:
        return self._suggestions.selected_index

    @property
    def has_predictor(self) -> bool:
        return self._predictor is not None

    @property
    def state(self) -> SuggestionState:
        if self.visible:
            return SuggestionState.SHOWING
        if self.text.strip() and any(not t.done() for t in self._tasks):
            return SuggestionState.QUERYING
        return SuggestionState.IDLE

    def subscribe(self, listener: LocationListener) -> Callable[[], None]:
        """Register a locationSelected listener; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # -- lifecycle --------------------------------------------------------

    def start(self) -> None:
        self._running = True

    def stop(self) -> None:
        self._running = False
        self._generation += 1
        self._cancel_remote_tasks()
        self._cancel_blur_timer()

    # -- input events -----------------------------------------------------

    def on_input(self, text: str) -> None:
        self.text = text
        self._generation += 1
        self._cancel_remote_tasks()
        self._dismissed = False

        query = text.strip()
        if not query:
            self._suggestions = SuggestionList.empty()
            self.visible = False
            return

        self._suggestions = SuggestionList.build(self._dataset.search_countries(query))
        self.visible = self._suggestions.total > 0
        self._request_predictions(query, self._generation)

    def on_key(self, key: str) -> bool:
        """Handle a navigation key; returns True when the key was consumed."""
        if not self.visible or self._suggestions.total == 0:
            return False

        if key == "ArrowDown":
            self._suggestions = self._suggestions.with_selected_index(self.selected_index + 1)
            return True
        if key == "ArrowUp":
            self._suggestions = self._suggestions.with_selected_index(self.selected_index - 1)
            return True
        if key == "Enter":
            item = self._suggestions.selected_item or self._suggestions.item_at(0)
            if item is not None:
                self._commit(item)
            return True
        if key == "Escape":
            self._hide()
            return True
        return False

    def select_index(self, index: int) -> bool:
        """Pointer-driven selection of one suggestion."""
        item = self._suggestions.item_at(index)
        if item is None:
            return False
        self._cancel_blur_timer()
        self._commit(item)
        return True

    def on_focus(self) -> None:
        self._cancel_blur_timer()
        if self.text.strip() and self._suggestions.total > 0:
            self.visible = True
            self._dismissed = False

    def on_blur(self) -> None:
        # Delay hiding so a click on a suggestion is processed first.
        self._cancel_blur_timer()
        self._blur_timer = self._scheduler.call_later(self.blur_delay_ms, self._hide_after_blur)

    # -- internals --------------------------------------------------------

    def _hide(self) -> None:
        self.visible = False
        self._dismissed = True
        self._suggestions = self._suggestions.with_selected_index(-1)

    def _hide_after_blur(self) -> None:
        self._blur_timer = None
        if not self.visible:
            return
        self._hide()

    def _commit(self, item: SuggestionItem) -> None:
        if item.kind is SuggestionKind.LOCAL and item.location is not None:
            self._emit(item.location)
            return
        if item.prediction is None:
            return
        self._generation += 1
        self._cancel_remote_tasks()
        self._hide()
        self._request_resolve(item.prediction, self._generation)

    def _emit(self, location: Location) -> None:
        self._generation += 1
        self._cancel_remote_tasks()
        self._cancel_blur_timer()
        self.text = location.name
        self.visible = False
        self._dismissed = True
        self._suggestions = self._suggestions.with_selected_index(-1)
        logger.info("Location selected: %s (%s)", location.name, location.code or "-")
        for listener in list(self._listeners):
            listener(location)

    def _is_current(self, generation: int) -> bool:
        return self._running and generation == self._generation

    def _spawn(self, coro, what: str) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            coro.close()
            logger.debug("No running event loop; skipping %s", what)
            return
        task = loop.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _request_predictions(self, query: str, generation: int) -> None:
        if self._predictor is None or not self._running:
            return
        self._spawn(self._fetch_predictions(query, generation), f"predictions for {query!r}")

    def _request_resolve(self, prediction: Prediction, generation: int) -> None:
        if self._predictor is None or not self._running:
            return
        self._spawn(self._resolve_and_emit(prediction, generation), f"resolve of {prediction.token}")

    async def _fetch_predictions(self, query: str, generation: int) -> None:
        try:
            predictions = await asyncio.wait_for(
                self._predictor.predict(query), timeout=self.predictor_timeout
            )
        except asyncio.TimeoutError:
            logger.warning("Place prediction timed out for %r", query)
            return
        except PredictorError as exc:
            logger.warning("Place prediction failed for %r: %s", query, exc)
            return
        except Exception:
            logger.warning("Unexpected error predicting places for %r", query, exc_info=True)
            return

        if not self._is_current(generation):
            logger.debug("Dropping stale predictions for %r", query)
            return
        if not predictions:
            return

        self._suggestions = SuggestionList(
            local=self._suggestions.local,
            remote=tuple(SuggestionItem.from_prediction(p) for p in predictions),
        )
        # A list dismissed for this query stays hidden; focus or new input shows it again.
        if not self._dismissed:
            self.visible = True

    async def _resolve_and_emit(self, prediction: Prediction, generation: int) -> None:
        try:
            resolved = await asyncio.wait_for(
                self._predictor.resolve(prediction), timeout=self.predictor_timeout
            )
        except asyncio.TimeoutError:
            logger.warning("Resolving %s timed out", prediction.token)
            return
        except PredictorError as exc:
            logger.warning("Could not resolve %s: %s", prediction.token, exc)
            return
        except Exception:
            logger.warning("Unexpected error resolving %s", prediction.token, exc_info=True)
            return

        if not self._is_current(generation):
            logger.debug("Dropping stale resolution for %s", prediction.token)
            return
        self._emit(self._location_from_resolved(resolved))

    def _location_from_resolved(self, resolved: ResolvedPlace) -> Location:
        """Label a resolved place with the nearest known country."""
        try:
            match = self._dataset.nearest_match(resolved.lat, resolved.lng)
        except NearestLookupEmpty:
            logger.info("No countries to label %r; using predictor label", resolved.display_name)
            return Location(
                name=resolved.display_name,
                code="",
                latitude=resolved.lat,
                longitude=resolved.lng,
            )
        country = match.location
        return Location(
            name=country.name,
            code=country.code,
            latitude=resolved.lat,
            longitude=resolved.lng,
            capital=country.capital,
        )

    def _cancel_remote_tasks(self) -> None:
        try:
            current = asyncio.current_task()
        except RuntimeError:
            current = None
        for task in list(self._tasks):
            if task is not current and not task.done():
                task.cancel()

    def _cancel_blur_timer(self) -> None:
        if self._blur_timer is not None:
            self._blur_timer.cancel()
            self._blur_timer = None
