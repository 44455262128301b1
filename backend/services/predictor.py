"""
External place predictor.

The suggestion controller only knows the PlacePredictor protocol: predict by
text, then resolve one chosen prediction to coordinates. NominatimPredictor
implements it on top of services.nominatim, running the blocking HTTP calls in
a worker thread.
"""
from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Protocol

import requests

from domain.errors import PredictorRequestFailed, PredictorUnavailable, ResolveFailed
from domain.models import Prediction, ResolvedPlace
from services import nominatim

logger = logging.getLogger(__name__)


class PlacePredictor(Protocol):
    async def predict(self, text: str) -> List[Prediction]: ...

    async def resolve(self, prediction: Prediction) -> ResolvedPlace: ...


class NominatimPredictor:
    provider = "osm"

    def __init__(self, limit: int = 5):
        self.limit = limit

    async def predict(self, text: str) -> List[Prediction]:
        try:
            raw = await asyncio.to_thread(nominatim.search_places, text, self.limit)
        except (requests.RequestException, ValueError) as exc:
            raise PredictorRequestFailed(f"Nominatim search failed for {text!r}: {exc}") from exc

        predictions: List[Prediction] = []
        seen: set[str] = set()
        for item in raw:
            token = nominatim.osm_token(item)
            description = (item.get("display_name") or item.get("name") or "").strip()
            if not token or not description or token in seen:
                continue
            seen.add(token)
            predictions.append(Prediction(token=token, description=description, provider=self.provider))
        logger.debug("NominatimPredictor.predict: %r -> %d predictions", text, len(predictions))
        return predictions

    async def resolve(self, prediction: Prediction) -> ResolvedPlace:
        try:
            raw = await asyncio.to_thread(nominatim.lookup_place, prediction.token)
        except (requests.RequestException, ValueError) as exc:
            raise ResolveFailed(f"Nominatim lookup failed for {prediction.token}: {exc}") from exc
        if not raw:
            raise ResolveFailed(f"Nominatim lookup returned nothing for {prediction.token}")

        item = raw[0]
        try:
            lat = float(item["lat"])
            lng = float(item["lon"])
        except (KeyError, TypeError, ValueError) as exc:
            raise ResolveFailed(f"Nominatim lookup for {prediction.token} has no coordinates") from exc
        display_name = item.get("name") or item.get("display_name") or prediction.description
        return ResolvedPlace(lat=lat, lng=lng, display_name=display_name)


def build_predictor(settings) -> NominatimPredictor:
    """Create the configured predictor or raise PredictorUnavailable."""
    if not settings.PREDICTOR_ENABLED:
        raise PredictorUnavailable("PREDICTOR_ENABLED is off")
    return NominatimPredictor(limit=settings.PREDICTOR_RESULT_LIMIT)


def try_build_predictor(settings) -> Optional[NominatimPredictor]:
    try:
        return build_predictor(settings)
    except PredictorUnavailable as exc:
        logger.info("Remote place predictions disabled (%s); using local results only", exc)
        return None
