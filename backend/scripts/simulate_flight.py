"""Simulate a camera flight on a headless globe and print the pose timeline.

Usage:
    python -m scripts.simulate_flight --country JP [--from-lat 0 --from-lng 0 --from-alt 2.5] [--sample-ms 250]
    python -m scripts.simulate_flight --query "new zea"

Runs on a virtual clock, so it finishes instantly regardless of flight length.
Run from the backend/ directory.
"""

from __future__ import annotations

import argparse
import logging
import sys

from domain.errors import InvalidDestination
from domain.models import CameraPose
from services.country_dataset import CountryDataset
from services.flight_engine import AUTO_ROTATE_RESUME_DELAY_MS, CameraFlightEngine
from services.render_surface import HeadlessGlobe
from services.scheduling import ManualScheduler

logger = logging.getLogger("simulate_flight")


def _format_pose(time_ms: float, pose: CameraPose, phase: str) -> str:
    return f"{time_ms:8.0f} ms  {phase:<9} lat={pose.lat:9.4f}  lng={pose.lng:9.4f}  alt={pose.altitude:.3f}"


def main(argv: list[str] | None = None) -> int:
    if not logger.handlers:
        logging.basicConfig(level=logging.INFO, format="%(message)s")
    parser = argparse.ArgumentParser(description="Simulate a globe camera flight to a country.")
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--country", help="ISO country code, e.g. JP.")
    target.add_argument("--query", help="Search text; the first local suggestion is used.")
    parser.add_argument("--from-lat", type=float, default=0.0)
    parser.add_argument("--from-lng", type=float, default=0.0)
    parser.add_argument("--from-alt", type=float, default=2.5)
    parser.add_argument("--sample-ms", type=float, default=250.0, help="Print interval in ms.")
    parser.add_argument("--frame-ms", type=float, default=16.0, help="Virtual frame interval in ms.")
    args = parser.parse_args(argv)

    dataset = CountryDataset()
    if args.country:
        destination = dataset.get_country_by_code(args.country)
    else:
        matches = dataset.search_countries(args.query)
        destination = matches[0] if matches else None
    if destination is None:
        logger.error("No country found for %s", args.country or repr(args.query))
        return 2

    scheduler = ManualScheduler(frame_interval_ms=args.frame_ms)
    globe = HeadlessGlobe(
        scheduler,
        initial_pose=CameraPose(lat=args.from_lat, lng=args.from_lng, altitude=args.from_alt),
    )
    engine = CameraFlightEngine(globe, scheduler)
    try:
        flight = engine.fly_to(destination)
    except InvalidDestination as exc:
        logger.error("%s", exc)
        return 2

    logger.info("Flying to %s (%s)", destination.name, destination.code)
    total_ms = flight.plan.total_duration_ms
    elapsed = 0.0
    logger.info(_format_pose(0, globe.get_pose(), flight.current_phase.name))
    while not flight.done:
        step = min(args.sample_ms, total_ms - elapsed) if elapsed < total_ms else args.frame_ms
        scheduler.advance(step)
        elapsed += step
        phase = flight.current_phase.name if flight.current_phase else "arrived"
        logger.info(_format_pose(scheduler.now_ms(), globe.get_pose(), phase))

    scheduler.advance(AUTO_ROTATE_RESUME_DELAY_MS)
    logger.info("Auto-rotate resumed: %s", globe.auto_rotate)
    return 0


if __name__ == "__main__":
    sys.exit(main())
