"""
Search box to camera flight, end to end.
"""
import pytest

from services.country_dataset import CountryDataset
from services.globe_session import GlobeSession
from services.render_surface import HeadlessGlobe
from services.scheduling import ManualScheduler


def _session():
    scheduler = ManualScheduler(frame_interval_ms=16)
    session = GlobeSession(CountryDataset(), HeadlessGlobe(scheduler), scheduler)
    session.start()
    return session, scheduler


def test_typing_jap_and_enter_flies_to_japan():
    session, scheduler = _session()
    session.controller.on_input("Jap")
    assert [item.label for item in session.controller.suggestions.items] == ["Japan"]

    session.controller.on_key("Enter")
    flight = session.last_flight
    assert flight is not None
    assert flight.destination.name == "Japan"
    assert (flight.destination.latitude, flight.destination.longitude) == (36.2048, 138.2529)
    assert flight.plan.total_duration_ms == 3700
    assert session.snapshot()["flight"]["status"] == "flying"

    scheduler.advance(3700)
    assert flight.completed
    pose = session.surface.get_pose()
    assert pose.lat == pytest.approx(36.2048)
    assert pose.lng == pytest.approx(138.2529)
    assert pose.altitude == pytest.approx(1.5)

    snap = session.snapshot()
    assert snap["text"] == "Japan"
    assert snap["visible"] is False
    assert snap["flight"]["status"] == "completed"
    assert [m.label for m in snap["markers"]] == ["Japan"]


def test_second_commit_mid_flight_redirects_camera():
    session, scheduler = _session()
    session.controller.on_input("Jap")
    session.controller.on_key("Enter")
    first = session.last_flight
    scheduler.advance(1200)

    session.controller.on_input("Bra")
    session.controller.on_key("Enter")
    assert first.cancelled
    assert session.last_flight.destination.code == "BR"
    assert session.snapshot()["flight"]["phase"] == "zoom_out"


def test_fly_to_code():
    session, _ = _session()
    assert session.fly_to_code("zz") is None
    flight = session.fly_to_code("nz")
    assert flight.destination.name == "New Zealand"


def test_stop_detaches_controller_from_engine():
    session, scheduler = _session()
    session.controller.on_input("Jap")
    session.controller.on_key("Enter")
    session.stop()
    session.stop()
    assert session.last_flight.cancelled

    session.controller.on_input("Bra")
    session.controller.on_key("Enter")
    assert session.last_flight.destination.code == "JP"
