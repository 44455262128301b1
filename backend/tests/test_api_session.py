from fastapi import FastAPI
from fastapi.testclient import TestClient

from api import main
from api.routes import countries as countries_router
from api.routes import session as session_router
from services.country_dataset import CountryDataset
from services.globe_session import GlobeSession
from services.render_surface import HeadlessGlobe
from services.scheduling import ManualScheduler


def _client():
    scheduler = ManualScheduler(frame_interval_ms=16)
    globe_session = GlobeSession(CountryDataset(), HeadlessGlobe(scheduler), scheduler)
    globe_session.start()

    app = FastAPI()
    app.include_router(countries_router.router, prefix="/countries")
    app.include_router(session_router.router, prefix="/session")
    app.dependency_overrides[session_router.get_globe_session] = lambda: globe_session
    return TestClient(app), scheduler


def test_search_countries_endpoint():
    client, _ = _client()
    resp = client.get("/countries", params={"q": "United"})
    assert resp.status_code == 200
    assert [c["name"] for c in resp.json()] == ["United Arab Emirates", "United Kingdom", "United States"]


def test_nearest_country_endpoint():
    client, _ = _client()
    resp = client.get("/countries/nearest", params={"lat": 36.2048, "lng": 138.2529})
    assert resp.status_code == 200
    data = resp.json()
    assert data["country"]["code"] == "JP"
    assert data["distance_km"] == 0.0

    assert client.get("/countries/nearest", params={"lat": 100, "lng": 0}).status_code == 400


def test_get_country_by_code_endpoint():
    client, _ = _client()
    assert client.get("/countries/jp").json()["name"] == "Japan"
    assert client.get("/countries/zz").status_code == 404


def test_session_input_enter_and_flight():
    client, scheduler = _client()

    resp = client.post("/session/input", json={"text": "Jap"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["visible"] is True
    assert [s["label"] for s in data["suggestions"]] == ["Japan"]
    assert data["suggestions"][0]["kind"] == "local"

    resp = client.post("/session/key", json={"key": "Enter"})
    data = resp.json()
    assert data["handled"] is True
    state = data["state"]
    assert state["text"] == "Japan"
    assert state["visible"] is False
    assert state["auto_rotate"] is False
    assert state["flight"]["status"] == "flying"
    assert state["markers"][0]["label"] == "Japan"

    scheduler.advance(3700)
    state = client.get("/session/state").json()
    assert state["flight"]["status"] == "completed"
    assert state["pose"]["altitude"] == 1.5

    scheduler.advance(2000)
    assert client.get("/session/state").json()["auto_rotate"] is True


def test_session_select_blur_and_focus():
    client, scheduler = _client()
    client.post("/session/input", json={"text": "United"})
    assert client.post("/session/select", json={"index": 9}).status_code == 404

    client.post("/session/blur")
    scheduler.advance(200)
    assert client.get("/session/state").json()["visible"] is False
    assert client.post("/session/focus").json()["visible"] is True

    resp = client.post("/session/select", json={"index": 1})
    assert resp.json()["text"] == "United Kingdom"


def test_session_fly_validation():
    client, _ = _client()
    assert client.post("/session/fly", json={"code": "zz"}).status_code == 404
    assert client.post("/session/fly", json={}).status_code == 400
    assert client.post("/session/fly", json={"latitude": 200, "longitude": 0}).status_code == 422

    resp = client.post("/session/fly", json={"name": "Null Island", "latitude": 0.0, "longitude": 0.0})
    assert resp.status_code == 200
    assert resp.json()["flight"]["destination"]["name"] == "Null Island"

    resp = client.delete("/session/markers")
    assert resp.json()["markers"] == []


def test_app_lifecycle_creates_and_stops_session():
    with TestClient(main.app) as client:
        assert client.get("/health").json() == {"status": "healthy"}
        resp = client.post("/session/input", json={"text": "Jap"})
        assert [s["label"] for s in resp.json()["suggestions"]] == ["Japan"]
    assert session_router._session is None
