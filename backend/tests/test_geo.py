import pytest

from services.geo import (
    ease_in_out_quad,
    haversine_km,
    interpolate_longitude,
    is_valid_coordinate,
    normalize_longitude,
    shortest_arc_delta,
)


def test_easing_endpoints_and_midpoint():
    assert ease_in_out_quad(0.0) == 0.0
    assert ease_in_out_quad(1.0) == 1.0
    assert ease_in_out_quad(0.5) == pytest.approx(0.5)


def test_easing_is_monotonic():
    samples = [ease_in_out_quad(i / 1000) for i in range(1001)]
    assert all(b >= a for a, b in zip(samples, samples[1:]))


@pytest.mark.parametrize(
    "value, expected",
    [(0.0, 0.0), (180.0, 180.0), (-180.0, 180.0), (190.0, -170.0), (-190.0, 170.0), (540.0, 180.0)],
)
def test_normalize_longitude_range(value, expected):
    assert normalize_longitude(value) == pytest.approx(expected)


def test_shortest_arc_crosses_antimeridian():
    assert shortest_arc_delta(170.0, -170.0) == pytest.approx(20.0)
    assert shortest_arc_delta(-170.0, 170.0) == pytest.approx(-20.0)
    assert shortest_arc_delta(-95.7129, 138.2529) == pytest.approx(-126.0342)


def test_interpolated_longitude_never_takes_long_way():
    pairs = [(170.0, -170.0), (-179.0, 179.0), (-95.7, 138.25), (10.0, 100.0), (0.0, 180.0), (45.0, -135.0)]
    for start, end in pairs:
        total = abs(shortest_arc_delta(start, end))
        assert total <= 180
        for i in range(101):
            value = interpolate_longitude(start, end, i / 100)
            assert -180 < value <= 180
            assert abs(shortest_arc_delta(start, value)) <= total + 1e-9


def test_interpolated_longitude_ends_on_target():
    assert interpolate_longitude(170.0, -170.0, 1.0) == pytest.approx(-170.0)
    assert interpolate_longitude(170.0, -170.0, 0.5) == pytest.approx(180.0)


def test_haversine_known_distances():
    assert haversine_km(36.2048, 138.2529, 36.2048, 138.2529) == 0.0
    # One degree of latitude is ~111.2 km
    assert haversine_km(0.0, 0.0, 1.0, 0.0) == pytest.approx(111.19, rel=1e-3)


def test_is_valid_coordinate():
    assert is_valid_coordinate(36.2, 138.2)
    assert is_valid_coordinate(-90, 180)
    assert not is_valid_coordinate(91, 0)
    assert not is_valid_coordinate(0, -180.5)
    assert not is_valid_coordinate(float("nan"), 0)
    assert not is_valid_coordinate("north", 0)
