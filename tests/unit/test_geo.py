import math

import pytest

from roadtrippi.services.geo import EARTH_RADIUS_MILES, bounding_box, haversine_miles


def test_distance_to_self_is_zero():
    assert haversine_miles(39.5, -98.35, 39.5, -98.35) == 0.0


def test_one_degree_of_longitude_on_equator():
    expected = EARTH_RADIUS_MILES * math.pi / 180
    assert haversine_miles(0.0, 0.0, 0.0, 1.0) == pytest.approx(expected, rel=1e-6)


def test_distance_is_symmetric():
    amarillo = (35.1850, -101.9898)
    tucumcari = (35.1717, -103.7250)
    there = haversine_miles(*amarillo, *tucumcari)
    back = haversine_miles(*tucumcari, *amarillo)
    assert there == pytest.approx(back)
    assert 95 < there < 100


def test_antipodes_are_half_the_circumference():
    assert haversine_miles(0.0, 0.0, 0.0, 180.0) == pytest.approx(EARTH_RADIUS_MILES * math.pi)


def test_bounding_box_spans_radius():
    min_lat, max_lat, min_lng, max_lng = bounding_box(0.0, 0.0, 69.0)
    assert (min_lat, max_lat) == pytest.approx((-1.0, 1.0))
    assert (min_lng, max_lng) == pytest.approx((-1.0, 1.0))


def test_bounding_box_widens_longitude_away_from_equator():
    _, _, min_lng, max_lng = bounding_box(60.0, 10.0, 69.0)
    assert max_lng - 10.0 == pytest.approx(2.0)
    assert 10.0 - min_lng == pytest.approx(2.0)


@pytest.mark.parametrize("lat1, lng1, lat2, lng2", [
    (-87.5, 0.0, 87.5, 180.0),
    (-35.185, 78.0102, 35.185, -101.9898),
    (45.0, -90.0, -45.0, 90.0),
])
def test_near_antipodal_points_stay_finite(lat1, lng1, lat2, lng2):
    distance = haversine_miles(lat1, lng1, lat2, lng2)
    assert math.isfinite(distance)
    assert distance == pytest.approx(EARTH_RADIUS_MILES * math.pi, rel=1e-6)
