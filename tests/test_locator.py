import pytest

from streamviz.schemas.transect import TransectFeature
from streamviz.services.geo.distance import haversine_m
from streamviz.services.geo.locator import HoverTracker, distance_to_transect_m, find_nearest_transect
from streamviz.services.geo.transects import parse_transects

from conftest import TRANSECTS, make_feature


@pytest.fixture
def features():
    return parse_transects(TRANSECTS).features


def test_haversine_known_distance():
    # 赤道上の経度 1 度 ≒ 111.195 km
    assert haversine_m(0, 0, 0, 1) == pytest.approx(111194.93, rel=1e-6)
    assert haversine_m(20.94, 71.19, 20.94, 71.19) == 0.0


def test_coincident_vertex_returns_that_transect(features):
    lon, lat = features[1].geometry.coordinates[0]
    hit = find_nearest_transect(lat, lon, features)
    assert hit.feature.transect_id == 2
    assert hit.distance_m == pytest.approx(0.0, abs=1e-6)


def test_round_trip_every_vertex(features):
    for feature in features:
        for lon, lat in feature.geometry.coordinates:
            assert find_nearest_transect(lat, lon, features).feature.transect_id == feature.transect_id


def test_nearest_between_transects(features):
    # 1 本目寄り（経度 71.1884）
    hit = find_nearest_transect(20.9400, 71.1884, features)
    assert hit.feature.transect_id == 1
    assert hit.distance_m == pytest.approx(haversine_m(20.94, 71.1884, 20.94, 71.1880))


def test_no_transects_returns_none():
    assert find_nearest_transect(20.94, 71.19, []) is None


def test_tie_first_in_iteration_order_wins():
    a = TransectFeature.model_validate(make_feature(10, 10, [[71.0, 21.0], [71.0, 21.001]]))
    b = TransectFeature.model_validate(make_feature(11, 11, [[71.0, 21.0], [71.0, 20.999]]))
    assert find_nearest_transect(21.0, 71.0, [a, b]).feature.transect_id == 10
    assert find_nearest_transect(21.0, 71.0, [b, a]).feature.transect_id == 11


def test_feature_without_vertices_never_wins(features):
    empty = TransectFeature.model_validate(make_feature(99, 99, [[0.0, 0.0]]))
    empty = empty.model_copy(update={"geometry": empty.geometry.model_copy(update={"coordinates": []})})
    assert distance_to_transect_m(0, 0, empty) == float("inf")
    assert find_nearest_transect(0, 0, [empty]) is None
    assert find_nearest_transect(0, 0, [empty, *features]).feature.transect_id != 99


def test_hover_tracker_suppresses_repeats(features):
    tracker = HoverTracker()
    assert tracker.update(features[0]) is True
    assert tracker.update(features[0]) is False
    assert tracker.update(features[1]) is True
    assert tracker.transect_id == 2
    assert tracker.update(None) is True
    assert tracker.update(None) is False


def test_parse_transects_skips_non_linestring(caplog):
    doc = {
        "type": "FeatureCollection",
        "features": [
            {"type": "Feature", "properties": {"transect_id": 1, "vertex_id": 1},
             "geometry": {"type": "Point", "coordinates": [71.0, 21.0]}},
            {"type": "Feature", "properties": {"transect_id": 2, "vertex_id": 2},
             "geometry": {"type": "LineString", "coordinates": [[71.0, 21.0], [71.1, 21.1]]}},
            {"type": "Feature", "properties": {"transect_id": 3, "vertex_id": 3}, "geometry": None},
        ],
    }
    coll = parse_transects(doc)
    assert [f.transect_id for f in coll.features] == [2]
    assert "skip feature" in caplog.text
