import json

import pytest
from fastapi.testclient import TestClient

from streamviz.config import Settings, get_settings
from streamviz.main import app

TRANSECT_CSV = """transect_id,vertex_index,elevation,dam
1,2,-4.0,
1,0,10.5,
1,1,9.0,-2.5
2,0,3.0,
2,1,abc,
"""

STREAM_CSV = """vertex_id,elevation,elevation_normalized_m
0,412.6,-2.0
1,412.5,-2.5
2,412.4,
3,412.3,-3.0
"""


def make_feature(transect_id, vertex_id, coords):
    return {
        "type": "Feature",
        "properties": {
            "transect_id": transect_id,
            "vertex_id": vertex_id,
            "stream_vertex_lat": coords[len(coords) // 2][1],
            "stream_vertex_lon": coords[len(coords) // 2][0],
            "transect_length_m": 40.0,
            "spacing_m": 2.0,
            "num_vertices": len(coords),
        },
        "geometry": {"type": "LineString", "coordinates": coords},
    }


TRANSECTS = {
    "type": "FeatureCollection",
    "features": [
        make_feature(1, 1, [[71.1880, 20.9398], [71.1880, 20.9400], [71.1880, 20.9402]]),
        make_feature(2, 2, [[71.1890, 20.9398], [71.1890, 20.9400], [71.1890, 20.9402]]),
        make_feature(3, 3, [[71.1900, 20.9398], [71.1900, 20.9400], [71.1900, 20.9402]]),
    ],
}


@pytest.fixture
def data_dir(tmp_path):
    (tmp_path / "transect_elevations_with_dam.csv").write_text(TRANSECT_CSV, encoding="utf-8")
    (tmp_path / "stream_elevations.csv").write_text(STREAM_CSV, encoding="utf-8")
    (tmp_path / "stream-transects-40m.geojson").write_text(json.dumps(TRANSECTS), encoding="utf-8")
    return tmp_path


@pytest.fixture
def settings(data_dir):
    return Settings(data_dir=data_dir)


@pytest.fixture
def client(settings):
    app.dependency_overrides[get_settings] = lambda: settings
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
