import logging

from streamviz.config import Settings, get_settings
from streamviz.main import app
from streamviz.services.geo.transects import parse_transects
from streamviz.services.map.view import (
    ESRI_IMAGERY_TILES,
    OSM_TILES,
    build_map,
    render_map_html,
    select_tiles,
)

from conftest import TRANSECTS


def test_select_tiles_street_is_osm():
    assert select_tiles("street", "tok") is OSM_TILES


def test_select_tiles_satellite_with_token_uses_mapbox():
    tiles = select_tiles("satellite", "pk.secret")
    assert "api.mapbox.com" in tiles.url
    assert tiles.url.endswith("access_token=pk.secret")
    assert tiles.max_zoom == 22


def test_select_tiles_satellite_without_token_falls_back_to_esri(caplog):
    with caplog.at_level(logging.WARNING):
        assert select_tiles("satellite", None) is ESRI_IMAGERY_TILES
    assert "MAPBOX_TOKEN not set" in caplog.text


def test_build_map_with_transect_overlay(tmp_path):
    settings = Settings(data_dir=tmp_path)
    html = render_map_html(build_map(settings, transects=parse_transects(TRANSECTS)))
    assert "tile.openstreetmap.org" in html
    assert "#3b82f6" in html
    assert "/api/transects/nearest" in html
    assert "var enabled = true" in html


def test_build_map_hidden_transects(tmp_path):
    settings = Settings(data_dir=tmp_path)
    html = render_map_html(build_map(settings, show_transects=False, transects=parse_transects(TRANSECTS)))
    assert "#3b82f6" not in html
    assert "var enabled = false" in html


def test_lateral_chart_route(client):
    res = client.get("/charts/lateral.svg", params={"transect_id": 1})
    assert res.status_code == 200
    assert res.headers["content-type"].startswith("image/svg+xml")
    assert "<path" in res.text
    assert "Lateral Profile" in res.text


def test_lateral_chart_route_without_selection_is_empty(client):
    res = client.get("/charts/lateral.svg")
    assert res.status_code == 200
    assert "<path" not in res.text


def test_longitudinal_chart_route_highlights_vertex(client):
    res = client.get("/charts/longitudinal.svg", params={"vertex_id": 2})
    assert res.status_code == 200
    assert 'id="active-vertex"' in res.text
    assert ">elevation_normalized_m<" in res.text


def test_chart_route_read_failure_renders_error(tmp_path):
    from fastapi.testclient import TestClient
    app.dependency_overrides[get_settings] = lambda: Settings(data_dir=tmp_path / "missing")
    try:
        res = TestClient(app).get("/charts/longitudinal.svg")
    finally:
        app.dependency_overrides.clear()
    assert res.status_code == 500
    assert "Failed to read stream_elevations.csv" in res.text


def test_index_page(client):
    res = client.get("/", params={"base_map": "satellite", "show_transects": "false"})
    assert res.status_code == 200
    assert "Stream Transects Visualizer" in res.text
    assert 'src="/map?base_map=satellite&amp;show_transects=false"' in res.text
    assert "AbortController" in res.text


def test_map_route(client):
    res = client.get("/map")
    assert res.status_code == 200
    assert "leaflet" in res.text.lower()
    assert "#3b82f6" in res.text


def test_map_route_without_transect_file_still_renders(tmp_path):
    from fastapi.testclient import TestClient
    app.dependency_overrides[get_settings] = lambda: Settings(data_dir=tmp_path)
    try:
        res = TestClient(app).get("/map")
    finally:
        app.dependency_overrides.clear()
    assert res.status_code == 200
    assert "map-error" in res.text
