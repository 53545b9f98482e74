# backend/streamviz/services/map/view.py
from __future__ import annotations
import json
import logging
from dataclasses import dataclass
from typing import Optional

import folium
from folium import Element

from streamviz.config import Settings
from streamviz.schemas.transect import BaseMap, TransectCollection

logger = logging.getLogger(__name__)

BASE_TRANSECT_STYLE = {"color": "#3b82f6", "weight": 2, "opacity": 0.7}
HOVER_TRANSECT_STYLE = {"color": "#ef4444", "weight": 4, "opacity": 1}


@dataclass(frozen=True)
class TileSource:
    name: str
    url: str
    attribution: str
    max_zoom: int


OSM_TILES = TileSource(
    name="OpenStreetMap",
    url="https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png",
    attribution='&copy; <a href="https://www.openstreetmap.org/copyright">OpenStreetMap</a> contributors',
    max_zoom=19,
)

ESRI_IMAGERY_TILES = TileSource(
    name="Esri World Imagery",
    url="https://server.arcgisonline.com/ArcGIS/rest/services/World_Imagery/MapServer/tile/{z}/{y}/{x}",
    attribution=(
        '&copy; <a href="https://www.arcgis.com/">Esri</a> &mdash; Source: Esri, i-cubed, USDA, USGS, AEX, '
        "GeoEye, Getmapping, Aerogrid, IGN, IGP, UPR-EGP, and the GIS User Community"
    ),
    max_zoom=20,
)


def mapbox_tiles(token: str) -> TileSource:
    return TileSource(
        name="Mapbox Satellite",
        url=(
            "https://api.mapbox.com/styles/v1/mapbox/satellite-streets-v12/tiles/256/{z}/{x}/{y}"
            f"?access_token={token}"
        ),
        attribution=(
            '&copy; <a href="https://www.mapbox.com/">Mapbox</a> '
            '&copy; <a href="https://www.openstreetmap.org/">OpenStreetMap</a>'
        ),
        max_zoom=22,
    )


def select_tiles(base_map: BaseMap, mapbox_token: Optional[str]) -> TileSource:
    """street → OSM / satellite → Mapbox（トークンあり）or Esri（なし）"""
    if base_map != "satellite":
        return OSM_TILES
    if mapbox_token:
        return mapbox_tiles(mapbox_token)
    logger.warning("MAPBOX_TOKEN not set - falling back to Esri World Imagery")
    return ESRI_IMAGERY_TILES


# mousemove → 最近傍横断線 API → ハイライト更新 → 親ページへ通知
# 同じ transect_id が続く間は何もしない。古い問い合わせは AbortController で破棄。
_HOVER_SCRIPT = """
<script>
window.addEventListener("load", function () {
  var map = window[%(map_name)s];
  var nearestUrl = %(nearest_url)s;
  var hoverStyle = %(hover_style)s;
  var enabled = %(enabled)s;
  var hoveredId = null;
  var hoverLayer = null;
  var pending = null;
  if (!map || !enabled) { return; }

  map.on("mousemove", function (e) {
    if (pending) { pending.abort(); }
    var ctrl = new AbortController();
    pending = ctrl;
    var url = nearestUrl + "?lat=" + e.latlng.lat + "&lon=" + e.latlng.lng;
    if (hoveredId !== null) { url += "&current=" + hoveredId; }
    fetch(url, { signal: ctrl.signal })
      .then(function (res) { return res.json(); })
      .then(function (body) {
        if (ctrl.signal.aborted) { return; }
        var newId = body.transect_id;
        if (!body.changed || newId === hoveredId) { return; }
        hoveredId = newId;
        if (hoverLayer) { map.removeLayer(hoverLayer); hoverLayer = null; }
        if (body.feature) {
          hoverLayer = L.geoJSON(body.feature, { style: function () { return hoverStyle; } }).addTo(map);
        }
        if (window.parent && window.parent !== window) {
          window.parent.postMessage(
            { type: "active-transect", transect_id: newId, vertex_id: body.vertex_id }, "*");
        }
      })
      .catch(function (err) {
        if (err.name !== "AbortError") { console.error("nearest transect lookup failed", err); }
      });
  });
});
</script>
"""


def build_map(
    settings: Settings,
    base_map: BaseMap = "street",
    show_transects: bool = True,
    transects: Optional[TransectCollection] = None,
    nearest_url: str = "/api/transects/nearest",
) -> folium.Map:
    """
    ベース地図＋横断線オーバーレイ（青）を作る。
    ホバー判定はサーバ側の最近傍 API に委譲し、ハイライト（赤）はブラウザ側で重ねる。
    """
    m = folium.Map(
        location=list(settings.map_center),
        zoom_start=settings.map_zoom,
        max_zoom=settings.map_max_zoom,
        tiles=None,
    )
    tiles = select_tiles(base_map, settings.mapbox_token)
    folium.TileLayer(
        tiles=tiles.url,
        attr=tiles.attribution,
        name=tiles.name,
        max_zoom=tiles.max_zoom,
    ).add_to(m)

    if transects is not None and transects.features and show_transects:
        folium.GeoJson(
            transects.model_dump(),
            name="transects",
            style_function=lambda _feature: dict(BASE_TRANSECT_STYLE),
        ).add_to(m)

    m.get_root().html.add_child(Element(_HOVER_SCRIPT % {
        "map_name": json.dumps(m.get_name()),
        "nearest_url": json.dumps(nearest_url),
        "hover_style": json.dumps(HOVER_TRANSECT_STYLE),
        "enabled": json.dumps(bool(show_transects and transects is not None)),
    }))
    return m


def render_map_html(m: folium.Map) -> str:
    return m.get_root().render()
