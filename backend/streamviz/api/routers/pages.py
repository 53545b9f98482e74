import logging

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse
from folium import Element
from jinja2 import Template

from streamviz.config import Settings, get_settings
from streamviz.errors import DataSourceError
from streamviz.schemas.transect import BaseMap
from streamviz.services.geo.transects import load_transects
from streamviz.services.map.view import build_map, render_map_html

logger = logging.getLogger(__name__)

router = APIRouter()

# 画面: ヘッダ / 地図（iframe）/ レイヤ切替 / 横断面 / 縦断面
# 地図から postMessage で受けた ID ごとにチャート SVG を取り直す。
# リクエストごとに AbortController を持ち、新しい要求が来たら古い方を中断する。
PAGE_TEMPLATE = Template(autoescape=True, source="""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>Stream Transects Visualizer</title>
<style>
  body { margin: 0; font-family: system-ui, sans-serif; background: #f9fafb; color: #111827; }
  header { background: #fff; border-bottom: 1px solid #e5e7eb; padding: 16px 32px; }
  header h1 { margin: 0; font-size: 24px; }
  header p { margin: 4px 0 0; font-size: 14px; color: #4b5563; }
  main { padding: 24px 32px; display: flex; flex-direction: column; gap: 16px; }
  .row { display: grid; grid-template-columns: 8fr 1fr 3fr; gap: 12px; }
  .panel { background: #fff; border: 1px solid #e5e7eb; border-radius: 8px; position: relative; overflow: hidden; }
  .map { height: 50vh; } .map iframe { border: 0; width: 100%; height: 100%; }
  .layers { padding: 8px; display: flex; flex-direction: column; gap: 12px; font-size: 14px; }
  .layers a { padding: 4px 8px; border: 1px solid #d1d5db; border-radius: 4px; text-decoration: none; color: #1f2937; }
  .layers a.on { background: #dcfce7; border-color: #86efac; color: #166534; }
  .lateral { height: 50vh; } .longitudinal { height: 25vh; }
  .chart svg { width: 100%; height: 100%; }
  .chart .error { position: absolute; left: 8px; bottom: 8px; font-size: 12px; color: #dc2626; }
</style>
</head>
<body>
<header>
  <h1>Stream Transects Visualizer</h1>
  <p>Hover over the map to highlight perpendicular transects &bull; Toggle layers: OpenStreetMap/Satellite views, show/hide transects</p>
</header>
<main>
  <div class="row">
    <div class="panel map"><iframe src="{{ map_url }}" title="map"></iframe></div>
    <div class="panel layers">
      <strong>Layers</strong>
      <a href="{{ toggle_base_url }}">{{ "Street" if base_map == "street" else "Satellite" }}</a>
      <a href="{{ toggle_transects_url }}" class="{{ 'on' if show_transects else '' }}">Transects</a>
    </div>
    <div class="panel chart lateral" id="lateral" data-src="{{ lateral_url }}"></div>
  </div>
  <div class="panel chart longitudinal" id="longitudinal" data-src="{{ longitudinal_url }}"></div>
</main>
<script>
(function () {
  var controllers = {};

  function loadChart(id, query) {
    var el = document.getElementById(id);
    if (controllers[id]) { controllers[id].abort(); }
    var ctrl = new AbortController();
    controllers[id] = ctrl;
    fetch(el.dataset.src + query, { signal: ctrl.signal })
      .then(function (res) {
        return res.text();
      })
      .then(function (svg) {
        // 500 でもエラー文言入りの SVG が返る
        if (ctrl.signal.aborted) { return; }
        el.innerHTML = svg;
      })
      .catch(function (err) {
        if (err.name === "AbortError") { return; }
        el.innerHTML = '<div class="error"></div>';
        el.firstChild.textContent = err.message || "Failed to fetch";
      });
  }

  function q(name, value) { return value === null || value === undefined ? "" : "?" + name + "=" + value; }

  window.addEventListener("message", function (e) {
    if (!e.data || e.data.type !== "active-transect") { return; }
    loadChart("lateral", q("transect_id", e.data.transect_id));
    loadChart("longitudinal", q("vertex_id", e.data.vertex_id));
  });

  loadChart("lateral", "");
  loadChart("longitudinal", "");
})();
</script>
</body>
</html>
""")


def _page_query(base_map: str, show_transects: bool) -> str:
    return f"?base_map={base_map}&show_transects={'true' if show_transects else 'false'}"


@router.get("/", response_class=HTMLResponse)
def index(base_map: BaseMap = "street", show_transects: bool = True):
    other_base = "satellite" if base_map == "street" else "street"
    return PAGE_TEMPLATE.render(
        base_map=base_map,
        show_transects=show_transects,
        map_url="/map" + _page_query(base_map, show_transects),
        toggle_base_url="/" + _page_query(other_base, show_transects),
        toggle_transects_url="/" + _page_query(base_map, not show_transects),
        lateral_url="/charts/lateral.svg",
        longitudinal_url="/charts/longitudinal.svg",
    )


@router.get("/map", response_class=HTMLResponse)
def map_view(
    base_map: BaseMap = "street",
    show_transects: bool = True,
    settings: Settings = Depends(get_settings),
):
    transects = None
    error = None
    try:
        transects = load_transects(settings)
    except DataSourceError as exc:
        # 横断線なしで地図だけ出す
        error = exc.message
        logger.warning("map rendered without transects: %s", error)
    m = build_map(settings, base_map=base_map, show_transects=show_transects, transects=transects)
    if error:
        m.get_root().html.add_child(Element(
            Template('<div class="map-error" style="position:absolute;bottom:8px;left:8px;z-index:1000;'
                     'font-size:12px;color:#dc2626;background:#fff;padding:2px 6px">{{ msg }}</div>',
                     autoescape=True).render(msg=error)
        ))
    return render_map_html(m)
