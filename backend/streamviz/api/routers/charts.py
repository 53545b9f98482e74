from fastapi import APIRouter, Depends, Response

from streamviz.config import Settings, get_settings
from streamviz.errors import DataSourceError
from streamviz.services.charts.lateral import LateralProfile
from streamviz.services.charts.longitudinal import LongitudinalProfile
from streamviz.services.elevation.reader import (
    NO_MATCH,
    load_stream_vertices,
    load_transect_points,
    parse_id_param,
)

router = APIRouter()

SVG_MEDIA_TYPE = "image/svg+xml"


def _svg(content: str, status_code: int = 200) -> Response:
    return Response(content=content, media_type=SVG_MEDIA_TYPE, status_code=status_code,
                    headers={"Cache-Control": "no-store"})


@router.get("/lateral.svg")
def lateral_chart(transect_id: str | None = None, settings: Settings = Depends(get_settings)):
    chart = LateralProfile()
    active = parse_id_param(transect_id)
    # 未選択（None）は空チャート
    if active is None or active is NO_MATCH:
        return _svg(chart.render())
    chart.set_active(active)
    try:
        chart.set_data(load_transect_points(settings, active))
    except DataSourceError as exc:
        # エラー文言をチャート内に表示
        chart.set_error(exc.message)
        return _svg(chart.render(), status_code=500)
    return _svg(chart.render())


@router.get("/longitudinal.svg")
def longitudinal_chart(vertex_id: str | None = None, settings: Settings = Depends(get_settings)):
    active = parse_id_param(vertex_id)
    chart = LongitudinalProfile(active_id=None if active is NO_MATCH else active)
    try:
        chart.set_data(load_stream_vertices(settings))
    except DataSourceError as exc:
        chart.set_error(exc.message)
        return _svg(chart.render(), status_code=500)
    return _svg(chart.render())
