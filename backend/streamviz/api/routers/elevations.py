from fastapi import APIRouter, Depends

from streamviz.config import Settings, get_settings
from streamviz.schemas.elevation import StreamVerticesOut, TransectPointsOut
from streamviz.services.elevation.reader import (
    load_stream_vertices,
    load_transect_points,
    parse_id_param,
)

router = APIRouter()


@router.get("/transect-elevations", response_model=TransectPointsOut)
def transect_elevations(transect_id: str | None = None, settings: Settings = Depends(get_settings)):
    """
    横断線ごとの標高（transect_elevations_with_dam.csv）を返す。
    - transect_id が指定されれば絞り込み（一致なしは空配列）
    - 読み込み失敗は 500 {"error": ...}（main.py のハンドラ）
    """
    points = load_transect_points(settings, parse_id_param(transect_id))
    return TransectPointsOut(data=points)


@router.get("/stream-elevations", response_model=StreamVerticesOut)
def stream_elevations(settings: Settings = Depends(get_settings)):
    return StreamVerticesOut(data=load_stream_vertices(settings))
