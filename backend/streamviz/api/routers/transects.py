from fastapi import APIRouter, Depends, Query

from streamviz.config import Settings, get_settings
from streamviz.schemas.transect import NearestTransectOut
from streamviz.services.geo.locator import HoverTracker, find_nearest_transect
from streamviz.services.geo.transects import load_transects

router = APIRouter()


@router.get("")
@router.get("/")
def list_transects(settings: Settings = Depends(get_settings)):
    return load_transects(settings).model_dump()


@router.get("/nearest")
def nearest_transect(
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
    current: int | None = None,
    settings: Settings = Depends(get_settings),
):
    """
    マウス位置に最も近い横断線。
    current（直前にホバーしていた transect_id）を渡すと changed で変化の有無を返す。
    """
    collection = load_transects(settings)
    hit = find_nearest_transect(lat, lon, collection.features)
    changed = HoverTracker(current).update(hit.feature if hit else None)
    if hit is None:
        out = NearestTransectOut()
    else:
        props = hit.feature.properties
        out = NearestTransectOut(
            transect_id=props.transect_id,
            vertex_id=props.vertex_id,
            distance_m=hit.distance_m,
            feature=hit.feature,
        )
    return {**out.model_dump(), "changed": changed}
