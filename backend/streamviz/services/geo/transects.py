# backend/streamviz/services/geo/transects.py
import json
import logging
from pathlib import Path

from pydantic import ValidationError
from shapely.geometry import shape
from shapely.errors import GeometryTypeError

from streamviz.config import Settings
from streamviz.errors import DataSourceError
from streamviz.schemas.transect import TransectCollection, TransectFeature

logger = logging.getLogger(__name__)


def parse_transects(doc: dict) -> TransectCollection:
    """
    GeoJSON FeatureCollection から横断線（LineString）だけを取り出す。
    それ以外の形状・壊れた Feature は警告してスキップ。
    """
    if not isinstance(doc, dict) or doc.get("type") != "FeatureCollection":
        raise DataSourceError("Transect file is not a GeoJSON FeatureCollection")

    features = []
    for i, feat in enumerate(doc.get("features") or []):
        geom_json = (feat or {}).get("geometry") or {}
        try:
            geom = shape(geom_json)  # EPSG:4326
        except (GeometryTypeError, ValueError, TypeError, KeyError, AttributeError) as exc:
            logger.warning("skip feature #%d: invalid geometry (%s)", i, exc)
            continue
        if geom.geom_type != "LineString":
            logger.warning("skip feature #%d: geometry type %s", i, geom.geom_type)
            continue
        try:
            features.append(TransectFeature(
                properties=feat.get("properties") or {},
                geometry={"type": "LineString", "coordinates": [(x, y) for x, y, *_ in geom.coords]},
            ))
        except ValidationError as exc:
            logger.warning("skip feature #%d: %s", i, exc.errors()[0].get("msg"))
    return TransectCollection(features=features)


def load_transects(settings: Settings) -> TransectCollection:
    path: Path = settings.transects_path
    try:
        doc = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        logger.error("failed to read %s: %s", path, exc)
        raise DataSourceError(f"Failed to read {path.name}: {exc}", path=path) from exc
    return parse_transects(doc)
