# backend/streamviz/services/geo/locator.py
from __future__ import annotations
from dataclasses import dataclass
from math import inf
from typing import Iterable, Optional

from streamviz.schemas.transect import TransectFeature
from streamviz.services.geo.distance import haversine_m


@dataclass(frozen=True)
class NearestTransect:
    feature: TransectFeature
    distance_m: float


def distance_to_transect_m(lat: float, lon: float, feature: TransectFeature) -> float:
    """横断線の各頂点までの最短距離。頂点が無ければ inf。"""
    best = inf
    for lon_v, lat_v in feature.geometry.coordinates:  # GeoJSON: [lon, lat]
        d = haversine_m(lat, lon, lat_v, lon_v)
        if d < best:
            best = d
    return best


def find_nearest_transect(lat: float, lon: float, features: Iterable[TransectFeature]) -> Optional[NearestTransect]:
    """
    マウス位置 (lat, lon) に最も近い横断線を返す。無ければ None。
    - 全横断線 × 全頂点の総当たり（空間インデックスなし、横断線数が少ない前提）
    - 距離が完全に等しい場合は先に出てきた横断線を採用（厳密な < 比較）
    """
    closest: Optional[TransectFeature] = None
    best = inf
    for feature in features:
        local = distance_to_transect_m(lat, lon, feature)
        if local < best:
            best = local
            closest = feature
    if closest is None:
        return None
    return NearestTransect(feature=closest, distance_m=best)


class HoverTracker:
    """直前にホバーしていた横断線を覚え、変化したときだけ True を返す。"""

    def __init__(self, transect_id: Optional[int] = None):
        self.transect_id = transect_id

    def update(self, feature: Optional[TransectFeature]) -> bool:
        new_id = feature.transect_id if feature else None
        if new_id == self.transect_id:
            return False
        self.transect_id = new_id
        return True
