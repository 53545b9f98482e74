# backend/streamviz/schemas/elevation.py
from pydantic import BaseModel, field_serializer
from typing import Optional, List
import math

# CSV の数値列（loader へ渡す型指定）
TRANSECT_NUMERIC_FIELDS = {"transect_id": int, "vertex_index": int, "elevation": float, "dam": float}
STREAM_NUMERIC_FIELDS = {"vertex_id": int, "elevation": float, "elevation_normalized_m": float}


def _as_int(value) -> Optional[int]:
    if value is None or value == "":
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return int(value)


def _as_float(value) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)


def _nan_to_none(value: Optional[float]) -> Optional[float]:
    # NaN / inf は JSON に出せないので null
    if value is None or not math.isfinite(value):
        return None
    return value


def is_finite(value: Optional[float]) -> bool:
    return value is not None and math.isfinite(value)


class TransectPoint(BaseModel):
    transect_id: Optional[int] = None
    vertex_index: Optional[int] = None
    elevation: Optional[float] = math.nan
    dam: Optional[float] = None

    @classmethod
    def from_record(cls, rec: dict) -> "TransectPoint":
        elevation = _as_float(rec.get("elevation"))
        dam = _as_float(rec.get("dam"))
        return cls(
            transect_id=_as_int(rec.get("transect_id")),
            vertex_index=_as_int(rec.get("vertex_index")),
            elevation=math.nan if elevation is None else elevation,
            # dam 列があっても空欄なら未設定扱い
            dam=dam if is_finite(dam) else None,
        )

    @property
    def width_m(self) -> float:
        # 横断方向の頂点間隔は 2 m 固定
        if self.vertex_index is None:
            return math.nan
        return self.vertex_index * 2.0

    @field_serializer("elevation", "dam")
    def serialize_float(self, v: Optional[float]):
        return _nan_to_none(v)


class StreamVertex(BaseModel):
    vertex_id: Optional[int] = None
    elevation: Optional[float] = None
    elevation_normalized_m: Optional[float] = None

    @classmethod
    def from_record(cls, rec: dict) -> "StreamVertex":
        return cls(
            vertex_id=_as_int(rec.get("vertex_id")),
            elevation=_as_float(rec.get("elevation")),
            elevation_normalized_m=_as_float(rec.get("elevation_normalized_m")),
        )

    @field_serializer("elevation", "elevation_normalized_m")
    def serialize_float(self, v: Optional[float]):
        return _nan_to_none(v)


class TransectPointsOut(BaseModel):
    data: List[TransectPoint]


class StreamVerticesOut(BaseModel):
    data: List[StreamVertex]
