# backend/streamviz/schemas/transect.py
from pydantic import BaseModel
from typing import Optional, List, Literal, Tuple

BaseMap = Literal["street", "satellite"]

LonLat = Tuple[float, float]


class LineStringGeometry(BaseModel):
    type: Literal["LineString"] = "LineString"
    coordinates: List[LonLat]  # GeoJSON 順序 [lon, lat]


class TransectProperties(BaseModel):
    transect_id: int
    vertex_id: int
    stream_vertex_lat: Optional[float] = None
    stream_vertex_lon: Optional[float] = None
    transect_length_m: Optional[float] = None
    spacing_m: Optional[float] = None
    num_vertices: Optional[int] = None


class TransectFeature(BaseModel):
    type: Literal["Feature"] = "Feature"
    properties: TransectProperties
    geometry: LineStringGeometry

    model_config = {"frozen": True}

    @property
    def transect_id(self) -> int:
        return self.properties.transect_id


class TransectCollection(BaseModel):
    type: Literal["FeatureCollection"] = "FeatureCollection"
    features: List[TransectFeature] = []


class NearestTransectOut(BaseModel):
    transect_id: Optional[int] = None
    vertex_id: Optional[int] = None
    distance_m: Optional[float] = None
    feature: Optional[TransectFeature] = None
