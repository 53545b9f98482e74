from pydantic import BaseModel
from pathlib import Path
from typing import Optional, Tuple
import os


def _default_data_dir() -> Path:
    # 1) STREAMVIZ_DATA_DIR が指定されていれば優先
    # 2) コンテナ内の /app/data
    # 3) それ以外は <repo root>/data
    env_dir = os.getenv("STREAMVIZ_DATA_DIR")
    if env_dir:
        return Path(env_dir)
    container_data = Path("/app/data")
    if container_data.exists():
        return container_data
    # backend/streamviz/config.py → ../../.. = <repo root>
    repo_root = Path(__file__).resolve().parents[2]
    return repo_root / "data"


class Settings(BaseModel):
    data_dir: Path
    transect_elevations_file: str = "transect_elevations_with_dam.csv"
    stream_elevations_file: str = "stream_elevations.csv"
    transects_file: str = "stream-transects-40m.geojson"
    mapbox_token: Optional[str] = None
    map_center: Tuple[float, float] = (20.94, 71.19)  # (lat, lon)
    map_zoom: int = 13
    map_max_zoom: int = 22

    @property
    def transect_elevations_path(self) -> Path:
        return self.data_dir / self.transect_elevations_file

    @property
    def stream_elevations_path(self) -> Path:
        return self.data_dir / self.stream_elevations_file

    @property
    def transects_path(self) -> Path:
        return self.data_dir / self.transects_file


def get_settings() -> Settings:
    token = os.getenv("MAPBOX_TOKEN") or None
    return Settings(data_dir=_default_data_dir(), mapbox_token=token)


def log_level() -> str:
    return os.getenv("STREAMVIZ_LOG_LEVEL", "INFO").upper()
