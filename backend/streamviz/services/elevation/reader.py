# backend/streamviz/services/elevation/reader.py
from typing import List, Optional

from streamviz.config import Settings
from streamviz.schemas.elevation import (
    STREAM_NUMERIC_FIELDS,
    TRANSECT_NUMERIC_FIELDS,
    StreamVertex,
    TransectPoint,
)
from streamviz.services.csv.loader import leading_int, read_csv_file

# 数値として解釈できない ID（どの行にも一致しない）
NO_MATCH = object()


def parse_id_param(raw: Optional[str]):
    """
    クエリ文字列の ID を緩く解釈する。
    - 未指定 / 空文字 → None（絞り込みなし）
    - 先頭の整数部を採用（"7abc" → 7）
    - 整数部が無い → NO_MATCH（空配列を返すためのマーカー）
    """
    if raw is None or raw == "":
        return None
    value = leading_int(raw)
    return NO_MATCH if value is None else value


def load_transect_points(settings: Settings, transect_id=None) -> List[TransectPoint]:
    # 毎リクエストでファイルを読み直す（キャッシュなし）
    rows = read_csv_file(settings.transect_elevations_path, TRANSECT_NUMERIC_FIELDS)
    points = [TransectPoint.from_record(r) for r in rows]
    if transect_id is NO_MATCH:
        return []
    if transect_id is not None:
        points = [p for p in points if p.transect_id == transect_id]
    return points


def load_stream_vertices(settings: Settings) -> List[StreamVertex]:
    rows = read_csv_file(settings.stream_elevations_path, STREAM_NUMERIC_FIELDS)
    return [StreamVertex.from_record(r) for r in rows]
