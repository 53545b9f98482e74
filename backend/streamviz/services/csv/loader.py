# backend/streamviz/services/csv/loader.py
import csv
import io
import logging
import math
import re
from pathlib import Path
from typing import Dict, List, Mapping, Optional

import pandas as pd

from streamviz.errors import DataSourceError

logger = logging.getLogger(__name__)

_LINE_SPLIT = re.compile(r"\r?\n")
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def leading_int(text: str) -> Optional[int]:
    """先頭の整数部だけを採用する（"7abc" → 7, "10.5" → 10, "1e3" → 1）。無ければ None。"""
    m = _LEADING_INT.match(text or "")
    return int(m.group(1)) if m else None


def _coerce(series: pd.Series, kind: type) -> pd.Series:
    # 数値化できない文字列は NaN（例外にしない）
    if kind is int:
        values = series.map(leading_int).astype(object)
        return pd.to_numeric(values, errors="coerce").astype(float)
    values = pd.to_numeric(series.astype(object), errors="coerce").astype(float)
    # inf / -inf（"1e999" など）も NaN に寄せる。JSON に出せないため
    return values.map(lambda v: v if math.isfinite(v) else math.nan)


def _to_python(value, kind):
    if isinstance(value, float) and math.isnan(value):
        return float("nan")
    if kind is int:
        return int(value)
    return float(value)


def parse_csv(text: str, numeric_fields: Mapping[str, type] | None = None) -> List[Dict]:
    """
    CSV テキストをヘッダ行キーの dict 列に変換する。
    - 空行・空白のみの行は捨てる（1 データ行 = 1 レコード、入力順を保持）
    - 空入力 / ヘッダのみは [] を返す
    - 引用符は解釈せず、カンマで素直に分割する
    - ヘッダ名が重複したら後ろの列を採用
    - numeric_fields {列名: int|float} の列だけ数値化、失敗は NaN
    - スキーマ検証はしない（欠損・NaN は呼び出し側で許容する）
    """
    numeric_fields = dict(numeric_fields or {})
    lines = [ln for ln in _LINE_SPLIT.split(text or "") if ln.strip()]
    if len(lines) < 2:
        return []

    headers = [h.strip() for h in lines[0].split(",")]
    width = len(headers)

    df = pd.read_csv(
        io.StringIO("\n".join(lines)),
        dtype=str,
        keep_default_na=False,
        skip_blank_lines=False,
        index_col=False,
        engine="python",
        quoting=csv.QUOTE_NONE,
        escapechar=None,
        # ヘッダより多い列は切り捨てる
        on_bad_lines=lambda fields: fields[:width],
    )
    df.columns = headers
    df = df.loc[:, ~df.columns.duplicated(keep="last")]
    df = df.fillna("").apply(lambda col: col.str.strip())

    kinds: Dict[str, type] = {}
    for name, kind in numeric_fields.items():
        if name in df.columns:
            df[name] = _coerce(df[name], kind)
            kinds[name] = kind

    records: List[Dict] = []
    for row in df.to_dict(orient="records"):
        rec = {}
        for key, value in row.items():
            rec[key] = _to_python(value, kinds[key]) if key in kinds else value
        records.append(rec)
    return records


def read_csv_file(path: Path, numeric_fields: Mapping[str, type] | None = None) -> List[Dict]:
    try:
        content = Path(path).read_text(encoding="utf-8")
        return parse_csv(content, numeric_fields)
    except (OSError, UnicodeDecodeError, pd.errors.ParserError) as exc:
        logger.error("failed to read %s: %s", path, exc)
        raise DataSourceError(f"Failed to read {Path(path).name}: {exc}", path=path) from exc
