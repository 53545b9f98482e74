# backend/streamviz/services/charts/svg.py
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from jinja2 import Environment

GRID_COLOR = "#e5e7eb"
AXIS_COLOR = "#9ca3af"
LABEL_COLOR = "#374151"
TITLE_COLOR = "#111827"
ERROR_COLOR = "#dc2626"
GROUND_COLOR = "#8b5e34"


@dataclass(frozen=True)
class Margin:
    top: float
    right: float
    bottom: float
    left: float


@dataclass(frozen=True)
class Segment:
    x1: float
    y1: float
    x2: float
    y2: float


@dataclass(frozen=True)
class Label:
    x: float
    y: float
    text: str
    anchor: str = "middle"


@dataclass(frozen=True)
class Path:
    d: str
    fill: str
    stroke: str
    stroke_width: float
    kind: str = "path"


@dataclass(frozen=True)
class Circle:
    cx: float
    cy: float
    r: float
    fill: str
    stroke: str
    stroke_width: float
    id: Optional[str] = None
    kind: str = "circle"


def fmt(v: float) -> str:
    s = f"{float(v):.2f}".rstrip("0").rstrip(".")
    return "0" if s in ("-0", "") else s


def line_path(points: Iterable[Tuple[float, float]]) -> str:
    """[(x, y), ...] → "M x y L x y ..."（空なら ""）"""
    cmds = [f"{'M' if i == 0 else 'L'} {fmt(x)} {fmt(y)}" for i, (x, y) in enumerate(points)]
    return " ".join(cmds)


def area_path(points: List[Tuple[float, float]], base_y: float) -> str:
    # 折れ線を基準線まで下ろして閉じる
    if not points:
        return ""
    first_x, last_x = points[0][0], points[-1][0]
    return " ".join([line_path(points), f"L {fmt(last_x)} {fmt(base_y)}", f"L {fmt(first_x)} {fmt(base_y)}", "Z"])


_env = Environment(autoescape=True, trim_blocks=True, lstrip_blocks=True)
_env.filters["num"] = fmt

# 枠・目盛・ラベル・系列・エラー文言の順に重ねる
CHART_TEMPLATE = _env.from_string("""\
<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 {{ width }} {{ height }}" preserveAspectRatio="none">
<text x="{{ title.x|num }}" y="{{ title.y|num }}" text-anchor="end" font-size="16" font-weight="700" fill="{{ colors.title }}">{{ title.text }}</text>
<g stroke="{{ colors.grid }}" stroke-width="1">
{% for s in grid %}
<line x1="{{ s.x1|num }}" y1="{{ s.y1|num }}" x2="{{ s.x2|num }}" y2="{{ s.y2|num }}"/>
{% endfor %}
</g>
<g stroke="{{ colors.axis }}" stroke-width="1">
{% for s in axes %}
<line x1="{{ s.x1|num }}" y1="{{ s.y1|num }}" x2="{{ s.x2|num }}" y2="{{ s.y2|num }}"/>
{% endfor %}
</g>
<g fill="{{ colors.label }}" font-size="10">
{% for t in tick_labels %}
<text x="{{ t.x|num }}" y="{{ t.y|num }}" text-anchor="{{ t.anchor }}">{{ t.text }}</text>
{% endfor %}
</g>
{% for s in series %}
{% if s.kind == "path" and s.d %}
<path d="{{ s.d }}" fill="{{ s.fill }}" stroke="{{ s.stroke }}" stroke-width="{{ s.stroke_width|num }}"/>
{% elif s.kind == "circle" %}
<circle{% if s.id %} id="{{ s.id }}"{% endif %} cx="{{ s.cx|num }}" cy="{{ s.cy|num }}" r="{{ s.r|num }}" fill="{{ s.fill }}" stroke="{{ s.stroke }}" stroke-width="{{ s.stroke_width|num }}"/>
{% endif %}
{% endfor %}
<text x="{{ x_label.x|num }}" y="{{ x_label.y|num }}" text-anchor="middle" font-size="10" fill="{{ colors.label }}">{{ x_label.text }}</text>
<text x="{{ y_label.x|num }}" y="{{ y_label.y|num }}" text-anchor="middle" font-size="10" fill="{{ colors.label }}" transform="rotate(-90 {{ y_label.x|num }} {{ y_label.y|num }})">{{ y_label.text }}</text>
{% if error %}
<text x="{{ error.x|num }}" y="{{ error.y|num }}" font-size="12" fill="{{ colors.error }}">{{ error.text }}</text>
{% endif %}
</svg>""")

COLORS = {
    "title": TITLE_COLOR,
    "grid": GRID_COLOR,
    "axis": AXIS_COLOR,
    "label": LABEL_COLOR,
    "error": ERROR_COLOR,
}
