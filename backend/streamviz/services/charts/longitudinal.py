# backend/streamviz/services/charts/longitudinal.py
from typing import List, Optional, Tuple

from streamviz.schemas.elevation import StreamVertex, is_finite
from streamviz.services.charts.base import ProfileChart, Shape
from streamviz.services.charts.scale import LinearScale
from streamviz.services.charts.svg import GROUND_COLOR, Circle, Margin, Path, area_path

HIGHLIGHT_COLOR = "#f59e0b"

Y_DOMAIN = (-15.0, 7.5)
X_GRID_DIVISIONS = 6
# 河道中心線の頂点間隔 [m]
VERTEX_SPACING_M = 10


class LongitudinalProfile(ProfileChart[StreamVertex]):
    """
    縦断面（河道中心線の標高）。active_id は地図でホバー中の vertex_id。
    x 軸は vertex_id の min/max から決める。y 軸は固定。
    elevation_normalized_m が 1 点でも有効ならそちらを使う。
    """

    title = "Longitudinal Profile"
    width = 1000
    height = 200
    margin = Margin(top=24, right=12, bottom=26, left=52)
    y_domain = Y_DOMAIN
    x_label = "length_m"
    x_label_inset = 2

    using_normalized = False
    area_d = ""
    _x_range: Tuple[float, float] = (0.0, 1.0)

    def prepare(self, rows: List[StreamVertex]) -> List[StreamVertex]:
        return sorted(rows, key=lambda v: (v.vertex_id is None, v.vertex_id or 0))

    def recompute(self) -> None:
        self.using_normalized = any(is_finite(v.elevation_normalized_m) for v in self.data)
        ids = [v.vertex_id for v in self.data if v.vertex_id is not None]
        self._x_range = (min(ids), max(ids)) if ids else (0.0, 1.0)
        xs, ys = self.x_scale, self.y_scale
        pts = [(xs(v.vertex_id), ys(self.y_value(v))) for v in self.data if v.vertex_id is not None]
        self.area_d = area_path(pts, ys(Y_DOMAIN[0]))

    def y_value(self, v: StreamVertex) -> float:
        val = v.elevation_normalized_m if self.using_normalized else v.elevation
        return float("nan") if val is None else val

    def y_label(self) -> str:
        return "elevation_normalized_m" if self.using_normalized else "elevation"

    def x_domain(self):
        return self._x_range

    def x_grid(self) -> List[float]:
        return LinearScale(self._x_range, (0, 1)).ticks_count(X_GRID_DIVISIONS)

    def x_ticks(self) -> List[float]:
        return [float(round(v)) for v in self.x_grid()]

    def x_tick_label(self, v: float) -> str:
        return str(round(v * VERTEX_SPACING_M))

    def active_vertex(self) -> Optional[StreamVertex]:
        if self.active_id is None:
            return None
        for v in self.data:
            if v.vertex_id == self.active_id:
                return v
        return None

    def series(self) -> List[Shape]:
        xs, ys = self.x_scale, self.y_scale
        shapes: List[Shape] = [Path(self.area_d, fill=GROUND_COLOR, stroke=GROUND_COLOR, stroke_width=1.5)]
        shapes += [
            Circle(xs(v.vertex_id), ys(self.y_value(v)), 0.5, fill="#ffffff", stroke="#000000", stroke_width=0.5)
            for v in self.data
            if v.vertex_id is not None
        ]
        found = self.active_vertex()
        if found is not None:
            shapes.append(Circle(xs(found.vertex_id), ys(self.y_value(found)), 3, fill=HIGHLIGHT_COLOR,
                                 stroke="#000000", stroke_width=0.5, id="active-vertex"))
        return shapes
