# backend/streamviz/services/charts/lateral.py
from typing import List

from streamviz.schemas.elevation import TransectPoint
from streamviz.services.charts.base import ProfileChart
from streamviz.services.charts.scale import LinearScale
from streamviz.services.charts.svg import GROUND_COLOR, Margin, Path, area_path, line_path

DAM_COLOR = "#ef4444"

# 横断方向 0..20 頂点 × 2 m
X_DOMAIN = (0.0, 40.0)
Y_DOMAIN = (-20.0, 20.0)
X_GRID_DIVISIONS = 8


class LateralProfile(ProfileChart[TransectPoint]):
    """横断面（1 本の横断線の標高）。active_id は表示中の transect_id。"""

    title = "Lateral Profile"
    width = 600
    height = 300
    margin = Margin(top=12, right=12, bottom=28, left=52)
    y_domain = Y_DOMAIN
    x_label = "width_m"
    x_label_inset = 4

    area_d = ""
    dam_d = ""

    def x_domain(self):
        return X_DOMAIN

    def x_ticks(self) -> List[float]:
        return LinearScale(X_DOMAIN, (0, 1)).ticks_count(X_GRID_DIVISIONS)

    def prepare(self, rows: List[TransectPoint]) -> List[TransectPoint]:
        # vertex_index 順に左→右
        return sorted(rows, key=lambda p: (p.vertex_index is None, p.vertex_index or 0))

    def recompute(self) -> None:
        xs, ys = self.x_scale, self.y_scale
        ground = [(xs(p.width_m), ys(p.elevation)) for p in self.data]
        self.area_d = area_path(ground, ys(Y_DOMAIN[0]))
        # dam が無い点は地盤高で代用
        self.dam_d = line_path(
            (xs(p.width_m), ys(p.dam if p.dam is not None else p.elevation)) for p in self.data
        )

    def series(self) -> List[Path]:
        # dam を先に（下）、地盤を後に（上）
        return [
            Path(self.dam_d, fill="none", stroke=DAM_COLOR, stroke_width=2),
            Path(self.area_d, fill=GROUND_COLOR, stroke=GROUND_COLOR, stroke_width=1.5),
        ]
