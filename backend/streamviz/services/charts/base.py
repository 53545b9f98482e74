# backend/streamviz/services/charts/base.py
from typing import Generic, List, Optional, Sequence, TypeVar, Union

from streamviz.services.charts.scale import LinearScale
from streamviz.services.charts.svg import CHART_TEMPLATE, COLORS, Circle, Label, Margin, Path, Segment, fmt

Row = TypeVar("Row")
Shape = Union[Path, Circle]

Y_TICK_STEP = 2.5


class ProfileChart(Generic[Row]):
    """
    断面チャートの共通部分。
    状態は「取得済みデータ」「ハイライト中の ID」「エラー文言」のみ。
    - set_data: パスを再計算
    - set_active: ハイライト位置だけ更新
    """

    title = ""
    width = 600
    height = 300
    margin = Margin(top=12, right=12, bottom=28, left=52)
    y_domain = (0.0, 1.0)
    x_label = ""
    x_label_inset = 4

    def __init__(self, data: Optional[Sequence[Row]] = None, active_id: Optional[int] = None):
        self.data: List[Row] = []
        self.active_id = active_id
        self.error: Optional[str] = None
        if data:
            self.set_data(data)

    # --- state transitions ---
    def set_data(self, rows: Sequence[Row]) -> None:
        self.data = self.prepare(list(rows))
        self.recompute()

    def set_active(self, active_id: Optional[int]) -> None:
        self.active_id = active_id

    def set_error(self, message: str) -> None:
        self.error = message
        self.data = []
        self.recompute()

    # --- geometry ---
    @property
    def inner_w(self) -> float:
        return self.width - self.margin.left - self.margin.right

    @property
    def inner_h(self) -> float:
        return self.height - self.margin.top - self.margin.bottom

    def x_domain(self):
        raise NotImplementedError

    @property
    def x_scale(self) -> LinearScale:
        return LinearScale(self.x_domain(), (self.margin.left, self.margin.left + self.inner_w))

    @property
    def y_scale(self) -> LinearScale:
        # SVG は下向きが +y なので range を反転
        return LinearScale(self.y_domain, (self.margin.top + self.inner_h, self.margin.top))

    def y_ticks(self) -> List[float]:
        return LinearScale(self.y_domain, (0, 1)).ticks(Y_TICK_STEP)

    # --- hooks ---
    def prepare(self, rows: List[Row]) -> List[Row]:
        return rows

    def recompute(self) -> None:
        pass

    def x_ticks(self) -> List[float]:
        raise NotImplementedError

    def x_grid(self) -> List[float]:
        return self.x_ticks()

    def x_tick_label(self, v: float) -> str:
        return fmt(v)

    def y_label(self) -> str:
        return "elevation"

    def series(self) -> List[Shape]:
        raise NotImplementedError

    # --- rendering ---
    def _frame(self) -> dict:
        m, xs, ys = self.margin, self.x_scale, self.y_scale
        bottom = m.top + self.inner_h
        right = m.left + self.inner_w
        x_ticks, y_ticks = self.x_ticks(), self.y_ticks()

        grid = [Segment(xs(v), m.top, xs(v), bottom) for v in self.x_grid()]
        grid += [Segment(m.left, ys(v), right, ys(v)) for v in y_ticks]

        axes = [Segment(m.left, bottom, right, bottom), Segment(m.left, m.top, m.left, bottom)]
        axes += [Segment(xs(v), bottom, xs(v), bottom + 4) for v in x_ticks]
        axes += [Segment(m.left - 4, ys(v), m.left, ys(v)) for v in y_ticks]

        tick_labels = [Label(xs(v), bottom + 14, self.x_tick_label(v)) for v in x_ticks]
        tick_labels += [Label(m.left - 6, ys(v) + 3, f"{v:.1f}", anchor="end") for v in y_ticks]

        return {
            "title": Label(right - 6, m.top + 16, self.title, anchor="end"),
            "grid": grid,
            "axes": axes,
            "tick_labels": tick_labels,
            "x_label": Label(m.left + self.inner_w / 2, self.height - self.x_label_inset, self.x_label),
            "y_label": Label(12, m.top + self.inner_h / 2, self.y_label()),
        }

    def render(self) -> str:
        error = None
        if self.error:
            error = Label(self.margin.left + 6, self.margin.top + 16, self.error)
        return CHART_TEMPLATE.render(
            width=self.width,
            height=self.height,
            colors=COLORS,
            series=self.series(),
            error=error,
            **self._frame(),
        )
