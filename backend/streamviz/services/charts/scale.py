# backend/streamviz/services/charts/scale.py
from typing import List, Tuple


class LinearScale:
    """
    値域 domain=(d0, d1) → 画素 range=(r0, r1) のアフィン変換。
    - d0 == d1 のときは range の中点を返す（ゼロ除算回避）
    - SVG の y 軸は range を (下端, 上端) の逆順で渡す
    """

    def __init__(self, domain: Tuple[float, float], range: Tuple[float, float]):
        self.d0, self.d1 = float(domain[0]), float(domain[1])
        self.r0, self.r1 = float(range[0]), float(range[1])

    @property
    def degenerate(self) -> bool:
        return self.d0 == self.d1

    def __call__(self, value: float) -> float:
        if self.degenerate:
            return (self.r0 + self.r1) / 2
        return self.r0 + (value - self.d0) / (self.d1 - self.d0) * (self.r1 - self.r0)

    def ticks(self, step: float) -> List[float]:
        # d0 から d1 まで step 刻み（両端含む、小数 2 桁に丸め）
        vals: List[float] = []
        if step <= 0:
            return vals
        v = self.d0
        while v <= self.d1 + 1e-9:
            vals.append(round(v, 2))
            v += step
        return vals

    def ticks_count(self, n: int) -> List[float]:
        return [self.d0 + (self.d1 - self.d0) * i / n for i in range(n + 1)]

    def __repr__(self):
        return f"LinearScale(domain=({self.d0}, {self.d1}), range=({self.r0}, {self.r1}))"
