import pytest

from streamviz.services.charts.scale import LinearScale


def test_affine_mapping():
    s = LinearScale((0, 40), (52, 588))
    assert s(0) == pytest.approx(52)
    assert s(40) == pytest.approx(588)
    assert s(20) == pytest.approx(320)
    # 範囲外も線形に外挿
    assert s(-10) == pytest.approx(52 - 134)


def test_inverted_range_for_svg_y_axis():
    s = LinearScale((-20, 20), (272, 12))
    assert s(-20) == pytest.approx(272)
    assert s(20) == pytest.approx(12)
    assert s(0) == pytest.approx(142)


def test_idempotent():
    s = LinearScale((-15, 7.5), (174, 24))
    first = [s(v) for v in (-15, -3.3, 0, 7.5)]
    second = [s(v) for v in (-15, -3.3, 0, 7.5)]
    assert first == second


@pytest.mark.parametrize("value", [-1e9, 0, 5, 1e9])
def test_degenerate_domain_returns_range_midpoint(value):
    s = LinearScale((5, 5), (52, 988))
    assert s.degenerate
    assert s(value) == (52 + 988) / 2


def test_ticks_step_inclusive():
    s = LinearScale((-20, 20), (0, 1))
    ticks = s.ticks(2.5)
    assert ticks[0] == -20 and ticks[-1] == 20
    assert len(ticks) == 17
    assert LinearScale((-15, 7.5), (0, 1)).ticks(2.5)[-1] == 7.5


def test_ticks_count():
    assert LinearScale((0, 40), (0, 1)).ticks_count(8) == [0, 5, 10, 15, 20, 25, 30, 35, 40]
