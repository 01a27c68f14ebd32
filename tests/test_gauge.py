import pytest

from auditdeck.audit.gauge import (
    GAUGE_ARC_LENGTH,
    gauge_color_class,
    gauge_dash_array,
    gauge_dash_offset,
    score_band,
    score_bar,
    score_color,
    score_text_class,
)


@pytest.mark.parametrize(
    "score,band",
    [(100, "success"), (80, "success"), (79.9, "warning"), (50, "warning"), (49, "critical"), (0, "critical")],
)
def test_score_band(score, band):
    assert score_band(score) == band


def test_dash_array():
    assert gauge_dash_array() == "251.33 251.33"


def test_dash_offset():
    assert gauge_dash_offset(0) == pytest.approx(GAUGE_ARC_LENGTH)
    assert gauge_dash_offset(100) == pytest.approx(0)
    assert gauge_dash_offset(50) == pytest.approx(125.665)


def test_dash_offset_clamps():
    assert gauge_dash_offset(150) == pytest.approx(0)
    assert gauge_dash_offset(-10) == pytest.approx(GAUGE_ARC_LENGTH)


def test_classes():
    assert gauge_color_class(85) == "gauge-stroke gauge-stroke-success"
    assert score_text_class(60) == "gauge-score-value score-warning"
    assert score_color(10) == "red"


def test_score_bar():
    assert score_bar(70, width=10) == "███████░░░"
    assert score_bar(0, width=4) == "░░░░"
    assert len(score_bar(55)) == 20
