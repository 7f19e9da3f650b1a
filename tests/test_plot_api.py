from __future__ import annotations

import numpy as np
import pytest

import plotattrs as pa
from plotattrs import PerSeries, PlotContext, SubplotSpec, use_context


@pytest.fixture
def active():
    ctx = PlotContext()
    with use_context(ctx):
        yield ctx


def test_plot_then_extend_builds_one_plot(active: PlotContext) -> None:
    p = pa.plot(np.sin, 0, np.pi, c="red")
    pa.plot_extend(np.cos, 0, np.pi, ls="dash")

    assert pa.current_plot() is p
    assert [s.label for s in p] == ["sin", "cos"]
    assert p[1].attributes["linestyle"] == "dash"
    assert "linecolor" not in p[1].attributes


def test_scatter_defaults_to_scatter_type(active: PlotContext) -> None:
    p = pa.scatter([1, 2], [3, 4])
    pa.scatter_extend([5, 6], [7, 8], seriestype="sticks")
    assert [s.attributes["linetype"] for s in p] == ["scatter", "sticks"]


def test_setters_update_the_current_plot(active: PlotContext) -> None:
    p = pa.plot([1, 2, 3])
    pa.set_title("Title")
    pa.set_xlabel("x")
    pa.set_ylabel("y")
    pa.set_xlims((0, 2))
    pa.set_ylims((1, 3))
    pa.set_xticks([0, 1, 2])
    pa.set_yticks([1, 3])

    assert p.attributes == {
        "title": "Title",
        "xlabel": "x",
        "ylabel": "y",
        "xlims": (0, 2),
        "ylims": (1, 3),
        "xticks": [0, 1, 2],
        "yticks": [1, 3],
    }
    assert len(p) == 1


def test_axis_helpers_expand_like_magic_arguments(active: PlotContext) -> None:
    p = pa.plot([1, 2])
    pa.xaxis("Time", (0, 10), "log10")
    pa.yaxis("flip")
    assert p.attributes == {"xlabel": "Time", "xlims": (0, 10), "xscale": "log10", "yflip": True}


def test_annotate_accumulates(active: PlotContext) -> None:
    p = pa.plot([1, 2])
    pa.annotate(0, 1, "start")
    pa.annotate((1, 2, "end"), (0.5, 1.5, "mid"))
    assert p.attributes["annotations"] == [(0, 1, "start"), (1, 2, "end"), (0.5, 1.5, "mid")]


def test_setters_work_on_subplots(active: PlotContext) -> None:
    grid = pa.subplot(np.zeros((2, 2)), n=2)
    pa.set_title("same")
    pa.subplot_extend([1, 2])

    assert isinstance(grid, SubplotSpec)
    assert all(panel.attributes["title"] == "same" for panel in grid)
    assert [len(panel) for panel in grid] == [2, 1]


def test_setter_without_plot_starts_an_empty_one(active: PlotContext) -> None:
    p = pa.set_title("empty")
    assert len(p) == 0
    assert active.current is p


def test_reset_forgets_current_plot(active: PlotContext) -> None:
    pa.plot([1])
    pa.reset()
    assert pa.current_plot() is None


def test_annotate_on_subplots_keeps_each_panels_annotations(active: PlotContext) -> None:
    grid = pa.subplot(np.zeros((2, 2)), n=2, annotations=PerSeries([(0, 0, "a")], [(1, 1, "b")]))
    pa.annotate(0.5, 0.5, "both")

    assert grid[0].attributes["annotations"] == [(0, 0, "a"), (0.5, 0.5, "both")]
    assert grid[1].attributes["annotations"] == [(1, 1, "b"), (0.5, 0.5, "both")]


@pytest.mark.parametrize(
    ("create", "extend", "linetype"),
    [
        (pa.bar, pa.bar_extend, "bar"),
        (pa.histogram, pa.histogram_extend, "hist"),
        (pa.histogram2d, pa.histogram2d_extend, "histogram2d"),
        (pa.heatmap, pa.heatmap_extend, "heatmap"),
        (pa.hline, pa.hline_extend, "hline"),
        (pa.vline, pa.vline_extend, "vline"),
        (pa.pie, pa.pie_extend, "pie"),
        (pa.ohlc, pa.ohlc_extend, "ohlc"),
        (pa.contour, pa.contour_extend, "contour"),
    ],
)
def test_series_type_shortcuts(active: PlotContext, create, extend, linetype: str) -> None:
    p = create([1.0, 2.0, 3.0])
    extend([4.0, 5.0])
    extend([6.0], t="scatter")

    assert [s.attributes["linetype"] for s in p] == [linetype, linetype, "scatter"]
    assert create.__name__ + "_extend" == extend.__name__
    assert linetype in create.__doc__


def test_shortcuts_take_the_usual_arguments(active: PlotContext) -> None:
    rng = np.random.default_rng(1)
    h = pa.histogram2d(rng.normal(size=50), rng.normal(size=50), nbins=20)
    assert h[0].attributes == {"linetype": "histogram2d", "nbins": 20}

    p = pa.plot(rng.normal(size=(10, 3)))
    pa.hline_extend(np.array([[0.1, 0.2, 0.3]]), line=(4, "dash", 0.6))
    pa.vline_extend([5, 10])
    assert [s.attributes.get("linetype") for s in list(p)[3:]] == ["hline", "hline", "hline", "vline"]
    assert p[3].attributes["linewidth"] == 4

    shares = pa.pie(["a", "b", "c"], [20, 30, 50], title="Shares", l=0.5)
    assert shares[0].data.x.tolist() == ["a", "b", "c"]
    assert shares[0].attributes["linealpha"] == 0.5
    assert shares.attributes == {"title": "Shares"}

    x = np.linspace(0, 1, 5)
    c = pa.contour(x, x, lambda a, b: a - b, fill=True)
    assert c[0].data.is_grid
    assert c[0].attributes["linetype"] == "contour"

    bars = pa.ohlc([pa.OHLC(1, 2, 0, 1.5)] * 4, markersize=8)
    assert bars[0].data.ohlc.shape == (4, 4)


def test_public_helpers_are_documented() -> None:
    missing = [name for name in pa.plot_api.__all__ if not getattr(pa.plot_api, name).__doc__]
    assert missing == []
