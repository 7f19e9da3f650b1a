from __future__ import annotations

import math

import numpy as np
import pytest
import sympy as sp

from plotattrs import OHLC, PipelineSettings, PlotContext, create_plot
from plotattrs.builtin_recipes import evaluate_function, evaluate_surface, sample_points
from plotattrs.errors import SeriesDataError


def test_single_vector_uses_index_as_x(ctx: PlotContext) -> None:
    p = create_plot(ctx, [1, 2, 4])
    x, y = p.series_data(0)
    assert np.array_equal(x, [0.0, 1.0, 2.0])
    assert np.array_equal(y, [1.0, 2.0, 4.0])


def test_x_and_y_vectors(ctx: PlotContext) -> None:
    p = create_plot(ctx, [1, 2, 3], np.array([4.0, 5.0, 6.0]))
    x, y = p.series_data(0)
    assert np.array_equal(x, [1.0, 2.0, 3.0])
    assert np.array_equal(y, [4.0, 5.0, 6.0])


def test_length_mismatch_is_rejected(ctx: PlotContext) -> None:
    with pytest.raises(SeriesDataError, match="length"):
        create_plot(ctx, [1, 2, 3], [1, 2])


def test_matrix_columns_become_series(ctx: PlotContext) -> None:
    y = np.arange(6.0).reshape(3, 2)
    p = create_plot(ctx, [0, 1, 2], y)
    assert len(p) == 2
    assert np.array_equal(p.series_data(1)[1], [1.0, 3.0, 5.0])


def test_list_of_vectors_gives_one_series_each(ctx: PlotContext) -> None:
    p = create_plot(ctx, [[1, 2], [3, 4, 5]])
    assert [len(s.data) for s in p] == [2, 3]


def test_functions_over_explicit_range(ctx: PlotContext) -> None:
    p = create_plot(ctx, [np.sin, np.cos], 0, np.pi)

    assert len(p) == 2
    assert [s.label for s in p] == ["sin", "cos"]
    x, y = p.series_data(1)
    assert x.size == 500
    assert x[0] == 0.0 and math.isclose(x[-1], math.pi)
    assert np.allclose(y, np.cos(x))
    assert p[0].attributes["domain"] == (0.0, pytest.approx(math.pi))


def test_function_domain_falls_back_to_xlims_then_settings() -> None:
    p = create_plot(PlotContext(), lambda t: t, xlims=(0, 2), samples=3)
    assert np.array_equal(p.series_data(0)[0], [0.0, 1.0, 2.0])
    assert p[0].label is None

    ctx = PlotContext(settings=PipelineSettings(default_domain=(0, 1), default_samples=5))
    x, _ = create_plot(ctx, lambda t: t).series_data(0)
    assert np.allclose(x, [0.0, 0.25, 0.5, 0.75, 1.0])


def test_default_domain_and_samples(ctx: PlotContext) -> None:
    x, y = create_plot(ctx, lambda t: t**2).series_data(0)
    assert x.size == 500
    assert (x[0], x[-1]) == (-5.0, 5.0)
    assert np.allclose(y, x**2)


def test_domain_with_more_than_two_points_is_used_as_samples(ctx: PlotContext) -> None:
    x, y = create_plot(ctx, lambda t: 2 * t, domain=[0, 1, 3]).series_data(0)
    assert np.array_equal(x, [0.0, 1.0, 3.0])
    assert np.array_equal(y, [0.0, 2.0, 6.0])


def test_symbolic_endpoints_and_sympy_expressions(ctx: PlotContext) -> None:
    t = sp.Symbol("t")
    p = create_plot(ctx, sp.sin(t), 0, "pi/2", samples=3)
    x, y = p.series_data(0)
    assert p[0].label == "sin(t)"
    assert np.allclose(y, [0.0, math.sqrt(2) / 2, 1.0])


def test_expression_with_two_free_symbols_is_rejected(ctx: PlotContext) -> None:
    a, b = sp.symbols("a b")
    with pytest.raises(SeriesDataError, match="free symbols"):
        create_plot(ctx, a * b, 0, 1)


def test_scalar_only_callables_are_evaluated_elementwise() -> None:
    xs = np.array([0.0, math.pi / 2])
    assert np.allclose(evaluate_function(math.sin, xs), [0.0, 1.0])


def test_function_and_vector_in_either_order(ctx: PlotContext) -> None:
    p = create_plot(ctx, np.square, [1, 2, 3])
    assert np.array_equal(p.series_data(0)[1], [1.0, 4.0, 9.0])
    q = create_plot(ctx, [1, 2, 3], np.square)
    assert np.array_equal(q.series_data(0)[1], [1.0, 4.0, 9.0])


def test_parametric_pair(ctx: PlotContext) -> None:
    p = create_plot(ctx, np.cos, np.sin, 0, 2 * np.pi, samples=5)
    x, y = p.series_data(0)
    assert np.allclose(x**2 + y**2, 1.0)
    assert np.allclose(x, [1.0, 0.0, -1.0, 0.0, 1.0], atol=1e-12)


def test_three_vectors_give_z_data(ctx: PlotContext) -> None:
    p = create_plot(ctx, [1, 2], [3, 4], [5, 6])
    assert np.array_equal(p[0].data.z, [5.0, 6.0])


def test_empty_input_yields_no_series(ctx: PlotContext) -> None:
    p = create_plot(ctx, [])
    assert len(p) == 0


def test_non_numeric_values_are_reported_with_index(ctx: PlotContext) -> None:
    with pytest.raises(SeriesDataError, match="index 1"):
        create_plot(ctx, [1.0, 2.0], [1.0, "two"])


def test_missing_values_become_nan(ctx: PlotContext) -> None:
    y = create_plot(ctx, [1.0, None, 3.0]).series_data(0)[1]
    assert np.isnan(y[1])


def test_sample_points_validates_count() -> None:
    with pytest.raises(ValueError):
        sample_points((0, 1), 1)
    assert sample_points((0, 1), 2).tolist() == [0.0, 1.0]


def test_three_dimensional_arrays_are_rejected(ctx: PlotContext) -> None:
    with pytest.raises(SeriesDataError, match="3 dimensions"):
        create_plot(ctx, np.zeros((2, 2, 2)))


def test_two_argument_function_gives_a_surface_over_the_grid(ctx: PlotContext) -> None:
    x = np.linspace(0.0, 1.0, 4)
    y = np.linspace(-1.0, 1.0, 3)

    def f(a, b):
        return a + 10 * b

    p = create_plot(ctx, x, y, f, fill=True)
    data = p[0].data
    assert data.is_grid
    assert data.z.shape == (3, 4)
    assert data.z[2, 1] == pytest.approx(x[1] + 10 * y[2])
    assert p[0].label == "f"
    assert p[0].attributes["fillrange"] == 0


def test_surface_falls_back_to_scalar_calls_and_sympy(ctx: PlotContext) -> None:
    xs = np.array([0.0, 1.0])
    ys = np.array([2.0, 3.0, 4.0])
    scalar_only = evaluate_surface(lambda a, b: math.hypot(a, b), xs, ys)
    assert scalar_only.shape == (3, 2)
    assert scalar_only[0, 1] == pytest.approx(math.hypot(1.0, 2.0))

    a, b = sp.symbols("a b")
    assert evaluate_surface(a * b, xs, ys)[2, 1] == pytest.approx(4.0)
    assert np.all(evaluate_surface(sp.Integer(3), xs, ys) == 3.0)


def test_matrix_z_must_match_the_grid(ctx: PlotContext) -> None:
    p = create_plot(ctx, [0, 1, 2], [0, 1], np.arange(6.0).reshape(2, 3))
    assert p[0].data.z[1, 2] == 5.0
    with pytest.raises(SeriesDataError, match="grid"):
        create_plot(ctx, [0, 1, 2], [0, 1], np.zeros((3, 2)))


def test_ohlc_bars_plot_as_one_ohlc_series(ctx: PlotContext) -> None:
    bars = [OHLC(1, 3, 0.5, 2), OHLC(2, 4, 1.5, 3.5), OHLC(3.5, 3.6, 2, 2.5)]
    p = create_plot(ctx, bars, markersize=8)

    data = p[0].data
    assert np.array_equal(data.x, [0.0, 1.0, 2.0])
    assert np.array_equal(data.y, [2.0, 3.5, 2.5])
    assert data.ohlc.tolist()[1] == [2.0, 4.0, 1.5, 3.5]
    assert p[0].attributes["linetype"] == "ohlc"
    assert p[0].attributes["markersize"] == 8

    q = create_plot(ctx, ["mon", "tue", "wed"], bars, t="bar")
    assert q[0].data.x.tolist() == ["mon", "tue", "wed"]
    assert q[0].attributes["linetype"] == "bar"


def test_ohlc_values_are_validated() -> None:
    assert OHLC("1", 2, 0, sp.Rational(3, 2)).close == 1.5
    with pytest.raises(ValueError, match="below low"):
        OHLC(1, 0, 2, 1)
