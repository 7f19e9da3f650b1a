from __future__ import annotations

import logging
import warnings

import numpy as np
import pytest

from plotattrs import (
    PerSeries,
    PipelineSettings,
    PlotContext,
    PlotPipeline,
    PlotSpec,
    create_plot,
    create_subplot,
    extend_plot,
)
from plotattrs.errors import (
    AmbiguousMagicArgumentError,
    ContextShapeMismatchError,
    NoRecipeFoundError,
    UnknownAttributeError,
    UnknownAttributeWarning,
)
from plotattrs.pipeline import PipelineStage


def test_per_series_colors_on_two_column_matrix(ctx: PlotContext) -> None:
    p = create_plot(ctx, np.zeros((4, 2)), c=PerSeries("red", "blue"))

    assert len(p) == 2
    assert [s.attributes["linecolor"] for s in p] == ["red", "blue"]
    assert ctx.current is p


def test_per_series_colors_cycle_over_five_columns(ctx: PlotContext) -> None:
    p = create_plot(ctx, np.zeros((4, 5)), color=PerSeries("red", "blue"), lw=2)

    assert [s.attributes["linecolor"] for s in p] == ["red", "blue", "red", "blue", "red"]
    assert all(s.attributes["linewidth"] == 2 for s in p)


def test_flat_list_attribute_is_shared_per_point_data(ctx: PlotContext) -> None:
    colors = ["red", "green", "blue", "black"]
    p = create_plot(ctx, np.zeros((4, 2)), markercolor=colors)
    assert all(s.attributes["markercolor"] == colors for s in p)


def test_plot_and_series_scopes_are_separated(ctx: PlotContext) -> None:
    p = create_plot(ctx, [1, 2], title="T", label="a", xlim=(0, 1))
    assert p.attributes == {"title": "T", "xlims": (0, 1)}
    assert p[0].attributes == {"label": "a"}


def test_extend_appends_and_keeps_plot_identity(ctx: PlotContext) -> None:
    p = create_plot(ctx, [1, 2], label="a")
    q = extend_plot(ctx, [3, 4], label="b", title="both")

    assert q is p
    assert [s.label for s in p] == ["a", "b"]
    assert p.attributes["title"] == "both"


def test_extend_without_current_plot_creates_one(ctx: PlotContext) -> None:
    p = extend_plot(ctx, [1, 2])
    assert isinstance(p, PlotSpec)
    assert ctx.current is p


def test_extend_explicit_target_becomes_current(ctx: PlotContext) -> None:
    first = create_plot(ctx, [1])
    create_plot(ctx, [2])
    extend_plot(ctx, [3], target=first)
    assert ctx.current is first
    assert len(first) == 2


def test_failed_extend_leaves_plot_unchanged(ctx: PlotContext) -> None:
    p = create_plot(ctx, [1, 2], title="T")

    with pytest.raises(AmbiguousMagicArgumentError):
        extend_plot(ctx, [3, 4], title="changed", line=(object(),))
    with pytest.raises(NoRecipeFoundError):
        extend_plot(ctx, object(), title="changed")

    assert len(p) == 1
    assert p.attributes == {"title": "T"}
    assert ctx.current is p


def test_failed_create_keeps_previous_current_plot(ctx: PlotContext) -> None:
    p = create_plot(ctx, [1])
    with pytest.raises(NoRecipeFoundError):
        create_plot(ctx, object())
    assert ctx.current is p


def test_extend_plot_rejects_subplot_context(ctx: PlotContext) -> None:
    create_subplot(ctx, [1], [2], n=2)
    with pytest.raises(ContextShapeMismatchError, match="plot_extend"):
        extend_plot(ctx, [3])


def test_unknown_attribute_policies() -> None:
    with pytest.warns(UnknownAttributeWarning):
        p = create_plot(PlotContext(), [1], sparkle=True)
    assert p.attributes["sparkle"] is True

    strict = PlotContext(settings=PipelineSettings(on_unknown="error"))
    with pytest.raises(UnknownAttributeError):
        create_plot(strict, [1], sparkle=True)
    assert strict.current is None


def test_series_attributes_without_series_warn(ctx: PlotContext) -> None:
    create_plot(ctx, [1])
    with pytest.warns(UserWarning, match="produced no series"):
        extend_plot(ctx, c="red")


def test_plot_attributes_without_series_are_applied_silently(ctx: PlotContext) -> None:
    p = create_plot(ctx, [1])
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        extend_plot(ctx, title="Only a title")
    assert p.attributes["title"] == "Only a title"


def test_recipe_overrides_win_over_caller_values(ctx: PlotContext) -> None:
    p = create_plot(ctx, np.sin, 0, 1, domain=(5, 6), samples=3)
    assert p[0].attributes["domain"] == (0.0, 1.0)
    assert np.array_equal(p.series_data(0)[0], [0.0, 0.5, 1.0])


def test_annotations_are_normalized_to_a_list(ctx: PlotContext) -> None:
    p = create_plot(ctx, [1, 2], ann=(1, 2, "peak"))
    assert p.attributes["annotations"] == [(1, 2, "peak")]
    with pytest.raises(ValueError, match="annotations"):
        create_plot(ctx, [1], annotations=[(1, 2)])


def test_plot_scope_per_series_value_takes_first_item(ctx: PlotContext) -> None:
    p = create_plot(ctx, [1], title=PerSeries("A", "B"))
    assert p.attributes["title"] == "A"


def test_layout_attributes_outside_subplot_warn(ctx: PlotContext) -> None:
    with pytest.warns(UserWarning, match="only apply when creating subplots"):
        p = create_plot(ctx, [1], n=3)
    assert "n" not in p.attributes


def test_pipeline_reports_stage_reached() -> None:
    pipeline = PlotPipeline(PlotContext())
    prepared = pipeline.prepare(([1, 2],), {"c": "red"})
    assert pipeline.stage is PipelineStage.CYCLING

    target = PlotSpec()
    pipeline.commit(prepared, target)
    assert pipeline.stage is PipelineStage.MERGED
    assert target[0].attributes == {"linecolor": "red"}

    with pytest.raises(AmbiguousMagicArgumentError):
        pipeline.prepare(([1],), {"line": (object(),)})
    assert pipeline.stage is PipelineStage.EXPANDING


def test_pipeline_logs_stages_and_commit(ctx: PlotContext, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG, logger="plotattrs"):
        create_plot(ctx, [1, 2])

    messages = [r.getMessage() for r in caplog.records]
    assert any("resolving -> dispatching" in m for m in messages)
    assert any(m.startswith("committed 1 series") for m in messages)
