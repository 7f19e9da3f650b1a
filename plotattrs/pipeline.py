"""Preprocessing pipeline orchestration.

Purpose
-------
Runs one plot call through the four preprocessing stages and merges the
result into a plot:

1. **Resolving**: alias keys become canonical names.
2. **Dispatching**: positional arguments become series through recipes
   (and ``group=`` splitting).
3. **Expanding**: magic arguments (``line=``, ``xaxis=`` ...) become canonical
   attributes.
4. **Cycling**: series attributes are distributed over the new series and
   plot attributes over the panels.

Architecture
------------
``PlotPipeline.prepare`` works only on scratch data and returns a
``PreparedCall``; ``PlotPipeline.commit`` is the only step that touches a
``PlotSpec``/``SubplotSpec``. Any error raised by a stage therefore leaves the
target plot and the context exactly as they were.

The entry points ``create_plot``, ``extend_plot``, ``create_subplot`` and
``extend_subplot`` take the :class:`~plotattrs.plot_context.PlotContext`
explicitly.

Examples
--------
>>> import numpy as np
>>> from plotattrs import PerSeries, PlotContext, create_plot
>>> ctx = PlotContext()
>>> p = create_plot(ctx, np.zeros((4, 5)), c=PerSeries("red", "blue"))
>>> [s.attributes["linecolor"] for s in p]
['red', 'blue', 'red', 'blue', 'red']
"""

from __future__ import annotations

import logging
import warnings
from collections import ChainMap
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .attribute_aliases import AttributeScope, attribute_scope, canonical_name, resolve_aliases
from .attribute_cycling import cycle_attributes
from .attribute_values import PerSeries, normalize_annotations
from .backend_support import check_attributes, require_subplots
from .builtin_recipes import PositionalArgs, split_by_group
from .errors import ContextShapeMismatchError
from .magic_arguments import expand_all
from .plot_context import PlotContext
from .plot_spec import PlotSpec, SeriesSpec, SubplotLayout, SubplotSpec
from .recipes import DispatchedSeries, RecipeDispatcher
from .tabular import is_table

# Module logger
# - Uses a NullHandler so importing this module never configures global logging.
# - Callers can enable logs via standard logging configuration.
logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

_LAYOUT_ATTRIBUTES = ("n", "nr", "nc", "layout")


class PipelineStage(Enum):
    """Stages of one pipeline run, in order."""

    IDLE = "idle"
    RESOLVING = "resolving"
    DISPATCHING = "dispatching"
    EXPANDING = "expanding"
    CYCLING = "cycling"
    MERGED = "merged"


@dataclass
class PreparedCall:
    """Scratch result of the four stages, ready to be committed."""

    series: list[SeriesSpec]
    panel_attributes: list[dict[str, Any]]
    layout: SubplotLayout | None = None
    unknown: tuple[str, ...] = ()
    layout_request: dict[str, Any] = field(default_factory=dict)


def _canonical_items(attributes: Mapping[str, Any]) -> dict[str, Any]:
    return {canonical_name(k) or k: v for k, v in attributes.items()}


def _split_scopes(attributes: Mapping[str, Any]) -> tuple[dict[str, Any], dict[str, Any]]:
    series: dict[str, Any] = {}
    plot: dict[str, Any] = {}
    for name, value in attributes.items():
        if attribute_scope(name) is AttributeScope.SERIES:
            series[name] = value
        else:
            plot[name] = value
    return series, plot


def _annotations(value: Any) -> Any:
    # PerSeries gives each panel of a grid its own list.
    if isinstance(value, PerSeries):
        return PerSeries.of(normalize_annotations(item) for item in value)
    return normalize_annotations(value)


class PlotPipeline:
    """Runs the preprocessing stages for one context.

    ``stage`` reports the last stage reached, which after a failure is the
    stage that raised.
    """

    def __init__(self, context: PlotContext) -> None:
        self.context = context
        self.stage = PipelineStage.IDLE

    def _enter(self, stage: PipelineStage) -> None:
        logger.debug("pipeline stage %s -> %s", self.stage.value, stage.value)
        self.stage = stage

    def prepare(
        self,
        args: Sequence[Any],
        kwargs: Mapping[str, Any],
        *,
        panels: int | None = 1,
        call_defaults: Mapping[str, Any] | None = None,
    ) -> PreparedCall:
        """Run all stages on scratch data.

        Parameters
        ----------
        args, kwargs:
            Positional data and keyword attributes of the call.
        panels:
            Number of panels plot attributes are cycled over, or ``None`` to
            derive a subplot layout from ``n``/``nr``/``nc``/``layout``.
        call_defaults:
            Canonical attributes applied when the caller did not set them
            (``scatter`` sets ``linetype="scatter"``).
        """
        settings = self.context.settings
        self.stage = PipelineStage.IDLE

        self._enter(PipelineStage.RESOLVING)
        resolved = resolve_aliases(kwargs, on_unknown=settings.on_unknown)
        attributes = dict(resolved.attributes)
        for name, value in (call_defaults or {}).items():
            attributes.setdefault(name, value)

        self._enter(PipelineStage.DISPATCHING)
        dispatched: list[DispatchedSeries] = []
        if args:
            fallbacks = {
                "samples": settings.default_samples,
                "domain": attributes.get("xlims", settings.default_domain),
            }
            dispatcher = RecipeDispatcher(self.context.registry, max_depth=settings.max_recipe_depth)
            dispatched = dispatcher.dispatch(PositionalArgs(args), ChainMap(attributes, fallbacks))
        group = attributes.pop("group", None)
        if group is not None:
            table = args[0] if args and is_table(args[0]) else None
            dispatched = split_by_group(dispatched, group, table=table)
        logger.debug("dispatched %d series", len(dispatched))

        self._enter(PipelineStage.EXPANDING)
        expanded = expand_all(attributes)
        series_attrs, plot_attrs = _split_scopes(expanded)
        plot_attrs = self._merge_recipe_plot_attributes(plot_attrs, dispatched)
        if "annotations" in plot_attrs:
            plot_attrs["annotations"] = _annotations(plot_attrs["annotations"])
        layout_request = {k: plot_attrs.pop(k) for k in _LAYOUT_ATTRIBUTES if k in plot_attrs}

        self._enter(PipelineStage.CYCLING)
        n = len(dispatched)
        if series_attrs and n == 0:
            warnings.warn(
                f"series attribute(s) {', '.join(series_attrs)} ignored: the call produced no series",
                UserWarning,
                stacklevel=3,
            )
        per_series = cycle_attributes(series_attrs, n)
        series = [
            SeriesSpec(data=item.data, attributes=self._series_attributes(item, cycled))
            for item, cycled in zip(dispatched, per_series)
        ]

        layout: SubplotLayout | None = None
        if panels is None:
            if layout_request:
                layout = SubplotLayout.build(**layout_request)
            else:
                layout = SubplotLayout.build(n=max(n, 1))
            panels = layout.n
        elif layout_request:
            warnings.warn(
                f"layout attribute(s) {', '.join(layout_request)} only apply when creating subplots",
                UserWarning,
                stacklevel=3,
            )
        panel_attributes = cycle_attributes(plot_attrs, panels)

        check_attributes(
            self.context.backend,
            plot_attrs,
            [s.attributes for s in series],
        )
        return PreparedCall(
            series=series,
            panel_attributes=panel_attributes,
            layout=layout,
            unknown=resolved.unknown,
            layout_request=layout_request,
        )

    @staticmethod
    def _merge_recipe_plot_attributes(
        plot_attrs: dict[str, Any],
        dispatched: Sequence[DispatchedSeries],
    ) -> dict[str, Any]:
        out = dict(plot_attrs)
        defaults: dict[str, Any] = {}
        overrides: dict[str, Any] = {}
        for item in dispatched:
            for name, value in _canonical_items(item.defaults).items():
                if attribute_scope(name) is AttributeScope.PLOT:
                    defaults.setdefault(name, value)
            for name, value in _canonical_items(item.overrides).items():
                if attribute_scope(name) is AttributeScope.PLOT:
                    overrides[name] = value
        for name, value in defaults.items():
            out.setdefault(name, value)
        out.update(overrides)
        return out

    @staticmethod
    def _series_attributes(item: DispatchedSeries, cycled: Mapping[str, Any]) -> dict[str, Any]:
        """Recipe defaults < caller attributes < recipe overrides."""
        out: dict[str, Any] = {}
        for layer in (item.defaults, cycled, item.overrides):
            for name, value in _canonical_items(layer).items():
                if layer is not cycled and attribute_scope(name) is not AttributeScope.SERIES:
                    continue
                if value is None and layer is not cycled:
                    continue
                out[name] = value
        return out

    def commit(self, prepared: PreparedCall, target: PlotSpec | SubplotSpec) -> None:
        """Merge ``prepared`` into ``target``."""
        if isinstance(target, SubplotSpec):
            target._commit(prepared.series, prepared.panel_attributes)
        else:
            target._commit(prepared.series, prepared.panel_attributes[0])
        self._enter(PipelineStage.MERGED)
        logger.info(
            "committed %d series into %s (%d series total)",
            len(prepared.series),
            type(target).__name__,
            len(target.series) if isinstance(target, PlotSpec) else target.series_count,
        )


def create_plot(context: PlotContext, *args: Any, **kwargs: Any) -> PlotSpec:
    """Build a new :class:`PlotSpec` and make it the context's current plot."""
    return _create_plot(context, args, kwargs)


def _create_plot(
    context: PlotContext,
    args: Sequence[Any],
    kwargs: Mapping[str, Any],
    call_defaults: Mapping[str, Any] | None = None,
) -> PlotSpec:
    pipeline = PlotPipeline(context)
    prepared = pipeline.prepare(args, kwargs, call_defaults=call_defaults)
    plot = PlotSpec()
    pipeline.commit(prepared, plot)
    context.current = plot
    return plot


def extend_plot(
    context: PlotContext,
    *args: Any,
    target: PlotSpec | None = None,
    **kwargs: Any,
) -> PlotSpec:
    """Append series to ``target`` (default: the current plot) in place.

    With no target and no current plot this behaves like :func:`create_plot`.

    Raises
    ------
    ContextShapeMismatchError
        If the plot to extend is a :class:`SubplotSpec`.
    """
    return _extend_plot(context, args, kwargs, target=target)


def _extend_plot(
    context: PlotContext,
    args: Sequence[Any],
    kwargs: Mapping[str, Any],
    *,
    target: Any = None,
    call_defaults: Mapping[str, Any] | None = None,
) -> PlotSpec:
    plot = target if target is not None else context.current
    if plot is None:
        return _create_plot(context, args, kwargs, call_defaults)
    if not isinstance(plot, PlotSpec):
        raise ContextShapeMismatchError("plot_extend", "PlotSpec", type(plot).__name__)
    pipeline = PlotPipeline(context)
    prepared = pipeline.prepare(args, kwargs, call_defaults=call_defaults)
    pipeline.commit(prepared, plot)
    context.current = plot
    return plot


def create_subplot(context: PlotContext, *args: Any, **kwargs: Any) -> SubplotSpec:
    """Build a grid of panels and deal the series out to them in turn.

    The grid comes from ``layout=[row lengths]`` or ``n``/``nr``/``nc``; with
    none of them, there is one panel per series.
    """
    return _create_subplot(context, args, kwargs)


def _create_subplot(
    context: PlotContext,
    args: Sequence[Any],
    kwargs: Mapping[str, Any],
    call_defaults: Mapping[str, Any] | None = None,
) -> SubplotSpec:
    require_subplots(context.backend)
    pipeline = PlotPipeline(context)
    prepared = pipeline.prepare(args, kwargs, panels=None, call_defaults=call_defaults)
    layout = prepared.layout
    if layout is None:
        raise RuntimeError("subplot preparation did not resolve a panel layout")
    grid = SubplotSpec(plots=[PlotSpec() for _ in range(layout.n)], layout=layout)
    pipeline.commit(prepared, grid)
    context.current = grid
    return grid


def extend_subplot(
    context: PlotContext,
    *args: Any,
    target: SubplotSpec | None = None,
    **kwargs: Any,
) -> SubplotSpec:
    """Continue dealing series to the panels of ``target`` (default: current).

    Raises
    ------
    ContextShapeMismatchError
        If the plot to extend is a single :class:`PlotSpec`.
    """
    grid = target if target is not None else context.current
    if grid is None:
        return _create_subplot(context, args, kwargs)
    if not isinstance(grid, SubplotSpec):
        raise ContextShapeMismatchError("subplot_extend", "SubplotSpec", type(grid).__name__)
    require_subplots(context.backend)
    pipeline = PlotPipeline(context)
    prepared = pipeline.prepare(args, kwargs, panels=len(grid.plots))
    pipeline.commit(prepared, grid)
    context.current = grid
    return grid


__all__ = [
    "PipelineStage",
    "PlotPipeline",
    "PreparedCall",
    "create_plot",
    "create_subplot",
    "extend_plot",
    "extend_subplot",
]
