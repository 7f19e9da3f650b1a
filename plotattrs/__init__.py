"""Top-level public API for the ``plotattrs`` package.

``plotattrs`` turns loosely typed plot calls into normalized plot
specifications: aliases are resolved, positional data is converted into
series by type-dispatched recipes, magic arguments are expanded, and
attribute values are cycled over series. Rendering is left to a backend.

>>> import numpy as np
>>> from plotattrs import PerSeries, PlotContext, create_plot
>>> p = create_plot(PlotContext(), np.zeros((4, 2)), c=PerSeries("red", "blue"))
>>> [s.attributes["linecolor"] for s in p]
['red', 'blue']

The module-level helpers (``plot``, ``plot_extend``, ``scatter``,
``subplot`` ...) operate on a thread-local default context.
"""

from .attribute_aliases import (
    ALIASES,
    ATTRIBUTE_SCOPES,
    MAGIC_GROUPS,
    AttributeScope,
    canonical_name,
    plot_attribute_options,
    resolve_aliases,
)
from .attribute_cycling import cycle_attribute, cycle_attributes
from .attribute_values import PerSeries, Shape
from .backend_support import BackendCapabilities
from .builtin_recipes import OHLC, FunctionRange, ParametricFunctions, XYData
from .errors import (
    AmbiguousMagicArgumentError,
    ContextShapeMismatchError,
    DuplicateMagicTargetError,
    MagicArgumentError,
    NoRecipeFoundError,
    PlotAttributeError,
    RecipeCycleError,
    SeriesDataError,
    UnknownAttributeError,
    UnknownAttributeWarning,
    UnsupportedAttributeWarning,
    UnsupportedFeatureError,
)
from .magic_arguments import Stroke, expand_all, expand_magic, stroke
from .pipeline import (
    PipelineStage,
    PlotPipeline,
    create_plot,
    create_subplot,
    extend_plot,
    extend_subplot,
)
from .plot_api import (
    annotate,
    bar,
    bar_extend,
    contour,
    contour_extend,
    current_plot,
    heatmap,
    heatmap_extend,
    histogram,
    histogram2d,
    histogram2d_extend,
    histogram_extend,
    hline,
    hline_extend,
    ohlc,
    ohlc_extend,
    pie,
    pie_extend,
    plot,
    plot_extend,
    reset,
    scatter,
    scatter_extend,
    set_title,
    set_xlabel,
    set_xlims,
    set_xticks,
    set_ylabel,
    set_ylims,
    set_yticks,
    subplot,
    subplot_extend,
    vline,
    vline_extend,
    xaxis,
    yaxis,
)
from .plot_context import PlotContext, active_context, default_context, use_context
from .plot_spec import PlotSpec, SeriesData, SeriesSpec, SubplotLayout, SubplotSpec
from .recipes import (
    RecipeDispatcher,
    RecipeRegistry,
    RecipeResult,
    SequenceOf,
    default_registry,
    recipe,
    register_recipe,
)
from .settings import PipelineSettings
from .tabular import Column, ColumnRef, TableSource
