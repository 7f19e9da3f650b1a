"""Plot contexts and the thread-local default context stack.

A :class:`PlotContext` is the explicit "current plot" holder the pipeline
operates on. Core functions always receive one; the module-level convenience
API in :mod:`plotattrs.plot_api` uses :func:`active_context`, which returns
the innermost ``with use_context(...)`` block or a lazily created per-thread
default. Contexts are not synchronized: share one between threads only with
external locking.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Union

from .backend_support import BackendCapabilities
from .plot_spec import PlotSpec, SubplotSpec
from .recipes import RecipeRegistry, default_registry
from .settings import PipelineSettings

CurrentPlot = Union[PlotSpec, SubplotSpec]

_CONTEXT_LOCAL = threading.local()


class PlotContext:
    """Holder of the plot currently being built.

    Parameters
    ----------
    settings : PipelineSettings, optional
        Limits and fallbacks; defaults to ``PipelineSettings()``.
    registry : RecipeRegistry, optional
        Recipes to dispatch with; defaults to the shared default registry, so
        :func:`~plotattrs.recipes.register_recipe` affects this context.
    backend : BackendCapabilities, optional
        Capability lists to check finished attributes against.
    """

    def __init__(
        self,
        *,
        settings: PipelineSettings | None = None,
        registry: RecipeRegistry | None = None,
        backend: BackendCapabilities | None = None,
    ) -> None:
        self.settings = settings if settings is not None else PipelineSettings()
        self._registry = registry
        self.backend = backend
        self.current: CurrentPlot | None = None

    @property
    def registry(self) -> RecipeRegistry:
        return self._registry if self._registry is not None else default_registry()

    @registry.setter
    def registry(self, value: RecipeRegistry | None) -> None:
        self._registry = value

    def reset(self) -> None:
        """Forget the current plot."""
        self.current = None

    def __repr__(self) -> str:
        kind = type(self.current).__name__ if self.current is not None else "None"
        return f"PlotContext(current={kind}, backend={getattr(self.backend, 'name', None)!r})"


def _context_stack() -> list[PlotContext]:
    """Return the thread-local context stack."""
    stack = getattr(_CONTEXT_LOCAL, "stack", None)
    if stack is None:
        stack = []
        _CONTEXT_LOCAL.stack = stack
    return stack


def default_context() -> PlotContext:
    """Return this thread's default context, creating it on first use."""
    ctx = getattr(_CONTEXT_LOCAL, "default", None)
    if ctx is None:
        ctx = PlotContext()
        _CONTEXT_LOCAL.default = ctx
    return ctx


def active_context() -> PlotContext:
    """Return the innermost context of ``use_context`` or the thread default."""
    stack = _context_stack()
    if stack:
        return stack[-1]
    return default_context()


@contextmanager
def use_context(ctx: PlotContext) -> Iterator[PlotContext]:
    """Make ``ctx`` the active context inside the ``with`` block."""
    stack = _context_stack()
    stack.append(ctx)
    try:
        yield ctx
    finally:
        if stack and stack[-1] is ctx:
            stack.pop()
        else:
            for i in range(len(stack) - 1, -1, -1):
                if stack[i] is ctx:
                    del stack[i]
                    break


__all__ = [
    "CurrentPlot",
    "PlotContext",
    "active_context",
    "default_context",
    "use_context",
]
