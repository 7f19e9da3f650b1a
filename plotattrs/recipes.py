"""Recipe registry and dispatcher.

Purpose
-------
A *recipe* converts a value of some type into plottable series data, or into
a simpler value that another recipe understands. External packages teach
plotattrs about their own types by registering handlers; the core never needs
to know those types in advance.

Architecture
------------
``RecipeRegistry`` maps type signatures to handlers. Lookup is explicit and
shallow:

1. the exact runtime type of the value;
2. the direct bases of that type (one level only);
3. registrations made with ``subclasses=True`` (``isinstance``), in
   registration order;
4. for ``list``/``tuple`` values, ``SequenceOf(...)`` registrations whose
   element types match every element.

``RecipeDispatcher`` applies handlers repeatedly until every branch ends in a
:class:`~plotattrs.plot_spec.SeriesData`. Containers with no handler are
decomposed into one dispatch per element. The number of chained handler
applications is bounded to guard against recipes that never simplify.

Examples
--------
>>> from plotattrs.recipes import RecipeRegistry, RecipeResult
>>> class Celsius(list): pass
>>> reg = RecipeRegistry()
>>> reg.register(Celsius, lambda v, attrs: RecipeResult(list(v), defaults={"ylabel": "degC"}))
>>> reg.lookup(Celsius([1.0])) is not None
True
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Union

from .errors import NoRecipeFoundError, RecipeCycleError
from .plot_spec import SeriesData

# Module logger
# - Uses a NullHandler so importing this module never configures global logging.
logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


@dataclass(frozen=True)
class SequenceOf:
    """Signature for a ``list``/``tuple`` whose elements all match ``element_types``."""

    element_types: tuple[type, ...]

    def __init__(self, *element_types: type) -> None:
        if not element_types:
            raise ValueError("SequenceOf(...) needs at least one element type")
        object.__setattr__(self, "element_types", tuple(element_types))

    def __repr__(self) -> str:
        names = ", ".join(t.__name__ for t in self.element_types)
        return f"SequenceOf({names})"


Signature = Union[type, SequenceOf]


@dataclass(frozen=True)
class RecipeResult:
    """Output of a recipe handler.

    Parameters
    ----------
    data:
        A :class:`SeriesData`, or any other value, which is dispatched again.
        Lists no recipe handles as a whole decompose into one dispatch per
        element.
    overrides:
        Attributes applied to every series produced from ``data``.
    defaults:
        Attributes applied only where the caller did not set them (e.g. a
        default label).
    """

    data: Any
    overrides: Mapping[str, Any] = field(default_factory=dict)
    defaults: Mapping[str, Any] = field(default_factory=dict)


RecipeHandler = Callable[[Any, Mapping[str, Any]], Union[RecipeResult, tuple, Any]]


@dataclass(frozen=True)
class _Registration:
    signature: Signature
    handler: RecipeHandler
    subclasses: bool
    internal: bool = False


@dataclass
class DispatchedSeries:
    """One series produced by dispatch, with the attributes recipes attached."""

    data: SeriesData
    overrides: dict[str, Any] = field(default_factory=dict)
    defaults: dict[str, Any] = field(default_factory=dict)


class RecipeRegistry:
    """Mapping from type signatures to recipe handlers."""

    def __init__(self) -> None:
        self._exact: dict[Signature, _Registration] = {}
        self._order: list[_Registration] = []

    def register(
        self,
        signature: Signature,
        handler: RecipeHandler,
        *,
        subclasses: bool = False,
        internal: bool = False,
    ) -> None:
        """Register ``handler`` for ``signature``, replacing any previous one.

        Parameters
        ----------
        signature:
            A type, or :class:`SequenceOf` for homogeneous lists/tuples.
        handler:
            ``handler(value, attributes)`` returning a :class:`RecipeResult`,
            a ``(data, overrides)`` tuple, or plain data.
        subclasses:
            Also match instances of subclasses of ``signature`` (or of the
            element types for ``SequenceOf``) at any depth.
        internal:
            The handler only reshapes call arguments (the positional
            argument wrappers). Internal steps do not count toward
            :attr:`RecipeDispatcher.max_depth`.
        """
        if not isinstance(signature, (type, SequenceOf)):
            raise TypeError(f"recipe signature must be a type or SequenceOf, got {signature!r}")
        if not callable(handler):
            raise TypeError(f"recipe handler must be callable, got {type(handler).__name__}")
        reg = _Registration(
            signature=signature,
            handler=handler,
            subclasses=bool(subclasses),
            internal=bool(internal),
        )
        if signature in self._exact:
            self._order = [r for r in self._order if r.signature != signature]
        self._exact[signature] = reg
        self._order.append(reg)
        logger.debug("registered recipe for %r (subclasses=%s)", signature, subclasses)

    def unregister(self, signature: Signature) -> None:
        """Remove the handler for ``signature``. Raises ``KeyError`` if absent."""
        del self._exact[signature]
        self._order = [r for r in self._order if r.signature != signature]

    def __contains__(self, signature: object) -> bool:
        return signature in self._exact

    def __len__(self) -> int:
        return len(self._exact)

    def copy(self) -> "RecipeRegistry":
        """Return an independent registry with the same registrations."""
        clone = RecipeRegistry()
        clone._exact = dict(self._exact)
        clone._order = list(self._order)
        return clone

    def _match_type(self, tp: type) -> _Registration | None:
        reg = self._exact.get(tp)
        if reg is not None:
            return reg
        for base in tp.__bases__:
            reg = self._exact.get(base)
            if reg is not None:
                return reg
        for reg in self._order:
            if reg.subclasses and isinstance(reg.signature, type) and issubclass(tp, reg.signature):
                return reg
        return None

    @staticmethod
    def _element_matches(reg: _Registration, tp: type) -> bool:
        for et in reg.signature.element_types:  # type: ignore[union-attr]
            if tp is et or et in tp.__bases__:
                return True
            if reg.subclasses and issubclass(tp, et):
                return True
        return False

    def _match_sequence(self, value: list | tuple) -> _Registration | None:
        if not value:
            return None
        element_types = {type(item) for item in value}
        for reg in self._order:
            if not isinstance(reg.signature, SequenceOf):
                continue
            if all(self._element_matches(reg, tp) for tp in element_types):
                return reg
        return None

    def _find(self, value: Any) -> _Registration | None:
        reg = self._match_type(type(value))
        if reg is None and isinstance(value, (list, tuple)):
            reg = self._match_sequence(value)
        return reg

    def lookup(self, value: Any) -> RecipeHandler | None:
        """Return the handler for ``value``, or ``None``."""
        reg = self._find(value)
        return None if reg is None else reg.handler


def _as_result(output: Any) -> RecipeResult:
    if isinstance(output, RecipeResult):
        return output
    if isinstance(output, tuple) and len(output) == 2 and isinstance(output[1], Mapping):
        return RecipeResult(data=output[0], overrides=output[1])
    return RecipeResult(data=output)


class RecipeDispatcher:
    """Reduce arbitrary values to a list of :class:`DispatchedSeries`.

    Parameters
    ----------
    registry:
        Handlers to consult.
    max_depth:
        A chain of ``d`` handler applications succeeds when ``d < max_depth``
        and fails with :class:`RecipeCycleError` otherwise. Handlers
        registered with ``internal=True`` are not counted.
    """

    def __init__(self, registry: RecipeRegistry, *, max_depth: int = 8) -> None:
        if max_depth < 1:
            raise ValueError(f"max_depth must be >= 1, got {max_depth}")
        self.registry = registry
        self.max_depth = max_depth

    def dispatch(self, value: Any, attributes: Mapping[str, Any]) -> list[DispatchedSeries]:
        """Dispatch one positional value against the accumulated attributes."""
        return self._dispatch(value, attributes, depth=0, overrides={}, defaults={})

    def _dispatch(
        self,
        value: Any,
        attributes: Mapping[str, Any],
        *,
        depth: int,
        overrides: dict[str, Any],
        defaults: dict[str, Any],
    ) -> list[DispatchedSeries]:
        if isinstance(value, SeriesData):
            return [DispatchedSeries(data=value, overrides=dict(overrides), defaults=dict(defaults))]

        reg = self.registry._find(value)
        if reg is not None:
            step = 0 if reg.internal else 1
            if depth + step >= self.max_depth:
                raise RecipeCycleError(type(value), self.max_depth)
            logger.debug("recipe depth=%d: %s", depth, type(value).__qualname__)
            result = _as_result(reg.handler(value, attributes))
            inner_overrides = {**overrides, **result.overrides}
            inner_defaults = {**defaults, **result.defaults}
            # Overrides become visible to recipes further down the chain.
            inner_attributes = {**attributes, **result.overrides}
            return self._dispatch(
                result.data,
                inner_attributes,
                depth=depth + step,
                overrides=inner_overrides,
                defaults=inner_defaults,
            )

        if isinstance(value, (list, tuple)):
            # Decomposition: one dispatch per element, no extra depth.
            out = []
            for item in value:
                out.extend(
                    self._dispatch(
                        item,
                        attributes,
                        depth=depth,
                        overrides=overrides,
                        defaults=defaults,
                    )
                )
            return out

        raise NoRecipeFoundError(type(value))


_DEFAULT_REGISTRY: RecipeRegistry | None = None


def default_registry() -> RecipeRegistry:
    """Return the process-wide registry, with built-in recipes installed."""
    global _DEFAULT_REGISTRY
    if _DEFAULT_REGISTRY is None:
        from .builtin_recipes import install_builtin_recipes

        _DEFAULT_REGISTRY = install_builtin_recipes(RecipeRegistry())
    return _DEFAULT_REGISTRY


def register_recipe(
    signature: Signature,
    handler: RecipeHandler,
    *,
    subclasses: bool = False,
    registry: RecipeRegistry | None = None,
) -> None:
    """Register ``handler`` on ``registry`` (the default registry if omitted)."""
    target = registry if registry is not None else default_registry()
    target.register(signature, handler, subclasses=subclasses)


def recipe(
    signature: Signature,
    *,
    subclasses: bool = False,
    registry: RecipeRegistry | None = None,
) -> Callable[[RecipeHandler], RecipeHandler]:
    """Decorator form of :func:`register_recipe`.

    >>> @recipe(complex)  # doctest: +SKIP
    ... def _complex(value, attributes):
    ...     return [value.real, value.imag]
    """

    def decorator(handler: RecipeHandler) -> RecipeHandler:
        register_recipe(signature, handler, subclasses=subclasses, registry=registry)
        return handler

    return decorator


__all__ = [
    "DispatchedSeries",
    "RecipeDispatcher",
    "RecipeHandler",
    "RecipeRegistry",
    "RecipeResult",
    "SequenceOf",
    "Signature",
    "default_registry",
    "recipe",
    "register_recipe",
]
