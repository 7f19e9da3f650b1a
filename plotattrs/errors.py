"""Error and warning taxonomy for the attribute preprocessing pipeline.

Every fatal condition derives from :class:`PlotAttributeError` and from the
closest builtin exception, so callers that already catch ``TypeError`` or
``ValueError`` around plotting calls keep working. Recoverable conditions are
reported through :mod:`warnings` with dedicated ``UserWarning`` subclasses.
"""

from __future__ import annotations

from typing import Any

__all__ = [
    "AmbiguousMagicArgumentError",
    "ContextShapeMismatchError",
    "DuplicateMagicTargetError",
    "MagicArgumentError",
    "NoRecipeFoundError",
    "PlotAttributeError",
    "RecipeCycleError",
    "SeriesDataError",
    "UnknownAttributeError",
    "UnknownAttributeWarning",
    "UnsupportedAttributeWarning",
    "UnsupportedFeatureError",
]


class PlotAttributeError(Exception):
    """Base error for the plotattrs package."""


class UnknownAttributeError(PlotAttributeError, ValueError):
    """Raised for unknown attribute names when ``on_unknown="error"``."""

    def __init__(self, names: tuple[str, ...]):
        self.names = tuple(names)
        super().__init__(f"Unknown plot attribute(s): {', '.join(self.names)}")


class NoRecipeFoundError(PlotAttributeError, TypeError):
    """Raised when no recipe can turn a value into series data."""

    def __init__(self, value_type: type):
        self.value_type = value_type
        name = getattr(value_type, "__qualname__", repr(value_type))
        super().__init__(
            f"No recipe registered for type {name}. "
            "Use register_recipe(...) to teach plotattrs how to plot it."
        )


class RecipeCycleError(PlotAttributeError, RuntimeError):
    """Raised when recipe conversion does not reach numeric data in time."""

    def __init__(self, value_type: type, max_depth: int):
        self.value_type = value_type
        self.max_depth = max_depth
        name = getattr(value_type, "__qualname__", repr(value_type))
        super().__init__(
            f"Recipe conversion exceeded max depth {max_depth} while converting {name}"
        )


class MagicArgumentError(PlotAttributeError, ValueError):
    """Base for rejected composite (magic) arguments such as ``line=(...)``."""

    def __init__(self, group: str, value: Any, message: str):
        self.group = group
        self.value = value
        super().__init__(message)


class AmbiguousMagicArgumentError(MagicArgumentError):
    """Raised when an element of a magic argument matches no target."""

    def __init__(self, group: str, value: Any):
        super().__init__(
            group,
            value,
            f"{group}=...: could not classify {value!r}; it matches none of the "
            f"attributes this argument can set",
        )


class DuplicateMagicTargetError(MagicArgumentError):
    """Raised when two elements of a magic argument target the same attribute."""

    def __init__(self, group: str, value: Any, target: str):
        self.target = target
        super().__init__(
            group,
            value,
            f"{group}=...: {value!r} would set {target!r}, which another element "
            f"already set",
        )


class ContextShapeMismatchError(PlotAttributeError, TypeError):
    """Raised when a mutation call targets an incompatible plot shape."""

    def __init__(self, operation: str, expected: str, actual: str):
        self.operation = operation
        self.expected = expected
        self.actual = actual
        super().__init__(f"{operation}() expects a {expected} context, got {actual}")


class SeriesDataError(PlotAttributeError, ValueError):
    """Raised when positional data cannot form a well-shaped series."""


class UnsupportedFeatureError(PlotAttributeError, RuntimeError):
    """Raised when the active backend cannot provide a requested feature."""


class UnknownAttributeWarning(UserWarning):
    """Warning for attribute names that are neither canonical nor aliases."""


class UnsupportedAttributeWarning(UserWarning):
    """Warning for attributes or values the active backend does not support."""
