"""Capability lists reported by rendering backends.

Backends describe what they can draw as plain lists of attribute names and
accepted values. The pipeline checks finished attribute maps against those
lists and warns about anything the backend would ignore, so users learn about
it at call time instead of from a silently different picture.
"""

from __future__ import annotations

import warnings
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from .attribute_values import per_series_items
from .errors import UnsupportedAttributeWarning, UnsupportedFeatureError


def _frozen(values: Iterable[str] | None) -> frozenset[str] | None:
    return None if values is None else frozenset(values)


@dataclass(frozen=True)
class BackendCapabilities:
    """What one backend supports. ``None`` means "no restriction"."""

    name: str
    supported_args: frozenset[str] | None = None
    supported_types: frozenset[str] | None = None
    supported_styles: frozenset[str] | None = None
    supported_markers: frozenset[str] | None = None
    supported_scales: frozenset[str] | None = None
    subplot_supported: bool = True

    @classmethod
    def from_lists(
        cls,
        name: str,
        *,
        args: Iterable[str] | None = None,
        types: Iterable[str] | None = None,
        styles: Iterable[str] | None = None,
        markers: Iterable[str] | None = None,
        scales: Iterable[str] | None = None,
        subplot: bool = True,
    ) -> "BackendCapabilities":
        return cls(
            name=name,
            supported_args=_frozen(args),
            supported_types=_frozen(types),
            supported_styles=_frozen(styles),
            supported_markers=_frozen(markers),
            supported_scales=_frozen(scales),
            subplot_supported=bool(subplot),
        )


# attribute name -> capability field holding its accepted values
_VALUE_CHECKS = {
    "linetype": "supported_types",
    "linestyle": "supported_styles",
    "markershape": "supported_markers",
    "xscale": "supported_scales",
    "yscale": "supported_scales",
    "zscale": "supported_scales",
}


def _values(value: Any) -> tuple[Any, ...]:
    items = per_series_items(value)
    return (value,) if items is None else items


def unsupported_attributes(
    capabilities: BackendCapabilities,
    attributes: Mapping[str, Any],
) -> list[str]:
    """Return one message per unsupported attribute name or value."""
    problems: list[str] = []
    for name, value in attributes.items():
        if capabilities.supported_args is not None and name not in capabilities.supported_args:
            problems.append(f"attribute {name!r} is not supported by backend {capabilities.name!r}")
            continue
        field_name = _VALUE_CHECKS.get(name)
        allowed = getattr(capabilities, field_name) if field_name else None
        if allowed is None:
            continue
        for v in _values(value):
            if isinstance(v, str) and v not in allowed:
                problems.append(f"{name}={v!r} is not supported by backend {capabilities.name!r}")
    return problems


def check_attributes(
    capabilities: BackendCapabilities | None,
    plot_attributes: Mapping[str, Any],
    series_attributes: Sequence[Mapping[str, Any]] = (),
) -> None:
    """Warn with :class:`UnsupportedAttributeWarning` for unsupported input."""
    if capabilities is None:
        return
    seen: set[str] = set()
    for attributes in (plot_attributes, *series_attributes):
        for message in unsupported_attributes(capabilities, attributes):
            if message in seen:
                continue
            seen.add(message)
            warnings.warn(message, UnsupportedAttributeWarning, stacklevel=4)


def require_subplots(capabilities: BackendCapabilities | None) -> None:
    """Raise :class:`UnsupportedFeatureError` if subplots are unavailable."""
    if capabilities is not None and not capabilities.subplot_supported:
        raise UnsupportedFeatureError(f"backend {capabilities.name!r} does not support subplots")


__all__ = [
    "BackendCapabilities",
    "check_attributes",
    "require_subplots",
    "unsupported_attributes",
]
