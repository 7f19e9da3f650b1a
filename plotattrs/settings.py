"""Per-context pipeline configuration."""

from __future__ import annotations

from dataclasses import dataclass, replace as _dc_replace
from typing import Any, Literal

from .input_convert import coerce_count, coerce_interval

UnknownPolicy = Literal["warn", "error", "ignore"]

_UNKNOWN_POLICIES = ("warn", "error", "ignore")


@dataclass(frozen=True)
class PipelineSettings:
    """Tunable limits and fallbacks used while preprocessing a plot call.

    Parameters
    ----------
    max_recipe_depth : int, default=8
        Number of chained recipe conversions allowed before dispatch gives up
        with :class:`~plotattrs.errors.RecipeCycleError`.
    default_samples : int, default=500
        Sample count for functions plotted over a two-endpoint domain when the
        call does not set ``samples``.
    default_domain : tuple[float, float], default=(-5.0, 5.0)
        Domain for functions when neither ``domain`` nor ``xlims`` is given.
    on_unknown : {"warn", "error", "ignore"}, default="warn"
        Reaction to attribute names that are neither canonical nor aliases.
    """

    max_recipe_depth: int = 8
    default_samples: int = 500
    default_domain: tuple[float, float] = (-5.0, 5.0)
    on_unknown: UnknownPolicy = "warn"

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "max_recipe_depth",
            coerce_count(self.max_recipe_depth, role="max_recipe_depth"),
        )
        object.__setattr__(
            self,
            "default_samples",
            coerce_count(self.default_samples, role="default_samples", minimum=2),
        )
        start, stop = coerce_interval(self.default_domain, role="default_domain")
        if not start < stop:
            raise ValueError(f"default_domain must satisfy start < stop, got {self.default_domain!r}")
        object.__setattr__(self, "default_domain", (start, stop))
        if self.on_unknown not in _UNKNOWN_POLICIES:
            raise ValueError(
                f"on_unknown must be one of {_UNKNOWN_POLICIES}, got {self.on_unknown!r}"
            )

    def replace(self, **changes: Any) -> "PipelineSettings":
        """Return a copy with ``changes`` applied (and validated)."""
        return _dc_replace(self, **changes)


__all__ = ["PipelineSettings", "UnknownPolicy"]
