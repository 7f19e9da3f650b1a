"""Scalar coercion for user-supplied numeric settings.

Domains, sample counts and limits may be passed as numbers or as text such as
``"2*pi"``. Text that is not a plain literal is parsed with SymPy and
evaluated, so notebook users can write symbolic endpoints.
"""

from __future__ import annotations

import numbers
from typing import Any

import sympy as sp


def coerce_real(obj: Any, *, role: str = "value") -> float:
    """Convert ``obj`` to a real ``float``.

    Parameters
    ----------
    obj:
        A real number, a SymPy number/expression without free symbols, or a
        string that parses to one.
    role:
        Name used in error messages (e.g. ``"domain start"``).

    Raises
    ------
    ValueError
        If ``obj`` is not real-valued or cannot be parsed.
    """
    if isinstance(obj, bool):
        raise ValueError(f"{role} must be a real number, got bool {obj!r}")

    if isinstance(obj, numbers.Real):
        return float(obj)

    if isinstance(obj, str):
        s = obj.strip()
        if s == "":
            raise ValueError(f"{role} must not be an empty string")
        try:
            return float(s)
        except ValueError:
            pass
        try:
            obj = sp.sympify(s)
        except (sp.SympifyError, SyntaxError, TypeError) as e:
            raise ValueError(f"Could not convert {role} {s!r} to a real number") from e

    if isinstance(obj, sp.Basic):
        if obj.free_symbols:
            raise ValueError(
                f"{role} {obj!r} has free symbols {sorted(map(str, obj.free_symbols))}"
            )
        val = complex(obj.evalf())
        if val.imag != 0:
            raise ValueError(f"{role} {obj!r} is not real (imaginary part is non-zero)")
        return float(val.real)

    raise ValueError(f"Could not convert {role} {obj!r} to a real number")


def coerce_count(obj: Any, *, role: str = "count", minimum: int = 1) -> int:
    """Convert ``obj`` to an ``int`` no smaller than ``minimum``.

    Floats must be exact integers (``3.0`` is accepted, ``3.5`` is not).
    """
    val = coerce_real(obj, role=role)
    if not val.is_integer():
        raise ValueError(f"{role} must be an integer, got {obj!r}")
    out = int(val)
    if out < minimum:
        raise ValueError(f"{role} must be >= {minimum}, got {out}")
    return out


def coerce_interval(value: Any, *, role: str = "range") -> tuple[float, float]:
    """Convert a two-element ``(start, stop)`` pair to floats."""
    try:
        start, stop = value
    except (TypeError, ValueError) as e:
        raise ValueError(f"{role} must be a (start, stop) pair, got {value!r}") from e
    return coerce_real(start, role=f"{role} start"), coerce_real(stop, role=f"{role} stop")


__all__ = ["coerce_count", "coerce_interval", "coerce_real"]
