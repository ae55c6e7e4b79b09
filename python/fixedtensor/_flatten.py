"""Flattening of nested input and scalar coercion helpers."""

import math
import numbers
from itertools import islice

import numpy as np

from ._shape import product


def is_iterable(x):
    """True for containers we may descend into; strings and 0-d arrays are scalars."""
    if isinstance(x, (str, bytes, bytearray)):
        return False
    if isinstance(x, np.ndarray):
        return x.ndim > 0
    try:
        iter(x)
    except TypeError:
        return False
    return True


def looks_nested(values):
    """Heuristic deciding whether ``values`` is nested rather than flat.

    ``values`` counts as nested when it is iterable and its first item is
    iterable too. A flat sequence of iterable scalars is misread as nested;
    callers that need exact rank checks should flatten themselves.
    ``values`` must be re-iterable (a sequence or an array).
    """
    if not is_iterable(values):
        return False
    for first in values:
        return is_iterable(first)
    return False


def iter_scalars(value):
    """Yield scalars depth-first, left to right."""
    if not is_iterable(value):
        yield value
        return
    for item in value:
        yield from iter_scalars(item)


def flatten_to_shape(value, dims, pad, strict=False):
    """Flatten ``value`` into exactly ``product(dims)`` items.

    Short input is right-padded with ``pad``; excess input is never read.

    Raises:
        ValueError: in strict mode, if the input holds a different number
            of scalars than the shape requires.
    """
    total = product(dims)
    if strict:
        flat = list(iter_scalars(value))
        if len(flat) != total:
            raise ValueError(
                f"Expected {total} values for shape {list(dims)}, got {len(flat)}"
            )
        return flat
    flat = list(islice(iter_scalars(value), total))
    if len(flat) < total:
        flat.extend([pad] * (total - len(flat)))
    return flat


def fit_to_size(items, size, pad, strict=False):
    """Truncate or right-pad a flat list to ``size``."""
    if strict and len(items) != size:
        raise ValueError(f"Expected {size} values, got {len(items)}")
    flat = list(items[:size])
    if len(flat) < size:
        flat.extend([pad] * (size - len(flat)))
    return flat


def to_number(x):
    """Coerce ``x`` to a Python int or float.

    Numeric strings are parsed after stripping whitespace. The empty string
    is 0. Accepted forms are decimal ints and floats (with an optional sign
    and exponent), ``inf``/``nan`` spellings that :func:`float` takes, and
    unsigned ``0x``/``0o``/``0b`` literals. Digit separators (``1_000``) and
    signed prefixed literals (``-0x10``) are rejected.

    Raises:
        TypeError: if ``x`` is not a number or a numeric string.
    """
    if isinstance(x, np.ndarray) and x.ndim == 0:
        x = x.item()
    if isinstance(x, (bool, np.bool_)):
        return int(x)
    if isinstance(x, np.generic):
        x = x.item()
    if isinstance(x, (int, float)):
        return x
    if isinstance(x, str):
        s = x.strip()
        if not s:
            return 0
        if "_" in s:
            raise TypeError(f"Cannot convert {x!r} to a number")
        try:
            return float(s)
        except ValueError:
            pass
        if s[:2].lower() in ("0x", "0o", "0b"):
            try:
                return int(s, 0)
            except ValueError:
                pass
        raise TypeError(f"Cannot convert {x!r} to a number")
    if isinstance(x, numbers.Real):
        return float(x)
    raise TypeError(f"Cannot convert {type(x).__name__} to a number")


def to_bigint(x):
    """Coerce ``x`` to an exact Python int.

    Floats are truncated toward zero; strings accept an optional
    ``0x``/``0o``/``0b`` prefix and are otherwise read as base 10.

    Raises:
        ValueError: for NaN/infinite floats and unparsable strings.
        TypeError: for anything else that is not integral.
    """
    if isinstance(x, np.ndarray) and x.ndim == 0:
        x = x.item()
    if isinstance(x, (bool, np.bool_)):
        return int(x)
    if isinstance(x, np.generic):
        x = x.item()
    if isinstance(x, int):
        return x
    if isinstance(x, float):
        if not math.isfinite(x):
            raise ValueError(f"Cannot convert {x!r} to bigint")
        return int(x)
    if isinstance(x, str):
        s = x.strip()
        if not s:
            return 0
        body = s.lstrip("+-")
        if body[:2].lower() in ("0x", "0o", "0b"):
            return int(s, 0)
        return int(s, 10)
    if isinstance(x, numbers.Integral):
        return int(x)
    raise TypeError("Cannot convert value to bigint")
