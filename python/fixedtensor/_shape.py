"""Row-major shape and stride helpers shared by every tensor factory."""

import operator
from functools import reduce

import numpy as np

from . import CoordinateError


def product(dims):
    """Total number of elements for ``dims`` (1 for an empty shape)."""
    return reduce(operator.mul, dims, 1)


def compute_strides(dims):
    """Row-major strides: the last axis is contiguous."""
    strides = [0] * len(dims)
    s = 1
    for i in range(len(dims) - 1, -1, -1):
        strides[i] = s
        s *= dims[i]
    return tuple(strides)


def validate_shape(dims):
    """Normalize ``dims`` to a tuple of positive ints.

    Raises:
        ValueError: if the shape is empty or holds a non-integer or a
            dimension smaller than 1.
    """
    if isinstance(dims, (str, bytes)):
        raise ValueError(f"Invalid shape {dims!r}")
    shape = tuple(dims)
    if not shape:
        raise ValueError("Shape must have at least one dimension")
    for axis, d in enumerate(shape):
        if isinstance(d, bool):
            raise ValueError(f"Invalid dimension at axis {axis}: {d!r}")
        try:
            d = operator.index(d)
        except TypeError:
            raise ValueError(f"Invalid dimension at axis {axis}: {d!r}") from None
        if d < 1:
            raise ValueError(f"Dimension at axis {axis} must be >= 1, got {d}")
    return tuple(operator.index(d) for d in shape)


def _as_whole_number(c):
    if isinstance(c, bool):
        return None
    try:
        return operator.index(c)
    except TypeError:
        pass
    if isinstance(c, (float, np.floating)) and float(c).is_integer():
        return int(c)
    return None


def coords_to_index(dims, strides, coords):
    """Translate a multi-index into a flat buffer offset.

    Raises:
        CoordinateError: on wrong arity, or a coordinate that is not a whole
            number or lies outside ``[0, dims[axis])``.
    """
    if len(coords) != len(dims):
        raise CoordinateError(f"Expected {len(dims)} indices, got {len(coords)}")
    idx = 0
    for axis, (c, d, s) in enumerate(zip(coords, dims, strides)):
        whole = _as_whole_number(c)
        if whole is None or whole < 0 or whole >= d:
            raise CoordinateError(
                f"Index out of bounds at axis {axis}: {c!r} not in [0, {d})"
            )
        idx += whole * s
    return idx


def to_nested(flat, dims, offset=0, strides=None, axis=0):
    """Rebuild nested lists shaped like ``dims`` from a flat ``get(i)`` source."""
    if strides is None:
        strides = compute_strides(dims)
    length = dims[axis]
    step = strides[axis]
    if axis == len(dims) - 1:
        return [flat.get(offset + i * step) for i in range(length)]
    return [
        to_nested(flat, dims, offset + i * step, strides, axis + 1)
        for i in range(length)
    ]
