"""
NumPy convenience functions for fixedtensor.

This module converts between fixed-shape tensors and NumPy arrays, and
synthesizes tensor classes from a NumPy dtype and shape.

Example:
    >>> from fixedtensor.numpy import from_numpy, to_numpy
    >>> import numpy as np
    >>> t = from_numpy(np.arange(6, dtype=np.float32).reshape(2, 3))
    >>> type(t).__name__
    'Float32Matrix2x3'
    >>> to_numpy(t).shape
    (2, 3)
"""

from typing import Optional, Sequence

import numpy as np

from . import (
    DTYPE_KIND_TO_NP,
    DTYPE_NP_TO_KIND,
    ML_DTYPES_AVAILABLE,
    ShapeError,
    SizedArray,
    np_bfloat16,
)
from ._buffers import BUFFERS
from ._matrix import (
    create_bigint_matrix_class,
    create_generic_matrix_class,
    create_number_matrix_class,
)
from ._types import BIGINT, GENERIC, KINDS


def to_numpy(t: SizedArray, copy: bool = True) -> np.ndarray:
    """
    Returns the tensor's elements as an array shaped like the tensor.

    Args:
        t: A tensor instance (or a plain buffer, which comes back 1-D).
        copy: If True (default), the array is independent of ``t``. If False,
            the array is a live view: writes through it are visible in ``t``
            and bypass element coercion.

    Returns:
        An ``np.ndarray`` with the buffer's dtype.

    Example:
        >>> from fixedtensor.catalog import Int32Matrix2x2
        >>> to_numpy(Int32Matrix2x2(1, 2, 3, 4))
        array([[1, 2],
               [3, 4]], dtype=int32)
    """
    if not isinstance(t, SizedArray):
        raise TypeError(f"Expected a fixedtensor buffer, got {type(t).__name__}")
    shape = getattr(type(t), "shape", None) or (len(t),)
    return t.numpy(copy=copy).reshape(shape)


def matrix_class_for(
    dtype, shape: Sequence[int], name: Optional[str] = None
) -> type:
    """
    Returns a tensor class for a NumPy dtype and shape.

    When ``name`` is omitted and the catalog has a class for the pair, that
    class is returned; otherwise a new one is synthesized.

    Args:
        dtype: Anything ``np.dtype`` accepts, e.g. ``np.float32``.
        shape: Static shape of the class.
        name: Class name. Defaults to ``<Kind>Matrix<d0>x<d1>...``.

    Returns:
        A tensor class.

    Raises:
        TypeError: if the dtype has no element kind.
    """
    from .catalog import CATALOG, class_name

    kind_name = _kind_name_for(dtype)
    shape = tuple(shape)
    if name is None:
        cached = CATALOG.get((kind_name, shape))
        if cached is not None:
            return cached
        name = class_name(kind_name, shape)

    kind = KINDS[kind_name]
    if kind.family == GENERIC:
        return create_generic_matrix_class(name, shape)
    if kind.family == BIGINT:
        return create_bigint_matrix_class(name, BUFFERS[kind_name], shape)
    return create_number_matrix_class(name, BUFFERS[kind_name], shape)


def from_numpy(array: np.ndarray, cls: Optional[type] = None) -> SizedArray:
    """
    Loads an array into a tensor instance.

    Values pass through the target kind's coercion, so integers wrap and
    floats round exactly as they would on assignment.

    Args:
        array: Source array.
        cls: Target tensor class. Defaults to :func:`matrix_class_for` of the
            array's dtype and shape.

    Returns:
        A new instance of ``cls``.

    Raises:
        ShapeError: if ``array.shape`` differs from ``cls.shape``.
        TypeError: if ``cls`` is omitted and the dtype has no element kind.
    """
    array = np.asarray(array)
    if cls is None:
        cls = matrix_class_for(array.dtype, array.shape)
    elif tuple(array.shape) != cls.shape:
        raise ShapeError(
            f"Cannot load array of shape {list(array.shape)} "
            f"into {cls.__name__} {list(cls.shape)}"
        )
    return cls.from_iterable(_scalars(array))


# --- Helper Functions ---


def _kind_name_for(dtype) -> str:
    """Maps a NumPy dtype to an element kind name."""
    dt = np.dtype(dtype)
    if dt not in DTYPE_NP_TO_KIND:
        supported = ", ".join(sorted({str(d) for d in DTYPE_KIND_TO_NP.values()}))
        raise TypeError(f"Unsupported dtype {dt} (supported: {supported})")
    return DTYPE_NP_TO_KIND[dt]


def _scalars(array: np.ndarray) -> list:
    """Flat list of Python scalars in row-major order."""
    flat = array.reshape(-1)
    if ML_DTYPES_AVAILABLE and flat.dtype == np_bfloat16:
        flat = flat.astype(np.float32)
    return flat.tolist()


__all__ = [
    "to_numpy",
    "matrix_class_for",
    "from_numpy",
]
