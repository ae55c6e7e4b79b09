"""
fixedtensor - Fixed-shape tensor classes over homogeneous NumPy buffers.

This package synthesizes tensor/matrix classes from an element kind
(arbitrary objects, fixed-width integers or floats, 64-bit integers) and a
static shape. Instances own one flat buffer of exactly ``prod(shape)``
elements; shape and strides live on the class.

Example:
    >>> import fixedtensor
    >>> from fixedtensor.catalog import Float64Matrix2x2
    >>> a = Float64Matrix2x2.from_values([[1, 2], [3, 4]])
    >>> a.get_n(1, 0)
    3.0
    >>> (a @ Float64Matrix2x2(5, 6, 7, 8)).to_nested()
    [[19.0, 22.0], [43.0, 50.0]]
"""

import numpy as np

# --- Optional ml_dtypes for a bfloat16 element kind ---
try:
    from ml_dtypes import bfloat16 as np_bfloat16

    ML_DTYPES_AVAILABLE = True
except ImportError:
    np_bfloat16 = None
    ML_DTYPES_AVAILABLE = False

# --- Optional PyTorch Import ---
try:
    import importlib

    _torch = importlib.import_module("torch")
    TORCH_AVAILABLE = True
except ImportError:
    _torch = None
    TORCH_AVAILABLE = False


class FixedTensorError(Exception):
    """Base class for fixedtensor errors."""

    pass


class CoordinateError(FixedTensorError, IndexError):
    """Wrong number of coordinates, or a coordinate outside its axis."""

    pass


class ShapeError(FixedTensorError, ValueError):
    """Operand shapes are incompatible with the requested operation."""

    pass


# Submodules import the error classes above from the package.
from . import config  # noqa: E402
from ._types import ElementKind, KINDS, NUMBER  # noqa: E402
from ._buffers import (  # noqa: E402
    BUFFERS,
    BigInt64SizedArray,
    BigIntSizedArray,
    BigUint64SizedArray,
    Float32SizedArray,
    Float64SizedArray,
    Int16SizedArray,
    Int32SizedArray,
    Int8SizedArray,
    NumberSizedArray,
    SizedArray,
    Uint16SizedArray,
    Uint32SizedArray,
    Uint8ClampedSizedArray,
    Uint8SizedArray,
    create_bigint_sized_array_class,
    create_number_sized_array_class,
    register_number_kind,
)
from ._matrix import (  # noqa: E402
    BigIntMatrix,
    GenericMatrix,
    NumberMatrix,
    create_bigint_matrix_class,
    create_generic_matrix_class,
    create_number_matrix_class,
)

if ML_DTYPES_AVAILABLE:
    BFloat16SizedArray = register_number_kind(
        ElementKind("BFloat16", np_bfloat16, NUMBER)
    )
else:
    BFloat16SizedArray = None


# --- Type Mappings (used by numpy.py and torch.py) ---
DTYPE_NP_TO_KIND = {
    np.dtype("float64"): "Float64",
    np.dtype("float32"): "Float32",
    np.dtype("int64"): "BigInt64",
    np.dtype("int32"): "Int32",
    np.dtype("int16"): "Int16",
    np.dtype("int8"): "Int8",
    np.dtype("uint64"): "BigUint64",
    np.dtype("uint32"): "Uint32",
    np.dtype("uint16"): "Uint16",
    np.dtype("uint8"): "Uint8",
    np.dtype("object"): "Generic",
}
if ML_DTYPES_AVAILABLE:
    DTYPE_NP_TO_KIND[np.dtype(np_bfloat16)] = "BFloat16"
DTYPE_KIND_TO_NP = {v: k for k, v in DTYPE_NP_TO_KIND.items()}
DTYPE_KIND_TO_NP["Uint8Clamped"] = np.dtype("uint8")

if TORCH_AVAILABLE:
    # uint16/uint32/uint64 have no general torch arithmetic; those kinds stay numpy-only
    DTYPE_TORCH_TO_KIND = {
        _torch.float64: "Float64",
        _torch.float32: "Float32",
        _torch.bfloat16: "BFloat16",
        _torch.int64: "BigInt64",
        _torch.int32: "Int32",
        _torch.int16: "Int16",
        _torch.int8: "Int8",
        _torch.uint8: "Uint8",
    }
    DTYPE_KIND_TO_TORCH = {v: k for k, v in DTYPE_TORCH_TO_KIND.items()}
    DTYPE_KIND_TO_TORCH["Uint8Clamped"] = _torch.uint8


__all__ = [
    "BFloat16SizedArray",
    "BUFFERS",
    "BigInt64SizedArray",
    "BigIntMatrix",
    "BigIntSizedArray",
    "BigUint64SizedArray",
    "CoordinateError",
    "ElementKind",
    "FixedTensorError",
    "Float32SizedArray",
    "Float64SizedArray",
    "GenericMatrix",
    "Int16SizedArray",
    "Int32SizedArray",
    "Int8SizedArray",
    "KINDS",
    "NumberMatrix",
    "NumberSizedArray",
    "ShapeError",
    "SizedArray",
    "Uint16SizedArray",
    "Uint32SizedArray",
    "Uint8ClampedSizedArray",
    "Uint8SizedArray",
    "config",
    "create_bigint_matrix_class",
    "create_bigint_sized_array_class",
    "create_generic_matrix_class",
    "create_number_matrix_class",
    "create_number_sized_array_class",
]
