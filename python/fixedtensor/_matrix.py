"""Factories that synthesize fixed-shape tensor classes.

Each factory returns a new class combining one of the tensor mixins below
with an element-kind buffer class. Shape, size and strides are class
attributes shared by every instance; an instance owns only its buffer.

Example:
    >>> from fixedtensor import Float32SizedArray, create_number_matrix_class
    >>> M = create_number_matrix_class("M", Float32SizedArray, [2, 2])
    >>> a = M.from_values([[1, 2], [3, 4]])
    >>> (a @ M(5, 6, 7, 8)).tolist()
    [19.0, 22.0, 43.0, 50.0]
"""

import logging
import math
from typing import Iterable, Optional, Sequence

import numpy as np

from . import ShapeError, config
from ._buffers import BigIntSizedArray, NumberSizedArray, SizedArray
from ._flatten import (
    fit_to_size,
    flatten_to_shape,
    is_iterable,
    looks_nested,
    to_bigint,
    to_number,
)
from ._shape import compute_strides, coords_to_index, product, to_nested, validate_shape

logger = logging.getLogger(__name__)


class GenericMatrix:
    """Structural operations shared by every synthesized tensor class."""

    __slots__ = ()

    shape = None
    size = None
    strides = None

    def __init__(self, *values):
        cls = type(self)
        if values and len(values) != cls.size:
            if config.STRICT:
                raise ValueError(f"Expected {cls.size} values, got {len(values)}")
            logger.debug(
                "%s: fitting %d constructor values to %d", cls.__name__, len(values), cls.size
            )
        super().__init__(cls.size, fit_to_size(list(values), cls.size, cls.kind.zero))

    def get_shape(self):
        return self.shape

    def index_of(self, *coords):
        return coords_to_index(self.shape, self.strides, coords)

    def get_n(self, *coords):
        return self.get(self.index_of(*coords))

    def set_n(self, value, *coords):
        self.set(self.index_of(*coords), value)

    def to_nested(self):
        return to_nested(self, self.shape, strides=self.strides)

    # ------------------------------------------------------------------
    # Builders
    # ------------------------------------------------------------------

    @classmethod
    def from_values(cls, values, strict: Optional[bool] = None):
        """Build an instance from flat, nested or arbitrary iterable input.

        Input with fewer scalars than ``size`` is padded with the kind's zero,
        longer input is truncated. Nesting is detected by
        :func:`~fixedtensor._flatten.looks_nested`.

        Raises:
            ValueError, TypeError: in strict mode only.
        """
        strict = config.resolve_strict(strict)
        pad = cls.kind.zero
        if not is_iterable(values):
            flat = flatten_to_shape(values, cls.shape, pad, strict)
        else:
            if not isinstance(values, (Sequence, np.ndarray)):
                values = list(values)
            if looks_nested(values):
                flat = flatten_to_shape(values, cls.shape, pad, strict)
            else:
                if len(values) != cls.size:
                    logger.debug(
                        "%s: fitting %d flat values to %d", cls.__name__, len(values), cls.size
                    )
                flat = fit_to_size(list(values), cls.size, pad, strict)
        return cls._from_flat(flat, strict)

    @classmethod
    def from_iterable(cls, values: Iterable, strict: Optional[bool] = None):
        """Build an instance from a flat iterable, truncated or padded to ``size``."""
        strict = config.resolve_strict(strict)
        flat = fit_to_size(list(values), cls.size, cls.kind.zero, strict)
        return cls._from_flat(flat, strict)

    @classmethod
    def _from_flat(cls, flat, strict):
        return cls(*[cls.kind.coerce(v, strict) for v in flat])

    # ------------------------------------------------------------------
    # Comparison and display
    # ------------------------------------------------------------------

    def __eq__(self, other):
        if not isinstance(other, SizedArray):
            return NotImplemented
        if getattr(type(other), "shape", None) != self.shape:
            return False
        return self.equals(other)

    __hash__ = None

    def __repr__(self):
        return (
            f"<{type(self).__name__} shape={list(self.shape)} "
            f"dtype='{self.kind.dtype}'>"
        )


class _ArithmeticMixin(GenericMatrix):
    """Element-wise arithmetic shared by the numeric and 64-bit families."""

    __slots__ = ()

    def _operand(self, other):
        if len(other) != self.size:
            raise ShapeError(
                f"Operand has {len(other)} elements, expected {self.size}"
            )
        return [other.get(i) for i in range(self.size)]

    def add(self, other):
        b = self._operand(other)
        return type(self)(*[x + y for x, y in zip(self, b)])

    def sub(self, other):
        b = self._operand(other)
        return type(self)(*[x - y for x, y in zip(self, b)])

    def _scalar(self, s):
        raise NotImplementedError

    def scale(self, s):
        k = self._scalar(s)
        return type(self)(*[x * k for x in self])

    def dot(self, other):
        """Inner product over every flat position (not restricted to vectors)."""
        b = self._operand(other)
        return sum(x * y for x, y in zip(self, b))

    def __add__(self, other):
        if not isinstance(other, SizedArray):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other):
        if not isinstance(other, SizedArray):
            return NotImplemented
        return self.sub(other)

    def __mul__(self, s):
        if isinstance(s, SizedArray):
            return NotImplemented
        return self.scale(s)

    __rmul__ = __mul__


class NumberMatrix(_ArithmeticMixin):
    """Tensor over a fixed-width integer or float buffer."""

    __slots__ = ()

    def _scalar(self, s):
        try:
            return to_number(s)
        except TypeError:
            if config.STRICT:
                raise
            return math.nan

    def magnitude(self):
        """Frobenius norm for rank-2 shapes."""
        return math.sqrt(sum(x * x for x in self))

    def normalized(self):
        """Unit tensor; the zero tensor comes back unchanged."""
        return self.scale(1 / (self.magnitude() or 1))

    def matmul(self, other):
        """Rank-2 matrix product returning an instance of a new class.

        The result class has shape ``[self.rows, other.cols]``, the same
        buffer kind as ``self`` and is named after both operand classes.

        Raises:
            ShapeError: if either operand is not rank 2 or the inner
                dimensions differ.
            TypeError: if ``other`` is not a numeric tensor.
        """
        if len(self.shape) != 2:
            raise ShapeError("matmul is only available for 2D matrices.")
        if not isinstance(other, NumberMatrix):
            raise TypeError(
                f"Right-hand operand must be a numeric tensor, got {type(other).__name__}"
            )
        b_shape = type(other).shape
        if b_shape is None:
            raise ShapeError("Right-hand matrix must have a static shape.")
        if len(b_shape) != 2:
            raise ShapeError("Right-hand matrix must be 2D.")
        ar, ac = self.shape
        br, bc = b_shape
        if ac != br:
            raise ShapeError(f"Shape mismatch for matmul: [{ar}x{ac}] x [{br}x{bc}]")

        name = f"{type(self).__name__}x{type(other).__name__}"
        logger.debug("matmul: synthesizing %s for shape [%d, %d]", name, ar, bc)
        result_cls = create_number_matrix_class(name, type(self)._buffer_base, (ar, bc))
        out = result_cls()
        for i in range(ar):
            for k in range(bc):
                acc = 0
                for j in range(ac):
                    acc += self.get_n(i, j) * other.get_n(j, k)
                out.set_n(acc, i, k)
        return out

    def __matmul__(self, other):
        if not isinstance(other, SizedArray):
            return NotImplemented
        return self.matmul(other)


class BigIntMatrix(_ArithmeticMixin):
    """Tensor over a 64-bit integer buffer; arithmetic uses exact ints."""

    __slots__ = ()

    def _scalar(self, s):
        try:
            return to_bigint(s)
        except (TypeError, ValueError):
            if config.STRICT:
                raise
            return 0

    def length_approx(self):
        # exact sum of squares; precision is only lost in the final sqrt
        acc = sum(x * x for x in self)
        return math.sqrt(float(acc))


def _synthesize(name, mixin, base, dims):
    shape = validate_shape(dims)
    cls = type(
        name,
        (mixin, base),
        {
            "__slots__": (),
            "__module__": __name__,
            "shape": shape,
            "size": product(shape),
            "strides": compute_strides(shape),
            "_buffer_base": base,
        },
    )
    logger.debug("Synthesized %s: shape=%s kind=%s", name, list(shape), base.kind.name)
    return cls


def create_generic_matrix_class(name: str, dims: Sequence[int]) -> type:
    """Create a tensor class over arbitrary values (no arithmetic).

    Args:
        name: Class name of the new type.
        dims: Static shape, e.g. ``[2, 3]``.

    Raises:
        ValueError: if ``dims`` is not a valid shape.
    """
    return _synthesize(name, GenericMatrix, SizedArray, dims)


def create_number_matrix_class(name: str, base: type, dims: Sequence[int]) -> type:
    """Create a numeric tensor class.

    Args:
        name: Class name of the new type.
        base: Numeric buffer class, e.g. ``Float32SizedArray``.
        dims: Static shape, e.g. ``[3, 3]``.

    Raises:
        TypeError: if ``base`` is not a numeric buffer class.
        ValueError: if ``dims`` is not a valid shape.
    """
    if not (isinstance(base, type) and issubclass(base, NumberSizedArray)):
        raise TypeError(f"base must be a numeric buffer class, got {base!r}")
    return _synthesize(name, NumberMatrix, base, dims)


def create_bigint_matrix_class(name: str, base: type, dims: Sequence[int]) -> type:
    """Create a 64-bit integer tensor class.

    Args:
        name: Class name of the new type.
        base: ``BigInt64SizedArray`` or ``BigUint64SizedArray``.
        dims: Static shape.

    Raises:
        TypeError: if ``base`` is not a 64-bit buffer class.
        ValueError: if ``dims`` is not a valid shape.
    """
    if not (isinstance(base, type) and issubclass(base, BigIntSizedArray)):
        raise TypeError(f"base must be a 64-bit integer buffer class, got {base!r}")
    return _synthesize(name, BigIntMatrix, base, dims)
