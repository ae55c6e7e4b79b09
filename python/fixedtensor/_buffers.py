"""Fixed-length homogeneous buffers backed by one-dimensional NumPy arrays.

Three families are provided:

- ``SizedArray`` holds arbitrary Python objects (``dtype=object``).
- Numeric buffers (``Int8SizedArray`` ... ``Float64SizedArray``) hold
  fixed-width integers or floats; assigned values are coerced by the
  buffer's :class:`~fixedtensor._types.ElementKind`.
- 64-bit buffers (``BigInt64SizedArray``, ``BigUint64SizedArray``) hold
  integers wrapped to 64 bits and always hand out exact Python ints.

Buffers never grow or shrink after construction.
"""

import operator
from itertools import islice

import numpy as np

from . import config
from ._flatten import is_iterable
from ._types import BIGINT, BIGINT_KINDS, GENERIC, KINDS, NUMBER, NUMBER_KINDS


class SizedArray:
    """Fixed-size array of arbitrary values.

    Args:
        size: Number of slots (non-negative int).
        init: ``None`` leaves every slot at the kind's zero (``None`` here),
            a callable is called with each index, an iterable is copied up
            to ``size`` items, anything else fills every slot.

    Example:
        >>> a = SizedArray(3, ["x", "y"])
        >>> a.tolist()
        ['x', 'y', None]
    """

    __slots__ = ("_data",)

    kind = KINDS["Generic"]

    def __init__(self, size, init=None):
        if isinstance(size, bool) or not isinstance(size, (int, np.integer)) or size < 0:
            raise TypeError("size must be a non-negative integer")
        size = int(size)
        data = np.full(size, self.kind.zero, dtype=self.kind.dtype)

        if init is None:
            pass
        elif callable(init):
            for i in range(size):
                data[i] = self._coerce(init(i))
        elif is_iterable(init):
            for i, v in enumerate(islice(init, size)):
                data[i] = self._coerce(v)
        else:
            data.fill(self._coerce(init))

        self._data = data

    @classmethod
    def from_iterable(cls, values):
        """Build a buffer sized to the input's length."""
        items = list(values)
        return cls(len(items), items)

    # ------------------------------------------------------------------
    # Element access
    # ------------------------------------------------------------------

    @classmethod
    def _coerce(cls, value):
        return cls.kind.coerce(value, config.STRICT)

    @staticmethod
    def _unbox(value):
        return value

    def _index(self, i):
        if isinstance(i, bool):
            raise TypeError("index must be an integer")
        try:
            i = operator.index(i)
        except TypeError:
            raise TypeError("index must be an integer") from None
        n = len(self._data)
        idx = n + i if i < 0 else i
        if idx < 0 or idx >= n:
            raise IndexError(f"Index {idx} out of bounds for length {n}")
        return idx

    @property
    def length(self):
        return len(self._data)

    def __len__(self):
        return len(self._data)

    def get(self, i):
        return self._unbox(self._data[self._index(i)])

    def set(self, i, value):
        self._data[self._index(i)] = self._coerce(value)
        return self

    def at(self, i):
        """Like :meth:`get` but returns ``None`` when ``i`` is out of range."""
        try:
            return self.get(i)
        except IndexError:
            return None

    def __getitem__(self, i):
        return self.get(i)

    def __setitem__(self, i, value):
        self.set(i, value)

    def __iter__(self):
        return map(self._unbox, self._data)

    def keys(self):
        return iter(range(len(self._data)))

    def values(self):
        return iter(self)

    def items(self):
        return enumerate(self)

    # ------------------------------------------------------------------
    # Whole-buffer helpers
    # ------------------------------------------------------------------

    def tolist(self):
        return list(self)

    def numpy(self, copy=True):
        """The backing array; ``copy=False`` returns a live view."""
        return self._data.copy() if copy else self._data

    def fill(self, value):
        self._data.fill(self._coerce(value))
        return self

    def clone(self):
        out = object.__new__(type(self))
        out._data = self._data.copy()
        return out

    def map(self, fn):
        """New buffer of the same class holding ``fn(value, index)``."""
        out = self.clone()
        for i, v in enumerate(self):
            out.set(i, fn(v, i))
        return out

    def equals(self, other, eps=0):
        try:
            n = len(other)
        except TypeError:
            return False
        if n != len(self):
            return False
        getter = other.get if hasattr(other, "get") else other.__getitem__
        for i, a in enumerate(self):
            b = getter(i)
            if eps == 0:
                if a is not b and a != b:
                    return False
            elif abs(a - b) > eps:
                return False
        return True

    def __eq__(self, other):
        if not isinstance(other, SizedArray):
            return NotImplemented
        return self.equals(other)

    __hash__ = None

    def __str__(self):
        return f"{type(self).__name__}({', '.join(str(v) for v in self)})"

    def __repr__(self):
        return (
            f"<{type(self).__name__} length={len(self)} "
            f"dtype='{self.kind.dtype}'>"
        )


class NumberSizedArray(SizedArray):
    """Base class of the fixed-width integer and float buffers."""

    __slots__ = ()

    kind = KINDS["Float64"]

    def _unbox(self, value):
        return int(value) if self.kind.is_integer else float(value)


class BigIntSizedArray(SizedArray):
    """Base class of the 64-bit integer buffers."""

    __slots__ = ()

    kind = KINDS["BigInt64"]

    @staticmethod
    def _unbox(value):
        return int(value)


def create_number_sized_array_class(name, kind):
    """Create a numeric buffer class for ``kind`` (a numeric ElementKind)."""
    if kind.family != NUMBER:
        raise TypeError(f"{kind!r} is not a numeric element kind")
    return type(name, (NumberSizedArray,), {"__slots__": (), "kind": kind})


def create_bigint_sized_array_class(name, kind):
    """Create a 64-bit integer buffer class for ``kind``."""
    if kind.family != BIGINT:
        raise TypeError(f"{kind!r} is not a 64-bit integer element kind")
    return type(name, (BigIntSizedArray,), {"__slots__": (), "kind": kind})


def register_number_kind(kind):
    """Register an extra numeric kind (e.g. bfloat16) and return its buffer class."""
    KINDS[kind.name] = kind
    NUMBER_KINDS.append(kind)
    cls = create_number_sized_array_class(f"{kind.name}SizedArray", kind)
    BUFFERS[kind.name] = cls
    return cls


BUFFERS = {"Generic": SizedArray}
for _kind in NUMBER_KINDS:
    BUFFERS[_kind.name] = create_number_sized_array_class(f"{_kind.name}SizedArray", _kind)
for _kind in BIGINT_KINDS:
    BUFFERS[_kind.name] = create_bigint_sized_array_class(f"{_kind.name}SizedArray", _kind)
del _kind

Int8SizedArray = BUFFERS["Int8"]
Uint8SizedArray = BUFFERS["Uint8"]
Uint8ClampedSizedArray = BUFFERS["Uint8Clamped"]
Int16SizedArray = BUFFERS["Int16"]
Uint16SizedArray = BUFFERS["Uint16"]
Int32SizedArray = BUFFERS["Int32"]
Uint32SizedArray = BUFFERS["Uint32"]
Float32SizedArray = BUFFERS["Float32"]
Float64SizedArray = BUFFERS["Float64"]
BigInt64SizedArray = BUFFERS["BigInt64"]
BigUint64SizedArray = BUFFERS["BigUint64"]
