"""Element kinds: the scalar families a tensor buffer can hold."""

import math

import numpy as np

from ._flatten import to_bigint, to_number

GENERIC = "generic"
NUMBER = "number"
BIGINT = "bigint"


class ElementKind:
    """Describes one element kind and how scalars are coerced into it.

    Integer kinds wrap out-of-range values modulo 2**bits, the clamped kind
    saturates to [0, 255], float kinds round to the dtype's precision and
    64-bit kinds take exact Python ints wrapped to 64 bits.
    """

    __slots__ = ("name", "dtype", "family", "zero", "bits", "signed", "clamped")

    def __init__(self, name, dtype, family, *, clamped=False):
        self.name = name
        self.dtype = np.dtype(dtype)
        self.family = family
        self.clamped = clamped
        if family == GENERIC:
            self.zero = None
            self.bits = None
            self.signed = None
        elif np.issubdtype(self.dtype, np.integer):
            self.zero = 0
            self.bits = self.dtype.itemsize * 8
            self.signed = np.issubdtype(self.dtype, np.signedinteger)
        else:
            # float32/float64, or an extension float such as bfloat16
            self.zero = 0.0
            self.bits = None
            self.signed = True

    @property
    def is_integer(self):
        return self.bits is not None

    def coerce(self, value, strict=False):
        """Convert ``value`` to this kind.

        Raises:
            TypeError, ValueError: in strict mode, for values that would
                otherwise be replaced by zero.
        """
        if self.family == GENERIC:
            return value
        if self.family == BIGINT:
            try:
                v = to_bigint(value)
            except (TypeError, ValueError):
                if strict:
                    raise
                return 0
            return self._wrap(v)

        try:
            v = to_number(value)
        except TypeError:
            if strict:
                raise
            return self.zero
        if self.clamped:
            if isinstance(v, float) and math.isnan(v):
                return 0
            return int(round(min(max(v, 0), 255)))
        if self.is_integer:
            if isinstance(v, float):
                if not math.isfinite(v):
                    return 0
                v = int(v)
            return self._wrap(v)
        try:
            v = float(v)
        except OverflowError:
            v = math.inf if v > 0 else -math.inf
        with np.errstate(over="ignore"):
            return float(self.dtype.type(v))

    def _wrap(self, v):
        mod = 1 << self.bits
        v %= mod
        if self.signed and v >= mod >> 1:
            v -= mod
        return v

    def __repr__(self):
        return (
            f"<ElementKind name='{self.name}' dtype='{self.dtype}' "
            f"family='{self.family}'>"
        )


KINDS = {
    "Generic": ElementKind("Generic", object, GENERIC),
    "Int8": ElementKind("Int8", np.int8, NUMBER),
    "Uint8": ElementKind("Uint8", np.uint8, NUMBER),
    "Uint8Clamped": ElementKind("Uint8Clamped", np.uint8, NUMBER, clamped=True),
    "Int16": ElementKind("Int16", np.int16, NUMBER),
    "Uint16": ElementKind("Uint16", np.uint16, NUMBER),
    "Int32": ElementKind("Int32", np.int32, NUMBER),
    "Uint32": ElementKind("Uint32", np.uint32, NUMBER),
    "Float32": ElementKind("Float32", np.float32, NUMBER),
    "Float64": ElementKind("Float64", np.float64, NUMBER),
    "BigInt64": ElementKind("BigInt64", np.int64, BIGINT),
    "BigUint64": ElementKind("BigUint64", np.uint64, BIGINT),
}

NUMBER_KINDS = [k for k in KINDS.values() if k.family == NUMBER]
BIGINT_KINDS = [k for k in KINDS.values() if k.family == BIGINT]
