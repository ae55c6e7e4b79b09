"""Ready-made tensor classes for common shapes.

Every numeric kind, both 64-bit kinds and the generic kind are instantiated
for the shapes in :data:`SHAPES`. Classes are exposed as module attributes
named ``<Kind>Matrix<d0>x<d1>[x<d2>]``:

    >>> from fixedtensor.catalog import Float32Matrix3x3, GenericMatrix2x2
    >>> Float32Matrix3x3.shape
    (3, 3)
"""

from ._buffers import BUFFERS
from ._matrix import (
    create_bigint_matrix_class,
    create_generic_matrix_class,
    create_number_matrix_class,
)
from ._types import BIGINT, GENERIC, KINDS

SHAPES = [
    (2, 2),
    (2, 3),
    (3, 2),
    (3, 3),
    (4, 4),
    (2, 2, 2),
    (2, 3, 2),
    (3, 2, 2),
    (3, 3, 3),
    (4, 4, 4),
]

KIND_NAMES = [
    "Generic",
    "Int8",
    "Uint8",
    "Uint8Clamped",
    "Int16",
    "Uint16",
    "Int32",
    "Uint32",
    "Float32",
    "Float64",
    "BigInt64",
    "BigUint64",
]

# (kind name, shape) -> class
CATALOG = {}


def class_name(kind_name, shape):
    return f"{kind_name}Matrix{'x'.join(str(d) for d in shape)}"


def lookup(kind_name, shape):
    """Return the cataloged class for ``kind_name`` and ``shape``.

    Raises:
        KeyError: if the pair is not cataloged.
    """
    key = (kind_name, tuple(shape))
    if key not in CATALOG:
        raise KeyError(f"No cataloged tensor class for {kind_name} {list(shape)}")
    return CATALOG[key]


def _build(kind, shape):
    name = class_name(kind.name, shape)
    if kind.family == GENERIC:
        return create_generic_matrix_class(name, shape)
    if kind.family == BIGINT:
        return create_bigint_matrix_class(name, BUFFERS[kind.name], shape)
    return create_number_matrix_class(name, BUFFERS[kind.name], shape)


__all__ = ["CATALOG", "KIND_NAMES", "SHAPES", "class_name", "lookup"]

for _kind in (KINDS[n] for n in KIND_NAMES):
    for _shape in SHAPES:
        _cls = _build(_kind, _shape)
        CATALOG[(_kind.name, _shape)] = _cls
        globals()[_cls.__name__] = _cls
        __all__.append(_cls.__name__)
del _kind, _shape, _cls
