# Runtime globals. Other modules must read them as `config.STRICT`,
# NOT `from config import STRICT`, so that set_strict() is observed.

import os
from contextlib import contextmanager

_TRUTHY = {"1", "true", "yes", "on"}

# Lenient mode pads/truncates input and coerces non-numeric scalars to zero.
# Strict mode raises instead.
STRICT = os.getenv("FIXEDTENSOR_STRICT", "").strip().lower() in _TRUTHY


def set_strict(flag):
    """Switch the process-wide normalization mode."""
    global STRICT
    STRICT = bool(flag)


def is_strict():
    return STRICT


def resolve_strict(strict):
    """An explicit per-call ``strict`` wins over the global setting."""
    return STRICT if strict is None else bool(strict)


@contextmanager
def strict_mode(flag=True):
    """Temporarily enable (or disable) strict mode.

    Example:
        >>> from fixedtensor import config
        >>> from fixedtensor.catalog import Float32Matrix2x2
        >>> with config.strict_mode():
        ...     Float32Matrix2x2.from_values([1, 2, 3])  # raises ValueError
    """
    previous = STRICT
    set_strict(flag)
    try:
        yield
    finally:
        set_strict(previous)
