"""
PyTorch convenience functions for fixedtensor.

This module converts between fixed-shape tensors and ``torch.Tensor``.

Example:
    >>> from fixedtensor.torch import from_torch, to_torch
    >>> import torch
    >>> t = from_torch(torch.eye(3))
    >>> type(t).__name__
    'Float32Matrix3x3'
    >>> to_torch(t).sum().item()
    3.0
"""

from typing import Optional, Union

import numpy as np

try:
    import torch
except ImportError:
    raise ImportError(
        "PyTorch is required to use fixedtensor.torch. "
        "Please install it with: pip install torch"
    )

from . import DTYPE_KIND_TO_TORCH, DTYPE_TORCH_TO_KIND, KINDS, SizedArray
from .numpy import from_numpy, matrix_class_for, to_numpy


def to_torch(t: SizedArray, device: Union[str, int] = "cpu") -> torch.Tensor:
    """
    Copies a tensor instance into a new ``torch.Tensor`` of the same shape.

    Args:
        t: A tensor instance.
        device: Target device. An int selects ``cuda:<n>``.

    Returns:
        A ``torch.Tensor`` with the matching torch dtype.

    Raises:
        TypeError: if the element kind has no torch counterpart.

    Example:
        >>> from fixedtensor.catalog import Int32Matrix2x2
        >>> to_torch(Int32Matrix2x2(1, 2, 3, 4)).dtype
        torch.int32
    """
    if isinstance(device, int):
        device = f"cuda:{device}"

    kind_name = t.kind.name
    torch_dtype = DTYPE_KIND_TO_TORCH.get(kind_name)
    if torch_dtype is None:
        raise TypeError(f"Unsupported element kind for torch: {kind_name}")

    array = to_numpy(t, copy=True)
    if torch_dtype == torch.bfloat16:
        # torch cannot wrap ml_dtypes arrays; bfloat16 -> float32 is exact
        tensor = torch.from_numpy(array.astype(np.float32)).to(torch.bfloat16)
    else:
        tensor = torch.from_numpy(array)
    return tensor.to(device)


def from_torch(tensor: torch.Tensor, cls: Optional[type] = None) -> SizedArray:
    """
    Copies a ``torch.Tensor`` into a tensor instance.

    Args:
        tensor: Source tensor, on any device.
        cls: Target tensor class. Defaults to a class matching the tensor's
            dtype and shape.

    Returns:
        A new instance of ``cls``.

    Raises:
        ShapeError: if the tensor's shape differs from ``cls.shape``.
        TypeError: if ``cls`` is omitted and the dtype is unsupported.
    """
    tensor = tensor.detach().cpu()
    if not tensor.is_contiguous():
        tensor = tensor.contiguous()

    if cls is None:
        kind_name = DTYPE_TORCH_TO_KIND.get(tensor.dtype)
        if kind_name is None or kind_name not in KINDS:
            raise TypeError(f"Unsupported torch dtype: {tensor.dtype}")
        cls = matrix_class_for(KINDS[kind_name].dtype, tuple(tensor.shape))

    return from_numpy(_torch_to_numpy(tensor), cls)


# --- Helper Functions ---


def _torch_to_numpy(tensor: torch.Tensor) -> np.ndarray:
    """Convert a CPU tensor to a numpy array, widening bfloat16 to float32."""
    if tensor.dtype == torch.bfloat16:
        return tensor.float().numpy()
    return tensor.numpy()


__all__ = [
    "to_torch",
    "from_torch",
]
