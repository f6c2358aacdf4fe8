"""Contracts with external collaborators.

Numeric kernels (BLAS, LAPACK, FFT libraries) consume a :class:`KernelView`, a raw
element pointer plus the dimension and stride description of an array. File-format codecs
consume an :class:`ArrayPayload` from :func:`serialize` and hand described buffers back
through :func:`deserialize`.
"""

from __future__ import annotations

from typing import Any, NamedTuple

import numpy as np
import numpy.typing as npt
from numcodecs.compat import ensure_bytes, ensure_contiguous_ndarray_like, ensure_ndarray_like

from mrarray.core import Array
from mrarray.errors import ShapeError
from mrarray.util import DimsLike, normalize_dtype

__all__ = [
    "ArrayPayload",
    "KernelView",
    "deserialize",
    "kernel_view",
    "serialize",
    "shape_compatible",
]


class KernelView(NamedTuple):
    ptr: int
    dims: tuple[int, ...]
    strides: tuple[int, ...]  # in elements
    dtype: np.dtype[Any]
    itemsize: int
    nbytes: int


class ArrayPayload(NamedTuple):
    dims: tuple[int, ...]
    dtype: str
    data: npt.NDArray[Any]
    res: tuple[float, ...]
    name: str | None

    def to_bytes(self) -> bytes:
        return ensure_bytes(self.data)


def kernel_view(a: Array) -> KernelView:
    """Describe the buffer of `a` for a numeric kernel.

    The pointer stays valid until `a` is reset, cleared, moved or destroyed.
    """
    return KernelView(a.ptr, a.dims, a.strides, a.dtype, a.itemsize, a.nbytes)


def serialize(a: Array) -> ArrayPayload:
    """Copy `a` into a payload of flat column-major elements and their description."""
    data = np.ravel(a.to_numpy(copy=False), order="F").copy()
    return ArrayPayload(a.dims, a.dtype.str, data, a.res, a.name)


def _flat_elements(data: Any, dtype: npt.DTypeLike) -> npt.NDArray[Any]:
    if isinstance(data, (bytes, bytearray)) or (
        isinstance(data, memoryview) and data.format == "B"
    ):
        # raw bytes are reinterpreted as elements of the requested type
        dtype = normalize_dtype(dtype)
        raw = ensure_contiguous_ndarray_like(data)
        if raw.nbytes % dtype.itemsize:
            raise ShapeError(f"{raw.nbytes} bytes do not hold a whole number of {dtype} elements")
        return raw.view(dtype)
    if isinstance(data, (np.ndarray, memoryview)):
        arr = ensure_ndarray_like(data).reshape(-1, order="A")
    else:
        arr = np.asarray(data)
        if arr.ndim != 1:
            raise ShapeError(f"expected a flat sequence of elements, got shape {arr.shape}")
    if dtype is not None:
        arr = arr.astype(dtype, copy=False)
    return arr


def deserialize(
    dims: DimsLike,
    data: Any,
    dtype: npt.DTypeLike = None,
    res: Any = None,
    name: str | None = None,
) -> Array:
    """Create an array from flat column-major elements.

    Parameters
    ----------
    dims : sequence of ints
        Dimension vector of the new array, used verbatim.
    data : sequence or buffer
        Flat elements, or any object exposing the buffer protocol. Raw bytes are
        reinterpreted as elements of `dtype`.
    dtype : string or dtype, optional
        Element type; defaults to the type of `data`, or for raw bytes to the
        ``array.dtype`` configuration value.

    Raises
    ------
    ShapeError
        If the number of elements does not match the dimension vector.
    """
    return Array._from_flat(_flat_elements(data, dtype), dims, res, name)


def shape_compatible(a: Array, b: Array) -> bool:
    """True if `a` and `b` have identical dimension vectors."""
    return a.shape_compatible(b)
