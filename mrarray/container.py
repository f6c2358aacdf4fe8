from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any

import numpy as np
import numpy.typing as npt

from mrarray.config import default_alignment, parse_alignment

_logger = logging.getLogger(__name__)

__all__ = ["AlignedBuffer"]


def _allocate(
    n: int, dtype: np.dtype[Any], alignment: int
) -> tuple[npt.NDArray[np.uint8], npt.NDArray[Any]]:
    # over-allocate raw bytes and view an aligned window of them
    nbytes = n * dtype.itemsize
    raw = np.empty(max(nbytes, dtype.itemsize) + alignment, dtype=np.uint8)
    offset = (-raw.ctypes.data) % alignment
    # an empty slice would point at the start of raw, so slice at least one element
    data = raw[offset : offset + max(nbytes, dtype.itemsize)].view(dtype)[:n]
    _logger.debug(
        "allocated %d elements of %s (%d bytes, %d-byte aligned)", n, dtype, nbytes, alignment
    )
    return raw, data


class AlignedBuffer:
    """A contiguous, growable block of elements of a single numpy data type.

    The first element is aligned to ``alignment`` bytes so that the block can be handed to
    vectorized numeric kernels as is. Element access is unchecked beyond what numpy itself
    does; bounds are the responsibility of the owning array.

    Parameters
    ----------
    dtype
        Element type of the buffer.
    size
        Initial number of elements.
    fill
        If not None, value of every initial element. Otherwise the contents are unspecified.
    alignment
        Byte alignment of the first element, a power of two. Defaults to the
        ``array.alignment`` configuration value.
    """

    def __init__(
        self,
        dtype: npt.DTypeLike,
        size: int = 0,
        fill: Any = None,
        alignment: int | None = None,
    ) -> None:
        self._dtype = np.dtype(dtype)
        if alignment is None:
            self._alignment = default_alignment()
        else:
            self._alignment = parse_alignment(alignment)
        if size < 0:
            raise ValueError(f"buffer size must be non-negative, got {size}")
        self._raw, self._data = _allocate(size, self._dtype, self._alignment)
        if fill is not None:
            self._data.fill(fill)

    @property
    def dtype(self) -> np.dtype[Any]:
        return self._dtype

    @property
    def alignment(self) -> int:
        return self._alignment

    @property
    def size(self) -> int:
        return self._data.size

    @property
    def nbytes(self) -> int:
        return self._data.nbytes

    @property
    def ptr(self) -> int:
        """Address of the first element."""
        return int(self._data.ctypes.data)

    @property
    def is_aligned(self) -> bool:
        return self.ptr % self._alignment == 0

    def resize(self, n: int, fill: Any = None) -> None:
        """Change the number of elements.

        The common prefix is preserved. Elements beyond the old size are set to ``fill``
        when given and are unspecified otherwise. Resizing to the current size is a no-op.
        """
        if n < 0:
            raise ValueError(f"buffer size must be non-negative, got {n}")
        old = self.size
        if n == old:
            return
        raw, data = _allocate(n, self._dtype, self._alignment)
        keep = min(n, old)
        data[:keep] = self._data[:keep]
        if fill is not None and n > keep:
            data[keep:] = fill
        self._raw, self._data = raw, data

    def fill(self, value: Any) -> None:
        self._data.fill(value)

    def clear(self) -> None:
        """Release the storage; the buffer becomes empty."""
        if self.size:
            _logger.debug("releasing %d elements of %s", self.size, self._dtype)
        self._raw, self._data = _allocate(0, self._dtype, self._alignment)

    def copy(self) -> AlignedBuffer:
        other = AlignedBuffer(self._dtype, self.size, alignment=self._alignment)
        other._data[...] = self._data
        return other

    def as_numpy_array(self) -> npt.NDArray[Any]:
        """Returns the elements as a flat NumPy array.

        This will never copy data; writes to the returned array are writes to the buffer.
        """
        return self._data

    def __len__(self) -> int:
        return self._data.size

    def __getitem__(self, key: Any) -> Any:
        return self._data[key]

    def __setitem__(self, key: Any, value: Any) -> None:
        self._data[key] = value

    def __iter__(self) -> Iterator[Any]:
        return iter(self._data)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, AlignedBuffer) and np.array_equal(self._data, other._data)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"<AlignedBuffer {self.size} x {self._dtype}, {self._alignment}-byte aligned>"
