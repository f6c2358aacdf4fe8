"""Dimension vectors, resolutions and column-major strides of MR data arrays.

Axis 0 varies fastest. The sixteen axes carry the conventional names of raw MR data
dimensions, available as integer constants::

    >>> from mrarray.dims import COL, CHA, Dimensions
    >>> d = Dimensions((256, 128, 8))
    >>> d.dim(CHA), d.strides
    (8, (1, 256, 32768))
"""

from __future__ import annotations

import operator
from collections.abc import Iterable, Sequence
from typing import Any

from mrarray.errors import BoundsCheckError, ShapeMismatchError, TooManyDimensionsError
from mrarray.util import (
    MAX_DIMS,
    DimsLike,
    dims_product,
    exclusive_strides,
    normalize_dims,
    normalize_resolution,
)

COL = 0  # readout
LIN = 1  # phase encoding line
CHA = 2  # receive channel
SET = 3
ECO = 4  # echo
PHS = 5  # cardiac phase
REP = 6  # repetition
SEG = 7  # segment
PAR = 8  # partition
SLC = 9  # slice
IDA = 10
IDB = 11
IDC = 12
IDD = 13
IDE = 14
AVE = 15  # average

AXIS_NAMES = (
    "COL", "LIN", "CHA", "SET", "ECO", "PHS", "REP", "SEG",
    "PAR", "SLC", "IDA", "IDB", "IDC", "IDD", "IDE", "AVE",
)  # fmt: skip


class Dimensions:
    """Dimension vector of an array together with per-axis resolutions and strides.

    Parameters
    ----------
    dims
        Positive extents, one per axis (1 to 16 axes).
    res
        Physical resolution of each axis. Defaults to 1.0 for every axis.
    """

    __slots__ = ("_dims", "_res", "_size", "_strides")

    def __init__(self, dims: DimsLike, res: Iterable[float] | None = None) -> None:
        dims = normalize_dims(dims)
        self._res = normalize_resolution(res, len(dims))
        self._set(dims)

    def _set(self, dims: tuple[int, ...]) -> None:
        size = dims_product(dims)
        self._dims = dims
        self._size = size
        self._strides = exclusive_strides(dims)

    def set_dims(self, dims: DimsLike) -> None:
        """Replace the dimension vector, keeping resolutions when the rank is unchanged."""
        dims = normalize_dims(dims)
        if len(dims) != len(self._dims):
            self._res = (1.0,) * len(dims)
        self._set(dims)

    @property
    def dims(self) -> tuple[int, ...]:
        return self._dims

    @property
    def res(self) -> tuple[float, ...]:
        return self._res

    @property
    def strides(self) -> tuple[int, ...]:
        return self._strides

    @property
    def ndim(self) -> int:
        return len(self._dims)

    @property
    def size(self) -> int:
        return self._size

    def dim(self, axis: int) -> int:
        """Extent of ``axis``; axes beyond the declared rank have extent 1."""
        if axis < 0:
            raise BoundsCheckError(axis, MAX_DIMS)
        return self._dims[axis] if axis < len(self._dims) else 1

    def resolution(self, axis: int) -> float:
        if not 0 <= axis < len(self._res):
            raise BoundsCheckError(axis, len(self._res))
        return self._res[axis]

    def set_resolution(self, axis: int, value: float) -> None:
        if not 0 <= axis < len(self._res):
            raise BoundsCheckError(axis, len(self._res))
        res = list(self._res)
        res[axis] = float(value)
        self._res = tuple(res)

    @property
    def classification(self) -> int:
        """Number of axes with extent greater than one.

        This is what "k-D" means throughout the package: a (4, 3, 1) array is 2-D and an
        all-singleton array is 0-D, regardless of the declared rank.
        """
        return sum(1 for d in self._dims if d > 1)

    def is_xd(self, k: int) -> bool:
        return self.classification == k

    def is_1d(self) -> bool:
        return self.is_xd(1)

    def is_2d(self) -> bool:
        return self.is_xd(2)

    def is_3d(self) -> bool:
        return self.is_xd(3)

    def is_4d(self) -> bool:
        return self.is_xd(4)

    def squeezed(self) -> tuple[int, ...]:
        """Extents of the axes longer than one, in order; ``(1,)`` for an all-singleton array."""
        return tuple(d for d in self._dims if d > 1) or (1,)

    def non_singleton_axes(self) -> tuple[int, ...]:
        return tuple(i for i, d in enumerate(self._dims) if d > 1)

    @property
    def hdim(self) -> int:
        """Index of the highest axis with extent greater than one, 0 if there is none."""
        axes = self.non_singleton_axes()
        return axes[-1] if axes else 0

    def squeeze(self) -> None:
        """Drop every singleton axis, keeping the resolutions of the remaining axes."""
        axes = self.non_singleton_axes() or (0,)
        self._res = tuple(self._res[i] for i in axes)
        self._set(tuple(self._dims[i] for i in axes))

    def check_offset(self, offset: int) -> int:
        if not 0 <= offset < self._size:
            raise BoundsCheckError(offset, self._size)
        return offset

    def offset(self, coords: Sequence[Any]) -> int:
        """Linear offset of a coordinate tuple, ``sum(coords[i] * strides[i])``.

        Omitted trailing coordinates are 0. Coordinates past the declared rank address
        axes of extent 1 and must therefore be 0.
        """
        if len(coords) > MAX_DIMS:
            raise TooManyDimensionsError(MAX_DIMS, len(coords))
        offset = 0
        for axis, c in enumerate(coords):
            c = operator.index(c)
            n = self.dim(axis)
            if not 0 <= c < n:
                raise BoundsCheckError(c, n)
            if c:
                offset += c * self._strides[axis]
        return offset

    def coords(self, offset: int) -> tuple[int, ...]:
        """Inverse of :meth:`offset` for a valid linear offset."""
        self.check_offset(offset)
        out = []
        for d in self._dims:
            offset, c = divmod(offset, d)
            out.append(c)
        return tuple(out)

    def copy(self) -> Dimensions:
        other = Dimensions.__new__(Dimensions)
        other._dims = self._dims
        other._res = self._res
        other._size = self._size
        other._strides = self._strides
        return other

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Dimensions):
            return self._dims == other._dims
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._dims)

    def __repr__(self) -> str:
        return f"Dimensions({self._dims!r}, res={self._res!r})"


def check_compatible(a: Dimensions, b: Dimensions) -> None:
    if a != b:
        raise ShapeMismatchError(a.dims, b.dims)
