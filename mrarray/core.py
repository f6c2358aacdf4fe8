from __future__ import annotations

import logging
import numbers
import operator
from collections.abc import Callable, Iterator
from typing import Any

import numpy as np
import numpy.typing as npt

from mrarray.container import AlignedBuffer
from mrarray.dims import Dimensions, check_compatible
from mrarray.errors import BoundsCheckError, RankError, ReshapeError, ShapeError
from mrarray.ranges import OrthogonalIndexer, is_integer
from mrarray.traits import match_traits
from mrarray.util import (
    DimsLike,
    InfoReporter,
    human_readable_size,
    normalize_dtype,
    normalize_reshape_args,
    trim_trailing_singletons,
)

_logger = logging.getLogger(__name__)

__all__ = ["Array", "logical_and", "logical_or"]


class Array:
    """Instantiate a dense N-dimensional array in memory.

    Elements are stored in a single aligned buffer in column-major order, i.e., axis 0
    varies fastest and ``strides[i]`` is the product of the extents of all axes before
    ``i``. Every array owns its buffer; views and sub-arrays are always copies.

    Parameters
    ----------
    dims : int or sequence of ints
        Dimension vector, 1 to 16 positive extents. Used verbatim, trailing singleton axes
        are kept.
    res : sequence of floats, optional
        Resolution of each axis, defaults to 1.0 per axis.
    dtype : string or dtype, optional
        Element type. Defaults to the ``array.dtype`` configuration value.
    name : string, optional
        Name of the array, used in reports.

    Attributes
    ----------
    dims
    res
    strides
    ndim
    size
    dtype
    itemsize
    nbytes
    ptr
    classification
    hdim
    name
    info

    Methods
    -------
    at
    set_at
    view
    reshape
    reshape_inplace
    squeeze
    squeezed
    reset
    clear
    copy
    move
    assign
    fill
    transpose
    ctranspose
    row
    column
    slice
    volume
    astype
    sum
    mean
    sos
    to_numpy

    """

    # defer to the reflected operators when numpy objects are on the left
    __array_ufunc__ = None

    def __init__(
        self,
        dims: DimsLike = (1,),
        res: Any = None,
        dtype: npt.DTypeLike = None,
        name: str | None = None,
    ) -> None:
        dimensions = Dimensions(dims, res)
        dtype = normalize_dtype(dtype)
        self._init(dimensions, dtype, name, AlignedBuffer(dtype, dimensions.size, fill=0))

    def _init(
        self,
        dimensions: Dimensions,
        dtype: np.dtype[Any],
        name: str | None,
        buffer: AlignedBuffer,
    ) -> None:
        self._dims = dimensions
        self._dtype = dtype
        self._traits = match_traits(dtype)
        self._buffer = buffer
        self.name = name

    @classmethod
    def _from_flat(
        cls,
        data: npt.NDArray[Any],
        dims: DimsLike,
        res: Any = None,
        name: str | None = None,
    ) -> Array:
        """Wrap a copy of a flat column-major ndarray into a new array."""
        dimensions = Dimensions(dims, res)
        if data.size != dimensions.size:
            raise ShapeError(
                f"{data.size} elements do not fill an array with dimensions {dimensions.dims!r}"
            )
        buffer = AlignedBuffer(data.dtype, dimensions.size)
        buffer[:] = data.reshape(-1, order="F")
        out = cls.__new__(cls)
        out._init(dimensions, data.dtype, name, buffer)
        return out

    @property
    def _flat(self) -> npt.NDArray[Any]:
        return self._buffer.as_numpy_array()

    def _nd(self, dims: tuple[int, ...] | None = None) -> npt.NDArray[Any]:
        # column-major ndarray view of the buffer
        return self._flat.reshape(self._dims.dims if dims is None else dims, order="F")

    @property
    def dims(self) -> tuple[int, ...]:
        """A tuple of integers describing the extent of each axis."""
        return self._dims.dims

    @property
    def res(self) -> tuple[float, ...]:
        """A tuple of floats with the physical resolution of each axis."""
        return self._dims.res

    @property
    def strides(self) -> tuple[int, ...]:
        """Element strides of each axis."""
        return self._dims.strides

    @property
    def ndim(self) -> int:
        """Number of declared axes."""
        return self._dims.ndim

    @property
    def size(self) -> int:
        """The total number of elements in the array."""
        return self._dims.size

    @property
    def dtype(self) -> np.dtype[Any]:
        """The NumPy data type."""
        return self._dtype

    @property
    def itemsize(self) -> int:
        """The size in bytes of each item in the array."""
        return self._dtype.itemsize

    @property
    def nbytes(self) -> int:
        """The total number of bytes taken by the elements."""
        return self._buffer.nbytes

    @property
    def ptr(self) -> int:
        """Address of the first element, for handing the buffer to numeric kernels."""
        return self._buffer.ptr

    @property
    def alignment(self) -> int:
        return self._buffer.alignment

    @property
    def classification(self) -> int:
        """Number of axes with extent greater than one."""
        return self._dims.classification

    def dim(self, axis: int) -> int:
        return self._dims.dim(axis)

    def is_xd(self, k: int) -> bool:
        return self._dims.is_xd(k)

    def is_1d(self) -> bool:
        return self._dims.is_1d()

    def is_2d(self) -> bool:
        return self._dims.is_2d()

    def is_3d(self) -> bool:
        return self._dims.is_3d()

    def is_4d(self) -> bool:
        return self._dims.is_4d()

    def resolution(self, axis: int) -> float:
        return self._dims.resolution(axis)

    def set_res(self, axis: int, value: float) -> None:
        self._dims.set_resolution(axis, value)

    def shape_compatible(self, other: Array) -> bool:
        """True if ``other`` has the same dimension vector."""
        return self._dims == other._dims

    # element access

    def _offset(self, key: Any) -> int:
        if isinstance(key, tuple):
            return self._dims.offset(key)
        try:
            p = operator.index(key)
        except TypeError as e:
            raise IndexError(
                "only integer offsets and tuples of integer coordinates are valid "
                f"element indices, got {key!r}; use view() for selections"
            ) from e
        return self._dims.check_offset(p)

    def __getitem__(self, key: Any) -> Any:
        """Retrieve a single element by linear offset or by coordinates.

        Examples
        --------
        >>> import mrarray
        >>> a = mrarray.arange((4, 3))
        >>> float(a[5]), float(a[1, 1])
        (5.0, 5.0)

        """
        return self._flat[self._offset(key)]

    def __setitem__(self, key: Any, value: Any) -> None:
        self._flat[self._offset(key)] = value

    def at(self, *args: Any) -> Any:
        """Element at a linear offset (one argument) or at coordinates (several)."""
        if len(args) == 1:
            return self[args[0]]
        return self[args]

    def set_at(self, key: Any, value: Any) -> None:
        self[key] = value

    def __call__(self, *args: Any) -> Any:
        """Element access with integer arguments, selection with anything else.

        ``a(p)`` and ``a(i, j, ...)`` behave like ``a[p]`` and ``a[i, j, ...]``. A
        selection string or per-axis index lists return a new array, see :meth:`view`.
        """
        if args and all(is_integer(x) for x in args):
            return self.at(*args)
        if len(args) == 1:
            return self.view(args[0])
        return self.view(args)

    def view(self, selection: Any) -> Array:
        """Copy an orthogonal selection into a new array.

        Parameters
        ----------
        selection : string or tuple
            Either a selection string such as ``"0:2:5, [1 3], :"``, with inclusive range
            ends, or a tuple of per-axis integers, slices, ranges or integer sequences.
            Axes without a selection are taken whole.

        Returns
        -------
        out : Array
            Array whose dimension vector holds the number of selected indices per axis.

        Examples
        --------
        >>> import mrarray
        >>> a = mrarray.arange((6, 4))
        >>> a.view("0:2:5, 1").dims
        (3, 1)

        """
        indexer = OrthogonalIndexer(selection, self.dims)
        return self._from_flat(indexer.take(self._flat), indexer.shape, self.res, self.name)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._flat)

    def __len__(self) -> int:
        return self.size

    def __bool__(self) -> bool:
        if self.size != 1:
            raise ValueError(
                "the truth value of an array with more than one element is ambiguous"
            )
        return bool(self._flat[0])

    # shape changes

    def reshape(self, *dims: Any) -> Array:
        """Return a copy with a new dimension vector holding the same number of elements."""
        out = self.copy()
        out.reshape_inplace(*dims)
        return out

    def reshape_inplace(self, *dims: Any) -> None:
        """Change the dimension vector without touching the elements.

        Resolutions are kept if the rank is unchanged and reset to 1.0 otherwise.
        """
        new_dims = normalize_reshape_args(*dims)
        new = self._dims.copy()
        new.set_dims(new_dims)
        if new.size != self.size:
            raise ReshapeError(self.size, new_dims)
        self._dims = new

    def reset(self, *dims: Any) -> None:
        """Change the dimension vector and zero every element."""
        new_dims = normalize_reshape_args(*dims)
        new = self._dims.copy()
        new.set_dims(new_dims)
        _logger.debug("resetting %r to %r", self.dims, new_dims)
        self._buffer.resize(new.size)
        self._buffer.fill(0)
        self._dims = new

    def clear(self) -> None:
        """Release the elements; the array becomes a single zero of rank 1."""
        self._buffer.clear()
        self._buffer.resize(1, fill=0)
        self._dims = Dimensions((1,))

    def squeeze(self) -> None:
        """Remove the singleton axes in place; an all-singleton array becomes ``(1,)``.

        The elements are untouched, only the dimension vector changes.
        """
        new = self._dims.copy()
        new.squeeze()
        self._dims = new

    def squeezed(self) -> Array:
        """Return a copy with the singleton axes removed, see :meth:`squeeze`."""
        out = self.copy()
        out.squeeze()
        return out

    @property
    def hdim(self) -> int:
        """Index of the highest axis with extent greater than one."""
        return self._dims.hdim

    def copy(self) -> Array:
        out = self.__class__.__new__(self.__class__)
        out._init(self._dims.copy(), self._dtype, self.name, self._buffer.copy())
        return out

    def __copy__(self) -> Array:
        return self.copy()

    def __deepcopy__(self, memo: dict[int, Any]) -> Array:
        return self.copy()

    def move(self) -> Array:
        """Transfer the elements to a new array, leaving this one cleared."""
        out = self.__class__.__new__(self.__class__)
        out._init(self._dims, self._dtype, self.name, self._buffer)
        self._buffer = AlignedBuffer(self._dtype, 1, fill=0, alignment=out.alignment)
        self._dims = Dimensions((1,))
        return out

    def assign(self, values: Any) -> None:
        """Set the elements from a scalar or a flat column-major sequence of ``size`` items."""
        if isinstance(values, (numbers.Number, np.generic)):
            self.fill(values)
            return
        if isinstance(values, Array):
            data = values._flat
        else:
            data = np.asarray(values)
        if data.ndim != 1 or data.size != self.size:
            raise ShapeError(
                f"cannot assign {data.size} values of shape {data.shape} "
                f"to an array of size {self.size}"
            )
        self._flat[:] = data

    def fill(self, value: Any) -> None:
        self._buffer.fill(value)

    # elementwise arithmetic

    def _operand(self, other: Any) -> Any:
        if isinstance(other, Array):
            check_compatible(self._dims, other._dims)
            return other._flat
        if isinstance(other, (numbers.Number, np.generic)):
            return other
        return None

    def _wrap(self, data: npt.NDArray[Any]) -> Array:
        return self._from_flat(data, self.dims, self.res)

    def _binary(self, other: Any, op: Callable[..., Any], reflected: bool = False) -> Any:
        value = self._operand(other)
        if value is None:
            return NotImplemented
        if reflected:
            return self._wrap(op(value, self._flat))
        return self._wrap(op(self._flat, value))

    def _inplace(self, other: Any, op: Callable[..., Any]) -> Any:
        value = self._operand(other)
        if value is None:
            return NotImplemented
        op(self._flat, value, out=self._flat, casting="unsafe")
        return self

    def __neg__(self) -> Array:
        return self._wrap(np.negative(self._flat))

    def __pos__(self) -> Array:
        return self.copy()

    def __add__(self, other: Any) -> Any:
        return self._binary(other, np.add)

    def __radd__(self, other: Any) -> Any:
        return self._binary(other, np.add, reflected=True)

    def __iadd__(self, other: Any) -> Any:
        return self._inplace(other, np.add)

    def __sub__(self, other: Any) -> Any:
        return self._binary(other, np.subtract)

    def __rsub__(self, other: Any) -> Any:
        return self._binary(other, np.subtract, reflected=True)

    def __isub__(self, other: Any) -> Any:
        return self._inplace(other, np.subtract)

    def __mul__(self, other: Any) -> Any:
        return self._binary(other, np.multiply)

    def __rmul__(self, other: Any) -> Any:
        return self._binary(other, np.multiply, reflected=True)

    def __imul__(self, other: Any) -> Any:
        return self._inplace(other, np.multiply)

    def __truediv__(self, other: Any) -> Any:
        return self._binary(other, np.true_divide)

    def __rtruediv__(self, other: Any) -> Any:
        return self._binary(other, np.true_divide, reflected=True)

    def __itruediv__(self, other: Any) -> Any:
        return self._inplace(other, np.true_divide)

    def __pow__(self, p: Any) -> Any:
        if not isinstance(p, numbers.Real):
            return NotImplemented
        return self._wrap(self._traits.power(self._flat, float(p)))

    def __ipow__(self, p: Any) -> Any:
        if not isinstance(p, numbers.Real):
            return NotImplemented
        self._flat[:] = self._traits.power(self._flat, float(p))
        return self

    # comparisons produce bool arrays

    def __eq__(self, other: Any) -> Any:  # type: ignore[override]
        return self._binary(other, np.equal)

    def __ne__(self, other: Any) -> Any:  # type: ignore[override]
        return self._binary(other, np.not_equal)

    def __lt__(self, other: Any) -> Any:
        return self._binary(other, np.less)

    def __le__(self, other: Any) -> Any:
        return self._binary(other, np.less_equal)

    def __gt__(self, other: Any) -> Any:
        return self._binary(other, np.greater)

    def __ge__(self, other: Any) -> Any:
        return self._binary(other, np.greater_equal)

    __hash__ = None  # type: ignore[assignment]

    def __and__(self, other: Any) -> Any:
        return self._binary(other, np.logical_and)

    def __rand__(self, other: Any) -> Any:
        return self._binary(other, np.logical_and, reflected=True)

    def __or__(self, other: Any) -> Any:
        return self._binary(other, np.logical_or)

    def __ror__(self, other: Any) -> Any:
        return self._binary(other, np.logical_or, reflected=True)

    def logical_and(self, other: Any) -> Array:
        return logical_and(self, other)

    def logical_or(self, other: Any) -> Array:
        return logical_or(self, other)

    # transposition

    def _swap_axes(self, what: str, conjugate: bool) -> Array:
        if self.ndim != 2:
            raise RankError(what, 2, self.dims)
        nd = self._nd()
        t = self._traits.transpose(nd) if conjugate else nd.T
        m, n = self.dims
        rm, rn = self.res
        return self._from_flat(np.ravel(t, order="F"), (n, m), (rn, rm), self.name)

    def transpose(self) -> Array:
        """Swap the two axes of an array with exactly two declared axes."""
        return self._swap_axes("transpose", conjugate=False)

    def ctranspose(self) -> Array:
        """Swap the two axes and, for complex elements, conjugate."""
        return self._swap_axes("conjugate transpose", conjugate=True)

    @property
    def T(self) -> Array:
        return self.transpose()

    @property
    def H(self) -> Array:
        return self.ctranspose()

    def __invert__(self) -> Array:
        return self.ctranspose()

    # sub-arrays along the non-singleton axes

    def _squeezed(self, what: str, k: int) -> tuple[npt.NDArray[Any], tuple[float, ...]]:
        if not self._dims.is_xd(k):
            raise RankError(what, k, self.dims)
        axes = self._dims.non_singleton_axes()
        return self._nd(self._dims.squeezed()), tuple(self.res[i] for i in axes)

    @staticmethod
    def _check_index(i: int, n: int) -> int:
        i = operator.index(i)
        if not 0 <= i < n:
            raise BoundsCheckError(i, n)
        return i

    def _cross_section(self, what: str, k: int, i: int) -> Array:
        # fix the outermost non-singleton axis to i
        nd, res = self._squeezed(what, k)
        i = self._check_index(i, nd.shape[-1])
        part = nd[..., i]
        return self._from_flat(np.ravel(part, order="F"), part.shape, res[:-1], self.name)

    def row(self, r: int) -> Array:
        """1-D array along the second non-singleton axis of a 2-D array, at index ``r``."""
        nd, res = self._squeezed("row", 2)
        r = self._check_index(r, nd.shape[0])
        return self._from_flat(nd[r, :], (nd.shape[1],), res[1:], self.name)

    def column(self, c: int) -> Array:
        """1-D array along the first non-singleton axis of a 2-D array, at index ``c``."""
        nd, res = self._squeezed("column", 2)
        c = self._check_index(c, nd.shape[1])
        return self._from_flat(nd[:, c], (nd.shape[0],), res[:1], self.name)

    def slice(self, s: int) -> Array:
        """2-D cross-section of a 3-D array."""
        return self._cross_section("slice", 3, s)

    def volume(self, v: int) -> Array:
        """3-D cross-section of a 4-D array."""
        return self._cross_section("volume", 4, v)

    # element-type dependent transforms

    def abs(self) -> Array:
        """Elementwise magnitude; complex arrays yield real magnitudes."""
        return self._wrap(np.abs(self._flat))

    def __abs__(self) -> Array:
        return self.abs()

    def real(self) -> Array:
        return self._wrap(self._traits.real(self._flat))

    def imag(self) -> Array:
        return self._wrap(self._traits.imag(self._flat))

    def conj(self) -> Array:
        return self._wrap(self._traits.conj(self._flat))

    def astype(self, dtype: npt.DTypeLike) -> Array:
        """Returns a copy of the array with the elements cast to `dtype`."""
        return self._wrap(self._flat.astype(dtype))

    # reductions

    def max(self) -> Any:
        """Largest element; complex elements are compared by magnitude."""
        return self._traits.max(self._flat)

    def min(self) -> Any:
        """Smallest element; complex elements are compared by magnitude."""
        return self._traits.min(self._flat)

    def maxabs(self) -> Any:
        return np.abs(self._flat).max()

    def minabs(self) -> Any:
        return np.abs(self._flat).min()

    def _reduce(self, func: Callable[..., Any], axis: int | None) -> Array:
        if axis is None:
            axis = self.ndim - 1
        axis = operator.index(axis)
        if not 0 <= axis < self.ndim:
            raise BoundsCheckError(axis, self.ndim)
        out = func(self._nd(), axis=axis, keepdims=True)
        dims = trim_trailing_singletons(out.shape)
        return self._from_flat(np.ravel(out, order="F"), dims, self.res[: len(dims)])

    def sum(self, axis: int | None = None) -> Array:
        """Sum along ``axis``, the outermost declared axis by default.

        The reduced axis keeps its position with extent 1; trailing singleton axes of the
        result are dropped.
        """
        return self._reduce(np.sum, axis)

    def mean(self, axis: int | None = None) -> Array:
        """Mean along ``axis``, see :meth:`sum`."""
        return self._reduce(np.mean, axis)

    def sos(self, axis: int | None = None) -> Array:
        """Sum of squared magnitudes along ``axis``, see :meth:`sum`."""

        def _sos(a: npt.NDArray[Any], axis: int, keepdims: bool) -> npt.NDArray[Any]:
            mag = np.abs(a)
            return np.sum(mag * mag, axis=axis, keepdims=keepdims)

        return self._reduce(_sos, axis)

    # conversion and reports

    def to_numpy(self, copy: bool = True) -> npt.NDArray[Any]:
        """The elements as a column-major ndarray with shape ``dims``.

        With ``copy=False`` the result is a view sharing memory with the array.
        """
        nd = self._nd()
        return nd.copy(order="F") if copy else nd

    def __array__(self, dtype: Any = None, copy: bool | None = None) -> npt.NDArray[Any]:
        a = self._nd()
        if dtype is not None:
            a = a.astype(dtype, order="F", copy=False)
        if copy:
            a = a.copy(order="F")
        return a

    @property
    def info(self) -> InfoReporter:
        """Report some diagnostic information about the array.

        Examples
        --------
        >>> import mrarray
        >>> a = mrarray.zeros((256, 128, 8), dtype="complex64", name="kspace")
        >>> a.info
        Type           : mrarray.core.Array
        Name           : kspace
        Data type      : complex64
        Dimensions     : (256, 128, 8)
        Resolutions    : (1.0, 1.0, 1.0)
        Strides        : (1, 256, 32768)
        Classification : 3-D
        Alignment      : 64
        No. bytes      : 2097152 (2.0M)

        """
        return InfoReporter(self)

    def info_items(self) -> list[tuple[str, Any]]:
        items = [("Type", f"{type(self).__module__}.{type(self).__name__}")]
        if self.name is not None:
            items.append(("Name", self.name))
        items += [
            ("Data type", str(self.dtype)),
            ("Dimensions", str(self.dims)),
            ("Resolutions", str(self.res)),
            ("Strides", str(self.strides)),
            ("Classification", f"{self.classification}-D"),
            ("Alignment", str(self.alignment)),
            ("No. bytes", f"{self.nbytes} ({human_readable_size(self.nbytes)})"),
        ]
        return items

    def __repr__(self) -> str:
        t = type(self)
        r = f"<{t.__module__}.{t.__name__}"
        if self.name is not None:
            r += f" {self.name!r}"
        r += f" {self.dims} {self.dtype}>"
        return r

    def __str__(self) -> str:
        return str(self._nd())


def logical_and(a: Array, b: Any) -> Array:
    """Elementwise logical conjunction, as a bool array."""
    out = a._binary(b, np.logical_and)
    if out is NotImplemented:
        raise TypeError(f"unsupported operand type {type(b)!r}")
    return out  # type: ignore[no-any-return]


def logical_or(a: Array, b: Any) -> Array:
    """Elementwise logical disjunction, as a bool array."""
    out = a._binary(b, np.logical_or)
    if out is NotImplemented:
        raise TypeError(f"unsupported operand type {type(b)!r}")
    return out  # type: ignore[no-any-return]
