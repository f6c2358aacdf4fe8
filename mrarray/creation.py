from __future__ import annotations

from typing import Any

import numpy as np
import numpy.typing as npt

from mrarray.core import Array
from mrarray.traits import match_traits
from mrarray.util import DimsLike, normalize_dims, normalize_dtype, trim_trailing_singletons

__all__ = [
    "arange",
    "array",
    "from_extents",
    "full",
    "full_like",
    "hypervolume",
    "matrix",
    "ones",
    "ones_like",
    "random",
    "vector",
    "volume",
    "zeros",
    "zeros_like",
]


def zeros(dims: DimsLike, **kwargs: Any) -> Array:
    """Create an array filled with zeros.

    For parameter definitions see :class:`mrarray.core.Array`.

    Examples
    --------
    >>> import mrarray
    >>> mrarray.zeros((256, 128))
    <mrarray.core.Array (256, 128) float64>

    """
    return Array(dims, **kwargs)


def ones(dims: DimsLike, **kwargs: Any) -> Array:
    """Create an array filled with ones.

    For parameter definitions see :class:`mrarray.core.Array`.
    """
    return full(dims, 1, **kwargs)


def full(dims: DimsLike, fill_value: Any, **kwargs: Any) -> Array:
    """Create an array with every element set to `fill_value`.

    For parameter definitions see :class:`mrarray.core.Array`.

    Examples
    --------
    >>> import mrarray
    >>> a = mrarray.full((2, 2), 42, dtype="int16")
    >>> a.to_numpy()
    array([[42, 42],
           [42, 42]], dtype=int16)

    """
    a = Array(dims, **kwargs)
    a.fill(fill_value)
    return a


def _like_args(a: Array, kwargs: dict[str, Any]) -> None:
    kwargs.setdefault("dims", a.dims)
    kwargs.setdefault("res", a.res)
    kwargs.setdefault("dtype", a.dtype)


def zeros_like(a: Array, **kwargs: Any) -> Array:
    """Create an array of zeros like `a`."""
    _like_args(a, kwargs)
    return zeros(**kwargs)


def ones_like(a: Array, **kwargs: Any) -> Array:
    """Create an array of ones like `a`."""
    _like_args(a, kwargs)
    return ones(**kwargs)


def full_like(a: Array, fill_value: Any, **kwargs: Any) -> Array:
    """Create a filled array like `a`."""
    _like_args(a, kwargs)
    return full(fill_value=fill_value, **kwargs)


def array(
    data: Any,
    dtype: npt.DTypeLike = None,
    res: Any = None,
    name: str | None = None,
) -> Array:
    """Create an array filled with `data`.

    The `data` argument should be a NumPy array or array-like object; its axes become the
    axes of the new array and its elements are copied in column-major order.

    Examples
    --------
    >>> import numpy as np
    >>> import mrarray
    >>> a = mrarray.array(np.arange(12).reshape(4, 3))
    >>> a
    <mrarray.core.Array (4, 3) int64>
    >>> int(a[1, 2])
    5

    """
    if isinstance(data, Array):
        data = data.to_numpy(copy=False)
    data = np.asarray(data, dtype=dtype)
    dims = data.shape or (1,)
    a = Array(dims, res=res, dtype=data.dtype, name=name)
    a.assign(np.ravel(data, order="F"))
    return a


def arange(dims: DimsLike, **kwargs: Any) -> Array:
    """Create an array whose elements equal their linear offset.

    Examples
    --------
    >>> import mrarray
    >>> a = mrarray.arange((4, 3))
    >>> a.row(1).to_numpy()
    array([1., 5., 9.])

    """
    a = Array(dims, **kwargs)
    a.assign(np.arange(a.size))
    return a


def from_extents(
    *extents: int,
    res: Any = None,
    dtype: npt.DTypeLike = None,
    name: str | None = None,
) -> Array:
    """Create a zero-filled array from up to 16 positional extents.

    Trailing singleton axes are removed, so ``from_extents(2, 3, 1, 1)`` has the dimension
    vector ``(2, 3)``. If ``res`` is given it must match the trimmed rank.
    """
    dims = trim_trailing_singletons(normalize_dims(extents))
    return Array(dims, res=res, dtype=dtype, name=name)


def vector(n: int, **kwargs: Any) -> Array:
    """Create a zero-filled 1-D array of length `n`."""
    return from_extents(n, **kwargs)


def matrix(m: int, n: int | None = None, **kwargs: Any) -> Array:
    """Create a zero-filled ``m x n`` array, square if `n` is omitted."""
    if n is None:
        n = m
    return from_extents(m, n, **kwargs)


def volume(m: int, n: int, k: int, **kwargs: Any) -> Array:
    return from_extents(m, n, k, **kwargs)


def hypervolume(m: int, n: int, k: int, l: int, **kwargs: Any) -> Array:  # noqa: E741
    return from_extents(m, n, k, l, **kwargs)


def random(
    dims: DimsLike,
    dtype: npt.DTypeLike = None,
    seed: int | np.random.Generator | None = None,
    **kwargs: Any,
) -> Array:
    """Create an array of random elements.

    Floating point elements are uniform on [0, 1); complex elements have uniform real and
    imaginary parts; integers cover the non-negative range of the type.

    Parameters
    ----------
    seed : int or numpy.random.Generator, optional
        Seed or generator, for reproducible contents.
    """
    dtype = normalize_dtype(dtype)
    rng = np.random.default_rng(seed)
    a = Array(dims, dtype=dtype, **kwargs)
    a.assign(match_traits(dtype).random(a.size, rng))
    return a
