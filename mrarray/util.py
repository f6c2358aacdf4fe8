from __future__ import annotations

import numbers
from collections.abc import Iterable, Sequence
from textwrap import TextWrapper
from typing import Any

import numpy as np

from mrarray.config import default_dtype, info_width
from mrarray.errors import ShapeError, TooManyDimensionsError

# maximum number of axes of an array, one per MR data dimension
MAX_DIMS = 16

# largest element count numpy can address on this platform
MAX_SIZE = int(np.iinfo(np.intp).max)

DimsLike = Iterable[int] | int


def _is_extent(v: Any) -> bool:
    return isinstance(v, numbers.Integral) and not isinstance(v, (bool, np.bool_))


def normalize_dims(dims: DimsLike) -> tuple[int, ...]:
    """Convenience function to normalize a dimension vector argument."""

    if dims is None:
        raise TypeError("dims is None")

    # handle 1D convenience form
    if _is_extent(dims):
        dims = (dims,)

    try:
        dims = tuple(dims)  # type: ignore[arg-type]
    except TypeError as e:
        raise TypeError(f"Expected an integer or an iterable of integers, got {dims!r}.") from e

    if len(dims) == 0:
        raise ShapeError(dims, "at least one axis is required")
    if len(dims) > MAX_DIMS:
        raise TooManyDimensionsError(MAX_DIMS, len(dims))
    if not all(_is_extent(d) for d in dims):
        raise ShapeError(dims, "extents must be integers")
    if not all(d > 0 for d in dims):
        raise ShapeError(dims, "extents must be positive")

    return tuple(int(d) for d in dims)


def trim_trailing_singletons(dims: Sequence[int]) -> tuple[int, ...]:
    """Remove trailing axes of extent 1, keeping at least one axis."""
    n = len(dims)
    while n > 1 and dims[n - 1] == 1:
        n -= 1
    return tuple(dims[:n])


def normalize_resolution(res: Iterable[float] | None, ndim: int) -> tuple[float, ...]:
    if res is None:
        return (1.0,) * ndim
    if isinstance(res, numbers.Real):
        res = (res,)
    res = tuple(float(r) for r in res)
    if len(res) != ndim:
        raise ShapeError(
            f"resolution vector {res!r} does not match the number of dimensions ({ndim})"
        )
    return res


def dims_product(dims: Sequence[int]) -> int:
    """Number of elements of an array with the given dimensions.

    The running product is checked against the addressable size at each step so that an
    overflowing dimension vector is rejected instead of wrapping around in a kernel.
    """
    total = 1
    for d in dims:
        total *= d
        if total > MAX_SIZE:
            raise ShapeError(f"dimension vector {tuple(dims)!r} exceeds the addressable size")
    return total


def exclusive_strides(dims: Sequence[int]) -> tuple[int, ...]:
    """Column-major element strides: exclusive prefix product of the extents."""
    strides = [1] * len(dims)
    for i in range(1, len(dims)):
        strides[i] = strides[i - 1] * dims[i - 1]
    return tuple(strides)


def normalize_dtype(dtype: Any) -> np.dtype[Any]:
    if dtype is None:
        return default_dtype()
    return np.dtype(dtype)


def normalize_reshape_args(*args: Any) -> tuple[int, ...]:
    """Accept either a single dimension vector or the extents as separate arguments."""
    if len(args) == 1:
        new_dims = args[0]
    else:
        new_dims = args
    return normalize_dims(new_dims)


def human_readable_size(size: int) -> str:
    if size < 2**10:
        return "%s" % size
    elif size < 2**20:
        return "%.1fK" % (size / float(2**10))
    elif size < 2**30:
        return "%.1fM" % (size / float(2**20))
    elif size < 2**40:
        return "%.1fG" % (size / float(2**30))
    elif size < 2**50:
        return "%.1fT" % (size / float(2**40))
    else:
        return "%.1fP" % (size / float(2**50))


def info_text_report(items: list[tuple[str, Any]]) -> str:
    keys = [k for k, v in items]
    max_key_len = max(len(k) for k in keys)
    report = ""
    for k, v in items:
        wrapper = TextWrapper(
            width=info_width(),
            initial_indent=k.ljust(max_key_len) + " : ",
            subsequent_indent=" " * max_key_len + " : ",
        )
        text = wrapper.fill(str(v))
        report += text + "\n"
    return report


def info_html_report(items: list[tuple[str, Any]]) -> str:
    report = '<table class="mrarray-info">'
    report += "<tbody>"
    for k, v in items:
        report += (
            "<tr>"
            '<th style="text-align: left">%s</th>'
            '<td style="text-align: left">%s</td>'
            "</tr>" % (k, v)
        )
    report += "</tbody>"
    report += "</table>"
    return report


class InfoReporter:
    def __init__(self, obj: Any) -> None:
        self.obj = obj

    def __repr__(self) -> str:
        items = self.obj.info_items()
        return info_text_report(items)

    def _repr_html_(self) -> str:
        items = self.obj.info_items()
        return info_html_report(items)
