"""Resolution of per-axis selections into concrete index lists.

A selection string holds one comma separated expression per axis:

``i``
    a single index,
``[i, j, k]``
    a list of indices, separated by commas or whitespace,
``start:end`` / ``start:step:end``
    a range with *inclusive* end and a default step of 1,
``:``
    the whole axis.

Axes without an expression select their whole extent. For example ``"0:2:5, [1 3]"``
against dimensions ``(6, 4)`` resolves to ``((0, 2, 4), (1, 3))``.

Parsing never touches array data; the resolved index lists are consumed by
:class:`OrthogonalIndexer` to copy the selected elements into a new buffer.
"""

from __future__ import annotations

import logging
import numbers
import re
from collections.abc import Iterable, Sequence
from typing import Any, NamedTuple

import numpy as np
import numpy.typing as npt

from mrarray.config import max_selection_axes
from mrarray.errors import BoundsCheckError, RangeParseError

_logger = logging.getLogger(__name__)

__all__ = [
    "FullDimIndexer",
    "IntDimIndexer",
    "ListDimIndexer",
    "OrthogonalIndexer",
    "SliceDimIndexer",
    "Token",
    "parse_selection",
    "resolve_selection",
    "tokenize",
]


def is_integer(x: Any) -> bool:
    return isinstance(x, numbers.Integral) and not isinstance(x, (bool, np.bool_))


def normalize_integer_selection(dim_sel: Any, dim_len: int) -> int:
    # no wraparound, negative indices are out of bounds
    dim_sel = int(dim_sel)
    if dim_sel >= dim_len or dim_sel < 0:
        raise BoundsCheckError(dim_sel, dim_len)
    return dim_sel


class IntDimIndexer:
    def __init__(self, dim_sel: int, dim_len: int) -> None:
        self.dim_len = dim_len
        self.indices = (normalize_integer_selection(dim_sel, dim_len),)
        self.nitems = 1


class ListDimIndexer:
    """Explicit index list against a single dimension, kept in the given order."""

    def __init__(self, dim_sel: Iterable[Any], dim_len: int) -> None:
        indices = []
        for i in dim_sel:
            if not is_integer(i):
                raise IndexError(f"index lists must contain integers, got {i!r}")
            indices.append(normalize_integer_selection(i, dim_len))
        if not indices:
            raise IndexError("empty index list")
        self.dim_len = dim_len
        self.indices = tuple(indices)
        self.nitems = len(self.indices)


class SliceDimIndexer:
    """``start:step:end`` range with inclusive end against a single dimension."""

    def __init__(self, start: int, step: int, stop: int, dim_len: int) -> None:
        if step == 0:
            raise ValueError("slice step cannot be zero")
        start = normalize_integer_selection(start, dim_len)
        stop = normalize_integer_selection(stop, dim_len)
        indices = tuple(range(start, stop + (1 if step > 0 else -1), step))
        if not indices:
            raise IndexError(f"range {start}:{step}:{stop} selects no indices")
        self.start, self.step, self.stop = start, step, stop
        self.dim_len = dim_len
        self.indices = indices
        self.nitems = len(indices)


class FullDimIndexer:
    def __init__(self, dim_len: int) -> None:
        self.dim_len = dim_len
        self.indices = tuple(range(dim_len))
        self.nitems = dim_len


class Token(NamedTuple):
    kind: str
    value: int | None
    pos: int


_token_re = re.compile(
    r"\s*(?:(?P<INT>[+-]?\d+)|(?P<COLON>:)|(?P<COMMA>,)|(?P<LBRACKET>\[)|(?P<RBRACKET>\]))"
)


def tokenize(text: str) -> list[Token]:
    """Split a selection string into integer and punctuation tokens."""
    tokens = []
    pos = 0
    end = len(text.rstrip())
    while pos < end:
        m = _token_re.match(text, pos)
        if m is None:
            raise RangeParseError(text, f"unexpected character {text[pos:].lstrip()[:1]!r}")
        kind = m.lastgroup
        assert kind is not None
        value = int(m.group(kind)) if kind == "INT" else None
        tokens.append(Token(kind, value, m.start(kind)))
        pos = m.end()
    return tokens


class _AxisExpr(NamedTuple):
    kind: str  # "int", "list", "slice" or "full"
    args: tuple[int, ...]


class _Parser:
    # one state per position within an axis expression:
    #   axis:  expecting INT, "[" or ":"
    #   after INT: "," ends the axis, ":" starts a range
    #   list: INT entries separated by "," or whitespace until "]"

    def __init__(self, text: str) -> None:
        self.text = text
        self.tokens = tokenize(text)
        self.i = 0

    def error(self, msg: str) -> RangeParseError:
        return RangeParseError(self.text, msg)

    def peek(self) -> Token | None:
        return self.tokens[self.i] if self.i < len(self.tokens) else None

    def next(self, *kinds: str) -> Token:
        tok = self.peek()
        if tok is None:
            raise self.error(f"unexpected end of selection, expected {' or '.join(kinds)}")
        if tok.kind not in kinds:
            raise self.error(
                f"unexpected {tok.kind} at position {tok.pos}, expected {' or '.join(kinds)}"
            )
        self.i += 1
        return tok

    def parse(self) -> list[_AxisExpr]:
        if not self.tokens:
            raise self.error("empty selection")
        exprs = [self.axis()]
        while self.peek() is not None:
            self.next("COMMA")
            exprs.append(self.axis())
        return exprs

    def axis(self) -> _AxisExpr:
        tok = self.next("INT", "LBRACKET", "COLON")
        if tok.kind == "COLON":
            return _AxisExpr("full", ())
        if tok.kind == "LBRACKET":
            return self.index_list()
        first = tok.value
        assert first is not None
        nxt = self.peek()
        if nxt is None or nxt.kind != "COLON":
            return _AxisExpr("int", (first,))
        self.i += 1
        second = self.next("INT").value
        nxt = self.peek()
        if nxt is None or nxt.kind != "COLON":
            # start:end
            return _AxisExpr("slice", (first, 1, second))  # type: ignore[arg-type]
        self.i += 1
        third = self.next("INT").value
        # start:step:end
        return _AxisExpr("slice", (first, second, third))  # type: ignore[arg-type]

    def index_list(self) -> _AxisExpr:
        items = []
        while True:
            tok = self.next("INT", "RBRACKET")
            if tok.kind == "RBRACKET":
                break
            items.append(tok.value)
            nxt = self.peek()
            if nxt is not None and nxt.kind == "COMMA":
                self.i += 1
        if not items:
            raise self.error("empty index list")
        return _AxisExpr("list", tuple(items))  # type: ignore[arg-type]


def _check_rank(selection: Any, nsel: int, dims: Sequence[int]) -> None:
    if nsel > len(dims):
        raise RangeParseError(
            selection, f"{nsel} axes selected but the array has only {len(dims)}"
        )
    max_axes = max_selection_axes()
    if len(dims) > max_axes:
        raise RangeParseError(
            selection, f"selections are supported for up to {max_axes} axes, got {len(dims)}"
        )


def parse_selection(text: str, dims: Sequence[int]) -> tuple[tuple[int, ...], ...]:
    """Resolve a selection string against ``dims`` into one index tuple per axis.

    Raises
    ------
    RangeParseError
        On malformed syntax, more expressions than axes, or indices outside an extent.
    """
    exprs = _Parser(text).parse()
    _check_rank(text, len(exprs), dims)
    dim_indexers: list[Any] = []
    try:
        for expr, dim_len in zip(exprs, dims):
            if expr.kind == "int":
                dim_indexers.append(IntDimIndexer(expr.args[0], dim_len))
            elif expr.kind == "list":
                dim_indexers.append(ListDimIndexer(expr.args, dim_len))
            elif expr.kind == "slice":
                dim_indexers.append(SliceDimIndexer(*expr.args, dim_len))
            else:
                dim_indexers.append(FullDimIndexer(dim_len))
    except (IndexError, ValueError) as e:
        raise RangeParseError(text, str(e)) from e
    dim_indexers.extend(FullDimIndexer(dim_len) for dim_len in dims[len(exprs) :])
    index_lists = tuple(d.indices for d in dim_indexers)
    _logger.debug(
        "resolved selection %r against %r to counts %r",
        text,
        tuple(dims),
        tuple(len(ix) for ix in index_lists),
    )
    return index_lists


def ensure_tuple(v: Any) -> tuple[Any, ...]:
    if not isinstance(v, tuple):
        v = (v,)
    return v


def resolve_selection(selection: Any, dims: Sequence[int]) -> tuple[tuple[int, ...], ...]:
    """Resolve a selection string or a tuple of per-axis items into index tuples.

    Per-axis items may be integers, Python slices and ranges (with their usual exclusive
    stop), or iterables of integers. Anything other than a tuple selects along the first
    axis only.
    """
    if isinstance(selection, str):
        return parse_selection(selection, dims)

    selection = ensure_tuple(selection)
    _check_rank(selection, len(selection), dims)
    dim_indexers: list[Any] = []
    for dim_sel, dim_len in zip(selection, dims):
        if is_integer(dim_sel):
            dim_indexers.append(IntDimIndexer(dim_sel, dim_len))
        elif isinstance(dim_sel, slice):
            dim_indexers.append(ListDimIndexer(range(*dim_sel.indices(dim_len)), dim_len))
        elif isinstance(dim_sel, Iterable) and not isinstance(dim_sel, (str, bytes)):
            dim_indexers.append(ListDimIndexer(dim_sel, dim_len))
        else:
            raise IndexError(
                "unsupported selection item; expected integer, slice, range or "
                f"iterable of integers, got {type(dim_sel)!r}"
            )
    dim_indexers.extend(FullDimIndexer(dim_len) for dim_len in dims[len(selection) :])
    return tuple(d.indices for d in dim_indexers)


class OrthogonalIndexer:
    """Orthogonal (outer product) selection over a column-major buffer.

    Parameters
    ----------
    selection
        Selection string or tuple of per-axis items, see :func:`resolve_selection`.
    dims
        Dimension vector of the source buffer.
    """

    def __init__(self, selection: Any, dims: Sequence[int]) -> None:
        self.dims = tuple(dims)
        self.index_lists = resolve_selection(selection, self.dims)
        self.shape = tuple(len(ix) for ix in self.index_lists)

    def take(self, flat: npt.NDArray[Any]) -> npt.NDArray[Any]:
        """Copy the selected elements of ``flat`` into a new flat column-major ndarray."""
        a = flat.reshape(self.dims, order="F")
        out = a[np.ix_(*self.index_lists)]
        return np.ravel(out, order="F")
