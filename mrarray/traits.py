"""Element-type specific behaviour of arrays.

Each supported numpy dtype family maps to one :class:`ElementTraits` subclass. An array
looks its traits up once, when it is created, and delegates every operation whose meaning
depends on the element type (transposition, extrema, random fill, powers) to them.
"""

from __future__ import annotations

import functools
from dataclasses import dataclass
from typing import Any, ClassVar

import numpy as np
import numpy.typing as npt

__all__ = [
    "BoolTraits",
    "ComplexTraits",
    "ElementTraits",
    "FloatTraits",
    "IntegerTraits",
    "match_traits",
]


@dataclass(frozen=True)
class ElementTraits:
    """Base class of the element traits. Subclasses declare the numpy kinds they handle."""

    dtype: np.dtype[Any]

    _kinds: ClassVar[str] = ""
    is_complex: ClassVar[bool] = False

    @classmethod
    def check_dtype(cls, dtype: np.dtype[Any]) -> bool:
        return dtype.kind in cls._kinds

    def transpose(self, a: npt.NDArray[Any]) -> npt.NDArray[Any]:
        """Swap the two axes of a 2-D ndarray."""
        return a.T

    def conj(self, flat: npt.NDArray[Any]) -> npt.NDArray[Any]:
        return flat.copy()

    def real(self, flat: npt.NDArray[Any]) -> npt.NDArray[Any]:
        return flat.copy()

    def imag(self, flat: npt.NDArray[Any]) -> npt.NDArray[Any]:
        return np.zeros_like(flat)

    def max(self, flat: npt.NDArray[Any]) -> Any:
        return flat.max()

    def min(self, flat: npt.NDArray[Any]) -> Any:
        return flat.min()

    def power(self, flat: npt.NDArray[Any], p: float) -> npt.NDArray[Any]:
        # 0 ** -1 has no integer value
        if p < 0:
            raise ValueError("integers to negative powers are not allowed")
        return np.power(flat.astype(np.float64), p).astype(self.dtype)

    def random(self, n: int, rng: np.random.Generator) -> npt.NDArray[Any]:
        raise NotImplementedError


@dataclass(frozen=True)
class BoolTraits(ElementTraits):
    _kinds: ClassVar[str] = "b"

    def random(self, n: int, rng: np.random.Generator) -> npt.NDArray[Any]:
        return rng.integers(0, 2, size=n).astype(self.dtype)


@dataclass(frozen=True)
class IntegerTraits(ElementTraits):
    _kinds: ClassVar[str] = "iu"

    def random(self, n: int, rng: np.random.Generator) -> npt.NDArray[Any]:
        # non-negative values over the full positive range of the type
        high = np.iinfo(self.dtype).max
        return rng.integers(0, high, size=n, dtype=self.dtype, endpoint=True)


@dataclass(frozen=True)
class FloatTraits(ElementTraits):
    _kinds: ClassVar[str] = "f"

    def power(self, flat: npt.NDArray[Any], p: float) -> npt.NDArray[Any]:
        return np.power(flat, self.dtype.type(p))

    def random(self, n: int, rng: np.random.Generator) -> npt.NDArray[Any]:
        return rng.random(n).astype(self.dtype)


@dataclass(frozen=True)
class ComplexTraits(ElementTraits):
    """Complex elements: transposition conjugates, extrema are taken by magnitude."""

    _kinds: ClassVar[str] = "c"
    is_complex: ClassVar[bool] = True

    def transpose(self, a: npt.NDArray[Any]) -> npt.NDArray[Any]:
        return np.conj(a.T)

    def conj(self, flat: npt.NDArray[Any]) -> npt.NDArray[Any]:
        return np.conj(flat)

    def real(self, flat: npt.NDArray[Any]) -> npt.NDArray[Any]:
        return flat.real.copy()

    def imag(self, flat: npt.NDArray[Any]) -> npt.NDArray[Any]:
        return flat.imag.copy()

    def max(self, flat: npt.NDArray[Any]) -> Any:
        return flat[np.argmax(np.abs(flat))]

    def min(self, flat: npt.NDArray[Any]) -> Any:
        return flat[np.argmin(np.abs(flat))]

    def power(self, flat: npt.NDArray[Any], p: float) -> npt.NDArray[Any]:
        return np.power(flat, self.dtype.type(p))

    def random(self, n: int, rng: np.random.Generator) -> npt.NDArray[Any]:
        return (rng.random(n) + 1j * rng.random(n)).astype(self.dtype)


_registry: tuple[type[ElementTraits], ...] = (
    BoolTraits,
    IntegerTraits,
    FloatTraits,
    ComplexTraits,
)


@functools.lru_cache(maxsize=None)
def _match(dtype: np.dtype[Any]) -> ElementTraits:
    for cls in _registry:
        if cls.check_dtype(dtype):
            return cls(dtype)
    raise TypeError(
        f"unsupported element type {dtype}; expected a bool, integer, float or complex type"
    )


def match_traits(dtype: npt.DTypeLike) -> ElementTraits:
    """Return the traits handling elements of ``dtype``.

    Raises
    ------
    TypeError
        If ``dtype`` is not a bool, integer, floating point or complex type.
    """
    return _match(np.dtype(dtype))
