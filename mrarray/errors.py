__all__ = [
    "BaseMRArrayError",
    "BoundsCheckError",
    "RangeParseError",
    "RankError",
    "ReshapeError",
    "ShapeError",
    "ShapeMismatchError",
    "TooManyDimensionsError",
]


class BaseMRArrayError(ValueError):
    """
    Base error which all mrarray precondition errors are sub-classed from.
    """

    _msg: str = "{}"

    def __init__(self, *args: object) -> None:
        """
        If a single argument is passed, treat it as a pre-formatted message.

        If multiple arguments are passed, they are used as arguments for the
        template string class variable.
        """
        if len(args) == 1:
            super().__init__(args[0])
        else:
            super().__init__(self._msg.format(*args))


class _BaseMRArrayIndexError(IndexError):
    _msg: str = "{}"

    def __init__(self, *args: object) -> None:
        if len(args) == 1:
            super().__init__(args[0])
        else:
            super().__init__(self._msg.format(*args))


class ShapeError(BaseMRArrayError):
    """Raised when a dimension vector is invalid, e.g. contains a zero extent."""

    _msg = "invalid dimension vector {!r}: {}"


class TooManyDimensionsError(ShapeError):
    """Raised when a dimension vector exceeds the supported rank."""

    _msg = "at most {} dimensions are supported, got {}"


class ReshapeError(ShapeError):
    """Raised when a reshape would change the number of elements."""

    _msg = "cannot reshape array of size {} into dimensions {!r}"


class ShapeMismatchError(ShapeError):
    """Raised when two arrays are combined elementwise with different dimensions."""

    _msg = "operands have incompatible dimensions {!r} and {!r}"


class RankError(ShapeError):
    """Raised when an operation is called on an array of the wrong rank."""

    _msg = "{} requires a {}-D array, got dimensions {!r}"


class BoundsCheckError(_BaseMRArrayIndexError):
    _msg = "index {} out of bounds for dimension with length {}"


class RangeParseError(BaseMRArrayError):
    """Raised when a selection expression cannot be resolved against a dimension vector."""

    _msg = "cannot parse selection {!r}: {}"
