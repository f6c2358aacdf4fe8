"""
The config module is responsible for managing the configuration of mrarray and is based on
the Donfig python library.

Example:
    Arrays created without an explicit element type use ``array.dtype``. The value can be
    changed programmatically, temporarily inside a context manager:

    ```python
    from mrarray.config import config

    with config.set({"array.dtype": "complex64"}):
        ...
    ```

    or with an environment variable, where the double underscore ``__`` indicates nested
    access:

    ```bash
    export MRARRAY_ARRAY__DTYPE="complex64"
    ```

For more information, see the Donfig documentation at https://github.com/pytroll/donfig.
"""

from __future__ import annotations

from typing import Any

import numpy as np
from donfig import Config as DConfig


class BadConfigError(ValueError):
    _msg = "bad Config: %r"


class Config(DConfig):  # type: ignore[misc]
    """The Config will collect configuration from config files and environment variables

    Example environment variables:
    Grabs environment variables of the form "MRARRAY_FOO__BAR_BAZ=123" and
    turns these into config variables of the form ``{"foo": {"bar-baz": 123}}``
    It transforms the key and value in the following way:

    -  Lower-cases the key text
    -  Treats ``__`` (double-underscore) as nested access
    -  Calls ``ast.literal_eval`` on the value

    """

    def reset(self) -> None:
        self.clear()
        self.refresh()


# The default configuration for mrarray
config = Config(
    "mrarray",
    defaults=[
        {
            "array": {
                "dtype": "float64",
                "alignment": 64,
            },
            "selection": {"max_axes": 16},
            "info": {"width": 80},
        }
    ],
)


def parse_alignment(data: Any) -> int:
    if isinstance(data, int) and data > 0 and (data & (data - 1)) == 0:
        return data
    raise BadConfigError(f"Expected a positive power of two for the alignment, got {data!r}.")


def parse_positive_int(data: Any) -> int:
    if isinstance(data, int) and data > 0:
        return data
    raise BadConfigError(f"Expected a positive integer, got {data!r}.")


def default_dtype() -> np.dtype[Any]:
    value = config.get("array.dtype")
    try:
        return np.dtype(value)
    except TypeError as e:
        raise BadConfigError(f"Invalid default dtype {value!r}.") from e


def default_alignment() -> int:
    return parse_alignment(config.get("array.alignment"))


def max_selection_axes() -> int:
    return parse_positive_int(config.get("selection.max_axes"))


def info_width() -> int:
    return parse_positive_int(config.get("info.width"))
