import numpy as np
import pytest

import mrarray
from mrarray.config import (
    BadConfigError,
    config,
    default_alignment,
    default_dtype,
    info_width,
    max_selection_axes,
)


def test_config_defaults_set() -> None:
    assert config.defaults == [
        {
            "array": {
                "dtype": "float64",
                "alignment": 64,
            },
            "selection": {"max_axes": 16},
            "info": {"width": 80},
        }
    ]
    assert config.get("array.dtype") == "float64"
    assert config.get("array.alignment") == 64
    assert config.get("selection.max_axes") == 16
    assert config.get("info.width") == 80


def test_config_defaults_can_be_overridden() -> None:
    assert config.get("array.alignment") == 64
    with config.set({"array.alignment": 128}):
        assert config.get("array.alignment") == 128
        assert default_alignment() == 128
    assert default_alignment() == 64


def test_config_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MRARRAY_ARRAY__DTYPE", "complex64")
    config.refresh()
    assert default_dtype() == np.dtype("complex64")
    assert mrarray.Array((2, 2)).dtype == np.dtype("complex64")


def test_config_default_dtype() -> None:
    with config.set({"array.dtype": "int32"}):
        a = mrarray.zeros((3,))
    assert a.dtype == np.dtype("int32")
    assert mrarray.zeros((3,)).dtype == np.dtype("float64")


@pytest.mark.parametrize("value", [0, 3, -64, 48, "64", 1.5])
def test_bad_alignment(value: object) -> None:
    with config.set({"array.alignment": value}):
        with pytest.raises(BadConfigError):
            default_alignment()


def test_bad_dtype() -> None:
    with config.set({"array.dtype": "not-a-dtype"}):
        with pytest.raises(BadConfigError):
            default_dtype()


@pytest.mark.parametrize("key", ["selection.max_axes", "info.width"])
@pytest.mark.parametrize("value", [0, -1, "16"])
def test_bad_positive_int(key: str, value: object) -> None:
    with config.set({key: value}):
        with pytest.raises(BadConfigError):
            if key == "info.width":
                info_width()
            else:
                max_selection_axes()


def test_bad_config_error_is_value_error() -> None:
    assert issubclass(BadConfigError, ValueError)
