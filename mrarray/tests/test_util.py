import numpy as np
import pytest

from mrarray.config import config
from mrarray.errors import ShapeError, TooManyDimensionsError
from mrarray.util import (
    MAX_SIZE,
    dims_product,
    exclusive_strides,
    human_readable_size,
    info_html_report,
    info_text_report,
    normalize_dims,
    normalize_dtype,
    normalize_reshape_args,
    normalize_resolution,
    trim_trailing_singletons,
)


def test_normalize_dims():
    assert (100,) == normalize_dims((100,))
    assert (100,) == normalize_dims([100])
    assert (100,) == normalize_dims(100)
    assert (4, 3, 1) == normalize_dims((4, 3, 1))
    assert (4, 3) == normalize_dims((np.int64(4), np.int32(3)))
    with pytest.raises(TypeError):
        normalize_dims(None)
    with pytest.raises(TypeError):
        normalize_dims(1.5)
    with pytest.raises(ValueError):
        normalize_dims("foo")
    with pytest.raises(ShapeError):
        normalize_dims(())
    with pytest.raises(ShapeError):
        normalize_dims((4, 0))
    with pytest.raises(ShapeError):
        normalize_dims((4, -3))
    with pytest.raises(ShapeError):
        normalize_dims((4.0, 3))
    with pytest.raises(ShapeError):
        normalize_dims((True, 3))
    with pytest.raises(TooManyDimensionsError):
        normalize_dims((1,) * 17)
    assert (1,) * 16 == normalize_dims((1,) * 16)


def test_trim_trailing_singletons():
    assert (2, 3) == trim_trailing_singletons((2, 3, 1, 1))
    assert (2, 1, 3) == trim_trailing_singletons((2, 1, 3, 1))
    assert (1,) == trim_trailing_singletons((1, 1, 1))
    assert (5,) == trim_trailing_singletons((5,))


def test_normalize_resolution():
    assert (1.0, 1.0) == normalize_resolution(None, 2)
    assert (0.5, 2.0) == normalize_resolution([0.5, 2], 2)
    assert (3.0,) == normalize_resolution(3, 1)
    with pytest.raises(ShapeError):
        normalize_resolution((1.0,), 2)


def test_dims_product():
    assert 1 == dims_product((1,))
    assert 12 == dims_product((4, 3))
    assert 24 == dims_product((2, 3, 4))
    with pytest.raises(ShapeError):
        dims_product((MAX_SIZE, 2))
    with pytest.raises(ShapeError):
        dims_product((2**40, 2**40))


def test_exclusive_strides():
    assert (1,) == exclusive_strides((7,))
    assert (1, 4) == exclusive_strides((4, 3))
    assert (1, 256, 32768) == exclusive_strides((256, 128, 8))
    assert (1, 2, 2, 6) == exclusive_strides((2, 1, 3, 5))


def test_normalize_dtype():
    assert np.dtype("float64") == normalize_dtype(None)
    assert np.dtype("complex64") == normalize_dtype("c8")
    with config.set({"array.dtype": "int16"}):
        assert np.dtype("int16") == normalize_dtype(None)


def test_normalize_reshape_args():
    assert (4, 3) == normalize_reshape_args((4, 3))
    assert (4, 3) == normalize_reshape_args(4, 3)
    assert (12,) == normalize_reshape_args(12)
    with pytest.raises(ShapeError):
        normalize_reshape_args(4, 0)


def test_human_readable_size():
    assert "100" == human_readable_size(100)
    assert "1.0K" == human_readable_size(2**10)
    assert "1.0M" == human_readable_size(2**20)
    assert "1.0G" == human_readable_size(2**30)
    assert "1.0T" == human_readable_size(2**40)
    assert "1.0P" == human_readable_size(2**50)


def test_info_text_report():
    items = [("foo", "bar"), ("baz", "qux")]
    expect = "foo : bar\nbaz : qux\n"
    assert expect == info_text_report(items)


def test_info_text_report_wraps_to_configured_width():
    items = [("key", "word " * 20)]
    with config.set({"info.width": 30}):
        report = info_text_report(items)
    lines = report.splitlines()
    assert len(lines) > 1
    assert all(len(line) <= 30 for line in lines)
    assert all(line.startswith(("key : ", "    : ")) for line in lines)


def test_info_html_report():
    items = [("foo", "bar"), ("baz", "qux")]
    actual = info_html_report(items)
    assert actual.startswith('<table class="mrarray-info">')
    assert "<th" in actual
    assert "qux" in actual
