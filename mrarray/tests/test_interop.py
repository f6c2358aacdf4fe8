import ctypes

import numpy as np
import pytest
from numpy.testing import assert_array_equal

import mrarray
from mrarray.config import config
from mrarray.errors import ShapeError
from mrarray.interop import (
    ArrayPayload,
    KernelView,
    deserialize,
    kernel_view,
    serialize,
    shape_compatible,
)


def test_kernel_view():
    a = mrarray.arange((4, 3), dtype="f8")
    kv = kernel_view(a)
    assert isinstance(kv, KernelView)
    assert a.ptr == kv.ptr
    assert (4, 3) == kv.dims
    assert (1, 4) == kv.strides
    assert np.dtype("f8") == kv.dtype
    assert 8 == kv.itemsize
    assert 96 == kv.nbytes
    assert 0 == kv.ptr % 64


def test_kernel_view_addresses_elements():
    a = mrarray.arange((4, 3), dtype="f8")
    kv = kernel_view(a)
    buf = (ctypes.c_double * 12).from_address(kv.ptr)
    offset = 1 * kv.strides[0] + 2 * kv.strides[1]
    assert a[1, 2] == buf[offset]
    # writes through the pointer are visible in the array
    buf[offset] = -1.0
    assert -1.0 == a[1, 2]


def test_serialize():
    a = mrarray.arange((2, 3), dtype="c8")
    a.name = "kspace"
    a.set_res(1, 2.0)
    p = serialize(a)
    assert isinstance(p, ArrayPayload)
    assert (2, 3) == p.dims
    assert np.dtype("c8").str == p.dtype
    assert (1.0, 2.0) == p.res
    assert "kspace" == p.name
    assert_array_equal(np.arange(6), p.data)
    assert np.arange(6, dtype="c8").tobytes() == p.to_bytes()
    # the payload owns its elements
    p.data[0] = 10
    assert 0 == a[0]
    assert p.data.tobytes() == p.to_bytes()


def test_deserialize_sequence():
    a = deserialize((2, 3), [0, 1, 2, 3, 4, 5], dtype="f4", name="foo")
    assert (2, 3) == a.dims
    assert np.dtype("f4") == a.dtype
    assert "foo" == a.name
    assert 3 == a[1, 1]
    b = deserialize((6,), range(6))
    assert np.dtype(int) == b.dtype


def test_deserialize_keeps_dims_verbatim():
    a = deserialize((3, 1, 1), [1.0, 2.0, 3.0])
    assert (3, 1, 1) == a.dims


def test_deserialize_ndarray():
    data = np.arange(6, dtype="i2")
    a = deserialize((3, 2), data, res=(0.5, 0.5))
    assert np.dtype("i2") == a.dtype
    assert (0.5, 0.5) == a.res
    data[0] = 42
    assert 0 == a[0]
    b = deserialize((3, 2), data[::-1])
    assert 5 == b[0]
    assert np.dtype("f8") == deserialize((3, 2), data, dtype="f8").dtype


def test_deserialize_bytes():
    data = np.arange(6, dtype="f8")
    for buf in (data.tobytes(), bytearray(data.tobytes()), memoryview(data.tobytes())):
        a = deserialize((2, 3), buf)
        assert np.dtype("f8") == a.dtype
        assert_array_equal(data.reshape((2, 3), order="F"), a.to_numpy())
    c = deserialize((3,), np.arange(3, dtype="c8").tobytes(), dtype="c8")
    assert 2 == c[2]
    with config.set({"array.dtype": "float32"}):
        f = deserialize((12,), data.tobytes())
    assert np.dtype("f4") == f.dtype


def test_deserialize_typed_memoryview():
    data = np.arange(6, dtype="i4")
    a = deserialize((6,), memoryview(data))
    assert np.dtype("i4") == a.dtype
    assert 5 == a[5]


def test_round_trip_through_payload():
    a = mrarray.random((4, 3, 2), dtype="c16", seed=5)
    p = serialize(a)
    b = deserialize(p.dims, p.to_bytes(), dtype=p.dtype, res=p.res, name=p.name)
    assert shape_compatible(a, b)
    assert_array_equal(a.to_numpy(), b.to_numpy())


def test_deserialize_size_mismatch():
    with pytest.raises(ShapeError):
        deserialize((2, 3), [1, 2, 3])
    with pytest.raises(ShapeError):
        deserialize((2, 3), [[1, 2, 3], [4, 5, 6]])
    with pytest.raises(ShapeError):
        deserialize((2,), b"\x00" * 12)
    with pytest.raises(ShapeError):
        deserialize((2,), b"\x00" * 10, dtype="f8")
    with pytest.raises(ShapeError):
        deserialize((0,), [])


def test_shape_compatible():
    a = mrarray.zeros((4, 3))
    assert shape_compatible(a, mrarray.ones((4, 3), dtype="i4"))
    assert not shape_compatible(a, mrarray.zeros((3, 4)))
