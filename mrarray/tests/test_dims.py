import pytest

from mrarray.dims import (
    AVE,
    AXIS_NAMES,
    CHA,
    COL,
    LIN,
    SLC,
    Dimensions,
    check_compatible,
)
from mrarray.errors import (
    BoundsCheckError,
    ShapeError,
    ShapeMismatchError,
    TooManyDimensionsError,
)


def test_axis_names():
    assert 16 == len(AXIS_NAMES)
    assert (0, 1, 2, 9, 15) == (COL, LIN, CHA, SLC, AVE)
    assert "CHA" == AXIS_NAMES[CHA]
    assert "AVE" == AXIS_NAMES[-1]


def test_construction():
    d = Dimensions((256, 128, 8))
    assert (256, 128, 8) == d.dims
    assert (1.0, 1.0, 1.0) == d.res
    assert (1, 256, 32768) == d.strides
    assert 3 == d.ndim
    assert 256 * 128 * 8 == d.size

    d = Dimensions(5, res=[0.5])
    assert (5,) == d.dims
    assert (0.5,) == d.res


def test_construction_errors():
    with pytest.raises(ShapeError):
        Dimensions(())
    with pytest.raises(ShapeError):
        Dimensions((3, 0))
    with pytest.raises(ShapeError):
        Dimensions((3, 2), res=(1.0,))
    with pytest.raises(TooManyDimensionsError):
        Dimensions((2,) * 17)
    # too many dimensions is still a shape error
    with pytest.raises(ShapeError):
        Dimensions((2,) * 17)


def test_dim_beyond_rank():
    d = Dimensions((4, 3))
    assert 4 == d.dim(COL)
    assert 3 == d.dim(LIN)
    assert 1 == d.dim(CHA)
    assert 1 == d.dim(AVE)
    with pytest.raises(BoundsCheckError):
        d.dim(-1)


def test_resolution():
    d = Dimensions((4, 3), res=(0.5, 2.0))
    assert 2.0 == d.resolution(1)
    d.set_resolution(0, 1.25)
    assert (1.25, 2.0) == d.res
    with pytest.raises(BoundsCheckError):
        d.resolution(2)
    with pytest.raises(BoundsCheckError):
        d.set_resolution(2, 1.0)


def test_set_dims():
    d = Dimensions((4, 3), res=(0.5, 2.0))
    d.set_dims((3, 4))
    assert (3, 4) == d.dims
    assert (1, 3) == d.strides
    # same rank keeps resolutions
    assert (0.5, 2.0) == d.res
    d.set_dims((12,))
    assert (1.0,) == d.res
    assert 12 == d.size
    with pytest.raises(ShapeError):
        d.set_dims((0,))
    # failed updates leave the dimensions untouched
    assert (12,) == d.dims


@pytest.mark.parametrize(
    "dims, k",
    [
        ((1,), 0),
        ((1, 1, 1), 0),
        ((5,), 1),
        ((1, 5), 1),
        ((4, 3), 2),
        ((4, 3, 1), 2),
        ((4, 1, 3), 2),
        ((4, 3, 2), 3),
        ((4, 3, 2, 2), 4),
        ((2,) * 16, 16),
    ],
)
def test_classification(dims, k):
    d = Dimensions(dims)
    assert k == d.classification
    assert d.is_xd(k)
    assert (k == 1) == d.is_1d()
    assert (k == 2) == d.is_2d()
    assert (k == 3) == d.is_3d()
    assert (k == 4) == d.is_4d()


def test_all_singleton_is_not_low_rank():
    d = Dimensions((1, 1))
    assert not d.is_1d()
    assert not d.is_2d()
    assert not d.is_3d()
    assert not d.is_4d()


def test_squeezed():
    assert (4, 3) == Dimensions((4, 1, 3, 1)).squeezed()
    assert (1,) == Dimensions((1, 1)).squeezed()
    assert (0, 2) == Dimensions((4, 1, 3, 1)).non_singleton_axes()


def test_squeeze_keeps_resolution():
    d = Dimensions((4, 1, 3, 1), res=(0.5, 2.0, 1.5, 3.0))
    d.squeeze()
    assert (4, 3) == d.dims
    assert (0.5, 1.5) == d.res
    assert (1, 4) == d.strides
    assert 12 == d.size


def test_squeeze_all_singleton():
    d = Dimensions((1, 1, 1), res=(0.25, 1.0, 1.0))
    d.squeeze()
    assert (1,) == d.dims
    assert (0.25,) == d.res


@pytest.mark.parametrize(
    "dims, h",
    [((4, 1, 3, 1), 2), ((1, 1), 0), ((1, 5), 1), ((7,), 0), ((2, 3, 4), 2)],
)
def test_hdim(dims, h):
    assert h == Dimensions(dims).hdim


def test_offset():
    d = Dimensions((4, 3, 2))
    assert 0 == d.offset(())
    assert 3 == d.offset((3,))
    assert 5 == d.offset((1, 1))
    assert 1 + 2 * 4 + 1 * 12 == d.offset((1, 2, 1))
    # coordinates past the declared rank address singleton axes
    assert 5 == d.offset((1, 1, 0, 0, 0))
    with pytest.raises(BoundsCheckError):
        d.offset((4, 0))
    with pytest.raises(BoundsCheckError):
        d.offset((0, 3))
    with pytest.raises(BoundsCheckError):
        d.offset((0, 0, 0, 1))
    with pytest.raises(BoundsCheckError):
        d.offset((-1,))
    with pytest.raises(TooManyDimensionsError):
        d.offset((0,) * 17)
    with pytest.raises(TypeError):
        d.offset((1.5,))


def test_offset_agrees_with_coords():
    d = Dimensions((4, 3, 2))
    for p in range(d.size):
        assert p == d.offset(d.coords(p))
    with pytest.raises(BoundsCheckError):
        d.coords(24)


def test_check_offset():
    d = Dimensions((4, 3))
    assert 11 == d.check_offset(11)
    with pytest.raises(BoundsCheckError):
        d.check_offset(12)
    with pytest.raises(BoundsCheckError):
        d.check_offset(-1)
    # bounds errors are index errors
    with pytest.raises(IndexError):
        d.check_offset(12)


def test_equality_and_copy():
    a = Dimensions((4, 3), res=(1.0, 2.0))
    b = Dimensions((4, 3))
    assert a == b
    assert hash(a) == hash(b)
    assert a != Dimensions((3, 4))
    c = a.copy()
    c.set_dims((2, 6))
    assert (4, 3) == a.dims
    assert (1.0, 2.0) == c.res
    check_compatible(a, b)
    with pytest.raises(ShapeMismatchError):
        check_compatible(a, c)


def test_repr():
    assert "Dimensions((4, 3), res=(1.0, 1.0))" == repr(Dimensions((4, 3)))
