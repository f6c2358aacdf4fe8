# flake8: noqa
from mrarray.config import config
from mrarray.core import Array, logical_and, logical_or
from mrarray.creation import (arange, array, from_extents, full, full_like,
                              hypervolume, matrix, ones, ones_like, random,
                              vector, volume, zeros, zeros_like)
from mrarray.dims import (AVE, AXIS_NAMES, CHA, COL, ECO, IDA, IDB, IDC, IDD,
                          IDE, LIN, PAR, PHS, REP, SEG, SET, SLC, Dimensions)
from mrarray.errors import (BoundsCheckError, RangeParseError, RankError,
                            ReshapeError, ShapeError, ShapeMismatchError,
                            TooManyDimensionsError)
from mrarray.interop import (ArrayPayload, KernelView, deserialize,
                             kernel_view, serialize, shape_compatible)
from mrarray.ranges import parse_selection
from mrarray.version import version as __version__
