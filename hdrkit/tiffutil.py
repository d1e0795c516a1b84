"""TIFF tag and type definitions, rational conversion and header bytes."""

from __future__ import annotations

import math
import sys
from enum import IntEnum

HEADER_SIZE = 8

# Sub-file type bit field.
FILETYPE_REDUCEDIMAGE = 1
FILETYPE_PAGE = 2
FILETYPE_MASK = 4

# Planar configuration.
PLANARCONFIG_CONTIG = 1
PLANARCONFIG_SEPARATE = 2

# Compression.
COMPRESSION_NONE = 1

# Orientation.
ORIENTATION_TOPLEFT = 1
ORIENTATION_TOPRIGHT = 2
ORIENTATION_BOTRIGHT = 3
ORIENTATION_BOTLEFT = 4
ORIENTATION_LEFTTOP = 5
ORIENTATION_RIGHTTOP = 6
ORIENTATION_RIGHTBOT = 7
ORIENTATION_LEFTBOT = 8

# Resolution unit.
RESUNIT_NONE = 1
RESUNIT_INCH = 2
RESUNIT_CENTIMETER = 2

# Photometric interpretation.
PHOTOMETRIC_WHITE_IS_ZERO = 0
PHOTOMETRIC_BLACK_IS_ZERO = 1
PHOTOMETRIC_RGB = 2
PHOTOMETRIC_CFA = 32893
PHOTOMETRIC_LINEARRAW = 34892

# Sample format.
SAMPLEFORMAT_UINT = 1
SAMPLEFORMAT_INT = 2
SAMPLEFORMAT_IEEEFP = 3

_FLT_MANT_DIG = 24
_FLT_MAX_EXP = 128
_DBL_EPSILON = sys.float_info.epsilon


class Tag(IntEnum):
    """TIFF and DNG tag numbers."""

    SUB_FILETYPE = 254
    IMAGE_WIDTH = 256
    IMAGE_LENGTH = 257
    BITS_PER_SAMPLE = 258
    COMPRESSION = 259
    PHOTOMETRIC = 262
    IMAGEDESCRIPTION = 270
    STRIP_OFFSET = 273
    ORIENTATION = 274
    SAMPLES_PER_PIXEL = 277
    ROWS_PER_STRIP = 278
    STRIP_BYTE_COUNTS = 279
    XRESOLUTION = 282
    YRESOLUTION = 283
    PLANAR_CONFIG = 284
    RESOLUTION_UNIT = 296
    SAMPLEFORMAT = 339
    CFA_REPEAT_PATTERN_DIM = 33421
    CFA_PATTERN = 33422
    CHRROMA_BLUR_RADIUS = 50703
    DNG_VERSION = 50706
    DNG_BACKWARD_VERSION = 50707
    BLACK_LEVEL = 50714
    WHITE_LEVEL = 50717
    COLOR_MATRIX1 = 50721
    COLOR_MATRIX2 = 50722
    ACTIVE_AREA = 50829
    EXTRA_CAMERA_PROFILES = 50933
    AS_SHOT_PROFILE_NAME = 50934
    PROFILE_NAME = 50936
    FORWARD_MATRIX1 = 50964
    FORWARD_MATRIX2 = 50965
    DEFAULT_BLACK_RENDER = 51110


class DataType(IntEnum):
    """TIFF field data types."""

    NOTYPE = 0
    BYTE = 1
    ASCII = 2
    SHORT = 3
    LONG = 4
    RATIONAL = 5
    SBYTE = 6
    UNDEFINED = 7
    SSHORT = 8
    SLONG = 9
    SRATIONAL = 10
    FLOAT = 11
    DOUBLE = 12
    IFD = 13
    LONG8 = 16
    SLONG8 = 17
    IFD8 = 18


_TYPE_SIZES = (1, 1, 1, 2, 4, 8, 1, 1, 2, 4, 8, 4, 8, 4)


def type_size(data_type: int) -> int:
    """Byte size of one value of a TIFF data type; unknown types count as 1."""
    index = int(data_type)
    if not 0 <= index < len(_TYPE_SIZES):
        index = 0
    return _TYPE_SIZES[index]


def double_to_rational(x: float) -> tuple[float, float]:
    """Express ``x`` as an exact (numerator, denominator) pair.

    The mantissa is reduced to single precision so both parts fit the
    32-bit fields of a TIFF rational. Raises ValueError when ``x`` cannot
    be represented.
    """
    if not math.isfinite(x):
        raise ValueError(f"cannot represent {x!r} as a rational")

    mantissa, expo = math.frexp(x)
    numerator = mantissa * 2.0**_FLT_MANT_DIG
    denominator = 1.0
    expo -= _FLT_MANT_DIG
    if expo > 0:
        numerator *= 2.0**expo
    elif expo < 0:
        expo = -expo
        if expo >= _FLT_MAX_EXP - 1:
            numerator /= 2.0 ** (expo - (_FLT_MAX_EXP - 1))
            denominator *= 2.0 ** (_FLT_MAX_EXP - 1)
            if abs(numerator) < 1.0:
                raise ValueError(f"cannot represent {x!r} as a rational")
            return numerator, denominator
        denominator *= 2.0**expo

    while (
        abs(numerator) > 0.0
        and abs(math.fmod(numerator, 2)) < _DBL_EPSILON
        and abs(math.fmod(denominator, 2)) < _DBL_EPSILON
    ):
        numerator /= 2.0
        denominator /= 2.0
    return numerator, denominator


def tiff_header(big_endian: bool) -> bytes:
    """Byte-order mark and version id that open a TIFF file."""
    if big_endian:
        return b"MM\x00\x2a"
    return b"II\x2a\x00"