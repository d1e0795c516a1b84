"""One image of a TIFF/DNG file: its IFD entries, auxiliary data and strip."""

from __future__ import annotations

import struct
import sys
from dataclasses import dataclass
from typing import BinaryIO, Iterable

from hdrkit.tiffutil import (
    COMPRESSION_NONE,
    FILETYPE_MASK,
    FILETYPE_PAGE,
    FILETYPE_REDUCEDIMAGE,
    HEADER_SIZE,
    ORIENTATION_BOTLEFT,
    ORIENTATION_BOTRIGHT,
    ORIENTATION_LEFTBOT,
    ORIENTATION_LEFTTOP,
    ORIENTATION_RIGHTBOT,
    ORIENTATION_RIGHTTOP,
    ORIENTATION_TOPLEFT,
    ORIENTATION_TOPRIGHT,
    PHOTOMETRIC_BLACK_IS_ZERO,
    PHOTOMETRIC_LINEARRAW,
    PHOTOMETRIC_RGB,
    PHOTOMETRIC_WHITE_IS_ZERO,
    PLANARCONFIG_CONTIG,
    PLANARCONFIG_SEPARATE,
    RESUNIT_CENTIMETER,
    RESUNIT_INCH,
    RESUNIT_NONE,
    SAMPLEFORMAT_IEEEFP,
    SAMPLEFORMAT_INT,
    SAMPLEFORMAT_UINT,
    DataType,
    Tag,
    double_to_rational,
    type_size,
)

_NATIVE_BIG_ENDIAN = sys.byteorder == "big"
_MAX_DESCRIPTION = 1024 * 1024

_STRUCT_CODES = {
    DataType.BYTE: "B",
    DataType.SHORT: "H",
    DataType.LONG: "I",
    DataType.RATIONAL: "I",
    DataType.SBYTE: "b",
    DataType.SSHORT: "h",
    DataType.SLONG: "i",
    DataType.SRATIONAL: "i",
    DataType.FLOAT: "f",
    DataType.DOUBLE: "d",
    DataType.IFD: "I",
}

_VALID_PHOTOMETRIC = {
    PHOTOMETRIC_LINEARRAW,
    PHOTOMETRIC_RGB,
    PHOTOMETRIC_WHITE_IS_ZERO,
    PHOTOMETRIC_BLACK_IS_ZERO,
}
_VALID_PLANAR = {PLANARCONFIG_CONTIG, PLANARCONFIG_SEPARATE}
_VALID_ORIENTATION = {
    ORIENTATION_TOPLEFT,
    ORIENTATION_TOPRIGHT,
    ORIENTATION_BOTRIGHT,
    ORIENTATION_BOTLEFT,
    ORIENTATION_LEFTTOP,
    ORIENTATION_RIGHTTOP,
    ORIENTATION_RIGHTBOT,
    ORIENTATION_LEFTBOT,
}
_VALID_RESUNIT = {RESUNIT_NONE, RESUNIT_INCH, RESUNIT_CENTIMETER}
_VALID_SAMPLEFORMAT = {SAMPLEFORMAT_UINT, SAMPLEFORMAT_INT, SAMPLEFORMAT_IEEEFP}


def _order(big_endian: bool) -> str:
    return ">" if big_endian else "<"


@dataclass(frozen=True)
class IFDEntry:
    """One IFD field; ``offset`` is its position in the image's data block, if any."""

    tag: int
    type: DataType
    count: int
    values: tuple | bytes
    offset: int | None = None

    @property
    def byte_length(self) -> int:
        return self.count * type_size(self.type)

    def payload(self, big_endian: bool) -> bytes:
        """The field's value bytes in the given byte order."""
        if isinstance(self.values, bytes):
            return self.values
        code = _STRUCT_CODES[self.type]
        try:
            return struct.pack(_order(big_endian) + code * len(self.values), *self.values)
        except struct.error as exc:
            raise ValueError(f"value out of range for tag {self.tag}: {exc}") from None


def _rational(value: float) -> tuple[int, int]:
    numerator, denominator = double_to_rational(value)
    num, den = int(numerator), int(denominator)
    if not (0 <= num <= 0xFFFFFFFF and 0 < den <= 0xFFFFFFFF):
        raise ValueError(f"cannot represent {value!r} as an unsigned 32-bit rational")
    return num, den


def _swap_words(chunk: bytes, width: int) -> bytes:
    usable = len(chunk) - len(chunk) % width
    out = bytearray(chunk)
    body = chunk[:usable]
    for k in range(width):
        out[k:usable:width] = body[width - 1 - k : usable : width]
    return bytes(out)


class DNGImage:
    """Collects the tags and pixel strip of one image.

    Setters raise ValueError for values the format or the writer does
    not accept. Image data is given in the machine's native byte order
    and converted to the file's order when written.
    """

    def __init__(self, big_endian: bool = True) -> None:
        self._big_endian = bool(big_endian)
        self._data = bytearray()
        self._entries: list[IFDEntry] = []
        self._samples_per_pixel = 0
        self._bits_per_sample = 0
        self._strip_offset = 0
        self._strip_bytes = 0

    @property
    def big_endian(self) -> bool:
        return self._big_endian

    @property
    def entries(self) -> tuple[IFDEntry, ...]:
        return tuple(self._entries)

    def set_big_endian(self, big_endian: bool) -> None:
        """Choose the byte order of the file."""
        self._big_endian = bool(big_endian)

    def _add(self, tag: int, data_type: DataType, count: int, values) -> None:
        entry = IFDEntry(int(tag), DataType(data_type), count, values)
        placeholder = entry.payload(self._big_endian)
        if entry.byte_length > 4:
            entry = IFDEntry(entry.tag, entry.type, count, values, len(self._data))
            self._data.extend(placeholder)
        self._entries.append(entry)

    def _check_samples(self, count: int, what: str) -> None:
        if count == 0 or count != self._samples_per_pixel:
            raise ValueError(f"set_samples_per_pixel() must be called before {what}()")

    def set_subfile_type(
        self, reduced_image: bool = False, page: bool = False, mask: bool = False
    ) -> None:
        bits = 0
        if reduced_image:
            bits |= FILETYPE_REDUCEDIMAGE
        if page:
            bits |= FILETYPE_PAGE
        if mask:
            bits |= FILETYPE_MASK
        self._add(Tag.SUB_FILETYPE, DataType.LONG, 1, (bits,))

    def set_image_width(self, value: int) -> None:
        self._add(Tag.IMAGE_WIDTH, DataType.LONG, 1, (int(value),))

    def set_image_length(self, value: int) -> None:
        self._add(Tag.IMAGE_LENGTH, DataType.LONG, 1, (int(value),))

    def set_rows_per_strip(self, value: int) -> None:
        if value == 0:
            raise ValueError("rows per strip must be positive")
        self._add(Tag.ROWS_PER_STRIP, DataType.LONG, 1, (int(value),))

    def set_samples_per_pixel(self, value: int) -> None:
        if value > 4:
            raise ValueError("at most 4 samples per pixel are supported")
        self._add(Tag.SAMPLES_PER_PIXEL, DataType.SHORT, 1, (int(value),))
        self._samples_per_pixel = int(value)

    def set_bits_per_sample(self, values: Iterable[int]) -> None:
        values = tuple(int(v) for v in values)
        self._check_samples(len(values), "set_bits_per_sample")
        if any(v != values[0] for v in values):
            raise ValueError("bits per sample must be the same for all samples")
        self._add(Tag.BITS_PER_SAMPLE, DataType.SHORT, len(values), values)
        self._bits_per_sample = values[0]

    def set_photometric(self, value: int) -> None:
        if value not in _VALID_PHOTOMETRIC:
            raise ValueError(f"unsupported photometric interpretation {value}")
        self._add(Tag.PHOTOMETRIC, DataType.SHORT, 1, (int(value),))

    def set_planar_config(self, value: int) -> None:
        if value not in _VALID_PLANAR:
            raise ValueError(f"invalid planar configuration {value}")
        self._add(Tag.PLANAR_CONFIG, DataType.SHORT, 1, (int(value),))

    def set_orientation(self, value: int) -> None:
        if value not in _VALID_ORIENTATION:
            raise ValueError(f"invalid orientation {value}")
        self._add(Tag.ORIENTATION, DataType.SHORT, 1, (int(value),))

    def set_compression(self, value: int) -> None:
        if value != COMPRESSION_NONE:
            raise ValueError(f"unsupported compression {value}")
        self._add(Tag.COMPRESSION, DataType.SHORT, 1, (int(value),))

    def set_sample_format(self, values: Iterable[int]) -> None:
        values = tuple(int(v) for v in values)
        self._check_samples(len(values), "set_sample_format")
        if any(v != values[0] for v in values):
            raise ValueError("sample format must be the same for all samples")
        if values[0] not in _VALID_SAMPLEFORMAT:
            raise ValueError(f"invalid sample format {values[0]}")
        self._add(Tag.SAMPLEFORMAT, DataType.SHORT, len(values), values)

    def set_x_resolution(self, value: float) -> None:
        self._add(Tag.XRESOLUTION, DataType.RATIONAL, 1, _rational(value))

    def set_y_resolution(self, value: float) -> None:
        self._add(Tag.YRESOLUTION, DataType.RATIONAL, 1, _rational(value))

    def set_resolution_unit(self, value: int) -> None:
        if value not in _VALID_RESUNIT:
            raise ValueError(f"invalid resolution unit {value}")
        self._add(Tag.RESOLUTION_UNIT, DataType.SHORT, 1, (int(value),))

    def set_image_description(self, text: str | bytes) -> None:
        raw = text.encode("ascii") if isinstance(text, str) else bytes(text)
        count = len(raw) + 1
        if count < 2:
            raise ValueError("image description is empty")
        if count > _MAX_DESCRIPTION:
            raise ValueError("image description is too large")
        self._add(Tag.IMAGEDESCRIPTION, DataType.ASCII, count, raw + b"\x00")

    def set_active_area(self, values: Iterable[int]) -> None:
        values = tuple(int(v) for v in values)
        if len(values) != 4:
            raise ValueError("active area needs exactly 4 values")
        self._add(Tag.ACTIVE_AREA, DataType.LONG, 4, values)

    def _set_level(self, tag: Tag, values: Iterable[float], what: str) -> None:
        values = tuple(values)
        self._check_samples(len(values), what)
        flat = tuple(part for v in values for part in _rational(v))
        self._add(tag, DataType.RATIONAL, len(values), flat)

    def set_black_level_rational(self, values: Iterable[float]) -> None:
        self._set_level(Tag.BLACK_LEVEL, values, "set_black_level_rational")

    def set_white_level_rational(self, values: Iterable[float]) -> None:
        self._set_level(Tag.WHITE_LEVEL, values, "set_white_level_rational")

    def set_image_data(self, data) -> None:
        """Append the pixel strip (native byte order) and record its size."""
        raw = memoryview(data).tobytes()
        if not raw:
            raise ValueError("image data is empty")
        self._strip_offset = len(self._data)
        self._strip_bytes = len(raw)
        self._data.extend(raw)
        self._add(Tag.STRIP_BYTE_COUNTS, DataType.LONG, 1, (len(raw),))

    def set_custom_field_long(self, tag: int, value: int) -> None:
        self._add(tag, DataType.SLONG, 1, (int(value),))

    def set_custom_field_ulong(self, tag: int, value: int) -> None:
        self._add(tag, DataType.LONG, 1, (int(value),))

    def data_size(self) -> int:
        return len(self._data)

    def strip_offset(self) -> int:
        return self._strip_offset

    def strip_bytes(self) -> int:
        return self._strip_bytes

    def write_data(self, stream: BinaryIO) -> None:
        """Write auxiliary field data and the pixel strip."""
        if not self._data:
            raise ValueError("empty IFD data and image data")
        if self._bits_per_sample == 0 or self._samples_per_pixel == 0:
            raise ValueError("both bits per sample and samples per pixel must be set")

        out = bytearray(self._data)
        for entry in self._entries:
            if entry.offset is not None:
                payload = entry.payload(self._big_endian)
                out[entry.offset : entry.offset + len(payload)] = payload

        if self._strip_bytes and self._big_endian != _NATIVE_BIG_ENDIAN:
            width = {16: 2, 32: 4, 64: 8}.get(self._bits_per_sample)
            if width:
                start, end = self._strip_offset, self._strip_offset + self._strip_bytes
                out[start:end] = _swap_words(bytes(out[start:end]), width)

        stream.write(bytes(out))

    def write_ifd(self, data_base_offset: int, strip_offset: int, stream: BinaryIO) -> None:
        """Write the sorted IFD entries, adding the strip offset field."""
        if not self._entries:
            raise ValueError("no TIFF tags")
        order = _order(self._big_endian)
        entries = sorted(
            [
                *self._entries,
                IFDEntry(Tag.STRIP_OFFSET, DataType.LONG, 1, (strip_offset + HEADER_SIZE,)),
            ],
            key=lambda e: e.tag,
        )
        out = bytearray(struct.pack(order + "H", len(entries)))
        for entry in entries:
            out += struct.pack(order + "HHI", entry.tag, int(entry.type), entry.count)
            if entry.offset is not None:
                out += struct.pack(
                    order + "I", entry.offset + HEADER_SIZE + data_base_offset
                )
            else:
                out += entry.payload(self._big_endian).ljust(4, b"\x00")
        stream.write(bytes(out))