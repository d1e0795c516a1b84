import io
import struct

import pytest

from hdrkit.dngimage import DNGImage, IFDEntry
from hdrkit.tiffutil import DataType, Tag


def _ifd(image, base=0, strip=0):
    buf = io.BytesIO()
    image.write_ifd(base, strip, buf)
    return buf.getvalue()


def _data(image):
    buf = io.BytesIO()
    image.write_data(buf)
    return buf.getvalue()


def _parse_ifd(raw, big_endian):
    order = ">" if big_endian else "<"
    (n,) = struct.unpack_from(order + "H", raw, 0)
    out = []
    for i in range(n):
        out.append(struct.unpack_from(order + "HHI4s", raw, 2 + 12 * i))
    return out


def test_little_endian_width_ifd_bytes():
    image = DNGImage(big_endian=False)
    image.set_image_width(3)
    raw = _ifd(image)
    assert raw == (
        b"\x02\x00"
        + b"\x00\x01\x04\x00\x01\x00\x00\x00\x03\x00\x00\x00"
        + b"\x11\x01\x04\x00\x01\x00\x00\x00\x08\x00\x00\x00"
    )


def test_big_endian_short_is_left_justified():
    image = DNGImage(big_endian=True)
    image.set_samples_per_pixel(3)
    entries = _parse_ifd(_ifd(image), True)
    tag, typ, count, value = entries[0]
    assert (tag, typ, count) == (Tag.SAMPLES_PER_PIXEL, DataType.SHORT, 1)
    assert value == b"\x00\x03\x00\x00"


def test_entries_sorted_by_tag():
    image = DNGImage(big_endian=False)
    image.set_samples_per_pixel(1)
    image.set_image_length(4)
    image.set_image_width(5)
    tags = [e[0] for e in _parse_ifd(_ifd(image), False)]
    assert tags == sorted(tags)
    assert Tag.STRIP_OFFSET in tags


def test_resolution_out_of_line_round_trip():
    image = DNGImage(big_endian=False)
    image.set_samples_per_pixel(1)
    image.set_bits_per_sample([32])
    image.set_x_resolution(1.0)
    assert image.data_size() == 8
    assert _data(image) == struct.pack("<II", 1, 1)
    entries = {e[0]: e for e in _parse_ifd(_ifd(image, base=100), False)}
    _, typ, count, value = entries[Tag.XRESOLUTION]
    assert typ == DataType.RATIONAL and count == 1
    assert struct.unpack("<I", value)[0] == 0 + 8 + 100


def test_changing_byte_order_reencodes_data():
    image = DNGImage(big_endian=False)
    image.set_samples_per_pixel(1)
    image.set_bits_per_sample([32])
    image.set_y_resolution(1.0)
    image.set_big_endian(True)
    assert _data(image) == struct.pack(">II", 1, 1)


def test_image_data_swapped_for_big_endian():
    image = DNGImage(big_endian=True)
    image.set_samples_per_pixel(1)
    image.set_bits_per_sample([16])
    offset = image.data_size()
    image.set_image_data(struct.pack("=H", 0x0102))
    assert image.strip_offset() == offset
    assert image.strip_bytes() == 2
    data = _data(image)
    assert data[offset : offset + 2] == b"\x01\x02"


def test_image_data_little_endian_32bit():
    image = DNGImage(big_endian=False)
    image.set_samples_per_pixel(1)
    image.set_bits_per_sample([32])
    image.set_image_data(struct.pack("=ff", 1.5, -2.0))
    data = _data(image)
    assert struct.unpack("<ff", data[image.strip_offset() :]) == (1.5, -2.0)


def test_strip_byte_count_entry():
    image = DNGImage(big_endian=False)
    image.set_image_data(b"\x00" * 12)
    entries = {e[0]: e for e in _parse_ifd(_ifd(image), False)}
    assert struct.unpack("<I", entries[Tag.STRIP_BYTE_COUNTS][3])[0] == 12


def test_image_description_stored_with_terminator():
    image = DNGImage(big_endian=False)
    image.set_image_description("hello")
    entry = image.entries[0]
    assert entry.count == 6
    assert entry.offset == 0
    image.set_samples_per_pixel(1)
    image.set_bits_per_sample([8])
    assert _data(image).startswith(b"hello\x00")


def test_black_level_rational_values():
    image = DNGImage(big_endian=False)
    image.set_samples_per_pixel(2)
    image.set_bits_per_sample([16, 16])
    image.set_black_level_rational([1.0, 0.5])
    entry = next(e for e in image.entries if e.tag == Tag.BLACK_LEVEL)
    assert entry.count == 2
    assert entry.values == (1, 1, 1, 2)


def test_entry_byte_length():
    entry = IFDEntry(Tag.ACTIVE_AREA, DataType.LONG, 4, (0, 0, 2, 2))
    assert entry.byte_length == 16
    assert entry.payload(False) == struct.pack("<4I", 0, 0, 2, 2)


def test_subfile_type_bits():
    image = DNGImage(big_endian=False)
    image.set_subfile_type(reduced_image=True, mask=True)
    assert image.entries[0].values == (5,)


@pytest.mark.parametrize(
    "call",
    [
        lambda im: im.set_rows_per_strip(0),
        lambda im: im.set_samples_per_pixel(5),
        lambda im: im.set_bits_per_sample([32]),
        lambda im: im.set_sample_format([3]),
        lambda im: im.set_photometric(7),
        lambda im: im.set_planar_config(3),
        lambda im: im.set_compression(5),
        lambda im: im.set_orientation(9),
        lambda im: im.set_resolution_unit(4),
        lambda im: im.set_image_description(""),
        lambda im: im.set_image_data(b""),
        lambda im: im.set_x_resolution(float("inf")),
        lambda im: im.set_active_area([1, 2, 3]),
        lambda im: im.set_black_level_rational([1.0]),
    ],
)
def test_invalid_setters_raise(call):
    with pytest.raises(ValueError):
        call(DNGImage())


def test_mismatched_bits_per_sample():
    image = DNGImage()
    image.set_samples_per_pixel(2)
    with pytest.raises(ValueError):
        image.set_bits_per_sample([16, 32])
    with pytest.raises(ValueError):
        image.set_sample_format([1, 3])


def test_write_ifd_without_tags():
    with pytest.raises(ValueError):
        _ifd(DNGImage())


def test_write_data_requires_data_and_samples():
    with pytest.raises(ValueError):
        _data(DNGImage())
    image = DNGImage()
    image.set_image_data(b"\x01\x02")
    with pytest.raises(ValueError):
        _data(image)


def test_failed_setter_adds_no_entry():
    image = DNGImage()
    with pytest.raises(ValueError):
        image.set_compression(2)
    assert image.entries == ()