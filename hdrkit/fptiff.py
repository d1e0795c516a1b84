"""Write floating-point pixel data as an uncompressed 32-bit float TIFF."""

from __future__ import annotations

from os import PathLike

import numpy as np

from hdrkit.dngimage import DNGImage
from hdrkit.dngwriter import DNGWriter
from hdrkit.tiffutil import (
    COMPRESSION_NONE,
    PHOTOMETRIC_BLACK_IS_ZERO,
    PHOTOMETRIC_RGB,
    PLANARCONFIG_CONTIG,
    RESUNIT_NONE,
    SAMPLEFORMAT_IEEEFP,
)


def create_float_tiff(
    data,
    width: int,
    height: int,
    in_channels: int = 4,
    channels: int = 4,
    big_endian: bool = False,
) -> DNGImage:
    """Build a DNGImage holding ``channels`` float samples per pixel.

    ``data`` holds ``width * height * in_channels`` values. Output channel
    ``c`` takes input channel ``min(c, in_channels - 1)``, so a single
    input channel is repeated across all outputs.
    """
    if in_channels < 1:
        raise ValueError("at least one input channel is required")
    pixels = np.asarray(data, dtype=np.float32).reshape(-1)
    if pixels.size != width * height * in_channels:
        raise ValueError(
            f"expected {width * height * in_channels} values for a {width}x{height} "
            f"image with {in_channels} channels, got {pixels.size}"
        )

    image = DNGImage(big_endian)
    image.set_image_width(width)
    image.set_image_length(height)
    image.set_rows_per_strip(height)
    image.set_samples_per_pixel(channels)
    image.set_bits_per_sample([32] * channels)
    image.set_planar_config(PLANARCONFIG_CONTIG)
    image.set_compression(COMPRESSION_NONE)
    image.set_photometric(PHOTOMETRIC_BLACK_IS_ZERO if channels == 1 else PHOTOMETRIC_RGB)
    image.set_x_resolution(1.0)
    image.set_y_resolution(1.0)
    image.set_resolution_unit(RESUNIT_NONE)
    image.set_sample_format([SAMPLEFORMAT_IEEEFP] * channels)

    source = np.minimum(np.arange(channels), in_channels - 1)
    buf = np.ascontiguousarray(pixels.reshape(-1, in_channels)[:, source], dtype=np.float32)
    image.set_image_data(buf.tobytes())
    return image


def write_float_tiff(
    path: str | PathLike,
    data,
    width: int,
    height: int,
    in_channels: int = 4,
    channels: int = 4,
    big_endian: bool = False,
) -> None:
    """Write ``data`` to ``path`` as a 32-bit float TIFF."""
    image = create_float_tiff(data, width, height, in_channels, channels, big_endian)
    writer = DNGWriter(big_endian)
    writer.add_image(image)
    writer.write_to_file(path)