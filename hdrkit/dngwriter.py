"""Assemble one or more DNGImage objects into a complete TIFF/DNG file."""

from __future__ import annotations

import io
import struct
from os import PathLike
from typing import BinaryIO

from hdrkit.dngimage import DNGImage
from hdrkit.tiffutil import HEADER_SIZE, tiff_header


class DNGWriter:
    """Writes a TIFF/DNG file holding the added images.

    The file layout is: header, each image's data block in turn, then
    each image's IFD, chained by next-IFD offsets (the last is zero).
    """

    def __init__(self, big_endian: bool = True) -> None:
        self._big_endian = bool(big_endian)
        self._images: list[DNGImage] = []

    @property
    def big_endian(self) -> bool:
        return self._big_endian

    @property
    def images(self) -> tuple[DNGImage, ...]:
        return tuple(self._images)

    def add_image(self, image: DNGImage) -> None:
        """Queue an image for writing; it is read only when the file is written."""
        self._images.append(image)

    def _build(self) -> bytes:
        if not self._images:
            raise ValueError("no image added for writing")

        order = ">" if self._big_endian else "<"

        data_offsets: list[int] = []
        strip_offsets: list[int] = []
        data_len = 0
        for image in self._images:
            data_offsets.append(data_len)
            strip_offsets.append(data_len + image.strip_offset())
            data_len += image.data_size()

        out = io.BytesIO()
        out.write(tiff_header(self._big_endian))
        out.write(struct.pack(order + "I", HEADER_SIZE + data_len))

        for image in self._images:
            image.write_data(out)

        last = len(self._images) - 1
        for index, image in enumerate(self._images):
            image.write_ifd(data_offsets[index], strip_offsets[index], out)
            next_ifd = 0 if index == last else out.tell() + 4
            out.write(struct.pack(order + "I", next_ifd))

        return out.getvalue()

    def write(self, stream: BinaryIO) -> None:
        """Write the whole file to a binary stream."""
        stream.write(self._build())

    def write_to_file(self, filename: str | PathLike) -> None:
        """Write the whole file to ``filename``."""
        payload = self._build()
        with open(filename, "wb") as handle:
            handle.write(payload)