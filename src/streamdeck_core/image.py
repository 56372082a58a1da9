"""Conversion of source pixel buffers into key wire images.

A converter reads one square icon out of a larger source buffer. The region
is addressed by a byte offset to its top-left pixel and a row stride, so a
whole-panel buffer can be cut into per-key icons without copying it first.

Converters do not validate their input; see ``streamdeck_core.validation``.
"""

import io
from dataclasses import dataclass
from enum import Enum
from typing import Protocol, Self

from PIL import Image

from streamdeck_core.exceptions import UnknownFormatError


class PixelFormat(Enum):
    """Channel layout of a source pixel buffer."""

    RGB = "rgb"
    RGBA = "rgba"
    BGR = "bgr"
    BGRA = "bgra"

    @property
    def bytes_per_pixel(self) -> int:
        """Number of bytes per pixel (one per channel)."""
        return len(self.value)

    @property
    def rawmode(self) -> str:
        """Pillow raw decoder mode that unpacks this layout into RGB."""
        return _RAWMODES[self]

    @classmethod
    def parse(cls, value: "PixelFormat | str") -> Self:
        """Return the format for an enum member or its string tag.

        Raises:
            UnknownFormatError: If the value is not a known format.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError as e:
            msg = f'Expected a known color format, not "{value}"'
            raise UnknownFormatError(msg) from e


# Alpha is dropped by unpacking it as a padding byte
_RAWMODES: dict[PixelFormat, str] = {
    PixelFormat.RGB: "RGB",
    PixelFormat.RGBA: "RGBX",
    PixelFormat.BGR: "BGR",
    PixelFormat.BGRA: "BGRX",
}


@dataclass(frozen=True, slots=True)
class SourceRegion:
    """Location of one icon inside a source buffer."""

    format: PixelFormat
    offset: int
    stride: int


class ImageConverter(Protocol):
    """Strategy turning one icon region into the device's wire bytes."""

    def convert(self, buffer: bytes, region: SourceRegion, size: int) -> bytes:
        """Convert the ``size`` x ``size`` region of ``buffer`` to wire bytes."""
        ...


def crop_region(buffer: bytes, region: SourceRegion, size: int) -> Image.Image:
    """Read a square region of a source buffer as an RGB image."""
    row_bytes = size * region.format.bytes_per_pixel
    view = memoryview(buffer)
    rows = b"".join(
        view[start : start + row_bytes]
        for start in range(region.offset, region.offset + region.stride * size, region.stride)
    )
    return Image.frombytes("RGB", (size, size), rows, "raw", region.format.rawmode)


class RawImageConverter:
    """Uncompressed converter: per-pixel channel reorder, no resampling.

    Args:
        wire_format: Channel order the device expects, RGB or BGR.
    """

    def __init__(self, wire_format: PixelFormat = PixelFormat.BGR) -> None:
        if wire_format not in (PixelFormat.RGB, PixelFormat.BGR):
            msg = f"Wire format must be rgb or bgr, got {wire_format.value}"
            raise ValueError(msg)
        self.wire_format = wire_format

    def __repr__(self) -> str:
        return f"RawImageConverter({self.wire_format.value!r})"

    def convert(self, buffer: bytes, region: SourceRegion, size: int) -> bytes:
        image = crop_region(buffer, region, size)
        return image.tobytes("raw", self.wire_format.rawmode)


class JpegImageConverter:
    """Compressed converter for models that take JPEG encoded icons.

    Args:
        quality: JPEG quality passed to Pillow.
        subsampling: Chroma subsampling passed to Pillow (0 = 4:4:4).
    """

    def __init__(self, quality: int = 95, subsampling: int = 0) -> None:
        self.quality = quality
        self.subsampling = subsampling

    def __repr__(self) -> str:
        return f"JpegImageConverter(quality={self.quality}, subsampling={self.subsampling})"

    def convert(self, buffer: bytes, region: SourceRegion, size: int) -> bytes:
        image = crop_region(buffer, region, size)
        with io.BytesIO() as out:
            image.save(out, "JPEG", quality=self.quality, subsampling=self.subsampling)
            return out.getvalue()


def solid_color(size: int, r: int, g: int, b: int) -> bytes:
    """Build a ``size`` x ``size`` RGB buffer of a single color."""
    return bytes((r, g, b)) * (size * size)
