"""Argument checks shared by the device operations.

Every check raises before any buffer is read or packet sent.
"""

from streamdeck_core.exceptions import (
    InvalidColorComponentError,
    InvalidImageLengthError,
    InvalidIndexError,
    InvalidRangeError,
)
from streamdeck_core.image import PixelFormat


def check_key_index(key: int, num_keys: int) -> None:
    if not 0 <= key < num_keys:
        msg = f"Expected a valid key index 0 - {num_keys - 1}, got {key}"
        raise InvalidIndexError(msg)


def check_rgb_value(value: int) -> None:
    if not 0 <= value <= 255:
        msg = f"Expected a valid color RGB value 0 - 255, got {value}"
        raise InvalidColorComponentError(msg)


def check_format(value: PixelFormat | str) -> PixelFormat:
    """Return the parsed pixel format, raising UnknownFormatError if unknown."""
    return PixelFormat.parse(value)


def check_image_length(buffer: bytes, expected: int) -> None:
    if len(buffer) != expected:
        msg = f"Expected image buffer of length {expected}, got length {len(buffer)}"
        raise InvalidImageLengthError(msg)


def check_brightness(percentage: int) -> None:
    if not 0 <= percentage <= 100:
        msg = f"Expected brightness percentage to be between 0 and 100, got {percentage}"
        raise InvalidRangeError(msg)
