"""Custom exceptions for streamdeck-core."""


class StreamDeckError(Exception):
    """Base exception for Stream Deck errors."""


class InvalidIndexError(StreamDeckError, IndexError):
    """Raised when a key index is outside the device's key range."""


class InvalidColorComponentError(StreamDeckError, ValueError):
    """Raised when an RGB component is outside 0 - 255."""


class InvalidImageLengthError(StreamDeckError, ValueError):
    """Raised when an image buffer does not match the expected size."""


class UnknownFormatError(StreamDeckError, ValueError):
    """Raised when a pixel format tag is not one of rgb, rgba, bgr, bgra."""


class InvalidRangeError(StreamDeckError, ValueError):
    """Raised when a brightness percentage is outside 0 - 100."""


class UnknownModelError(StreamDeckError, KeyError):
    """Raised when a model name has no entry in the model table."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the message readable
        return str(self.args[0]) if self.args else ""


class DeviceClosedError(StreamDeckError):
    """Raised when an operation is attempted on a closed device."""

    def __init__(self, message: str = "Device is closed") -> None:
        super().__init__(message)


class DeviceCommunicationError(StreamDeckError, OSError):
    """Raised when communication with the device fails."""
