"""streamdeck-core - Drive Stream Deck button-grid devices over HID.

This package fills keys with colors and images, controls brightness and the
startup logo, and reports key presses from Elgato Stream Deck devices.

Example:
    from streamdeck_core import MINI, open_device

    with open_device(path, MINI) as deck:
        deck.fill_color(0, 255, 0, 0)
        event = deck.events.get()
"""

from streamdeck_core.device import StreamDeck, open_device
from streamdeck_core.exceptions import (
    DeviceClosedError,
    DeviceCommunicationError,
    InvalidColorComponentError,
    InvalidImageLengthError,
    InvalidIndexError,
    InvalidRangeError,
    StreamDeckError,
    UnknownFormatError,
    UnknownModelError,
)
from streamdeck_core.image import (
    ImageConverter,
    JpegImageConverter,
    PixelFormat,
    RawImageConverter,
)
from streamdeck_core.models import (
    MINI,
    MODELS,
    ORIGINAL,
    DeckOptions,
    DeviceModel,
    DeviceProperties,
    KeyDirection,
    KeyEvent,
    PacketGeometry,
    get_model,
)

__version__ = "1.0.0"

__all__ = [
    "MINI",
    "MODELS",
    "ORIGINAL",
    "DeckOptions",
    "DeviceClosedError",
    "DeviceCommunicationError",
    "DeviceModel",
    "DeviceProperties",
    "ImageConverter",
    "InvalidColorComponentError",
    "InvalidImageLengthError",
    "InvalidIndexError",
    "InvalidRangeError",
    "JpegImageConverter",
    "KeyDirection",
    "KeyEvent",
    "PacketGeometry",
    "PixelFormat",
    "RawImageConverter",
    "StreamDeck",
    "StreamDeckError",
    "UnknownFormatError",
    "UnknownModelError",
    "__version__",
    "get_model",
    "open_device",
]
