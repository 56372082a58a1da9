"""Data models for streamdeck-core.

Each supported device is described by a ``DeviceModel`` record instead of a
subclass: geometry and key ordering in ``DeviceProperties``, the icon codec
as an ``ImageConverter`` strategy and the output report size as a
``PacketGeometry``.
"""

from dataclasses import dataclass
from enum import Enum

from streamdeck_core.constants import (
    DEFAULT_EVENT_QUEUE_SIZE,
    DEFAULT_READ_TIMEOUT_MS,
    IMAGE_HEADER_LENGTH,
)
from streamdeck_core.exceptions import UnknownModelError
from streamdeck_core.image import ImageConverter, PixelFormat, RawImageConverter


class KeyDirection(Enum):
    """Native key ordering within each row of the grid."""

    LTR = "ltr"
    RTL = "rtl"
    SERPENTINE = "serpentine"  # even rows LTR, odd rows RTL


@dataclass(frozen=True, slots=True)
class DeviceProperties:
    """Static description of one device model."""

    model: str
    columns: int
    rows: int
    icon_size: int
    key_direction: KeyDirection
    # Bytes of report header before the first key state byte
    key_data_offset: int

    def __post_init__(self) -> None:
        for name in ("columns", "rows", "icon_size"):
            if getattr(self, name) <= 0:
                msg = f"{name} must be positive, got {getattr(self, name)}"
                raise ValueError(msg)
        if self.key_data_offset < 0:
            msg = f"key_data_offset must not be negative, got {self.key_data_offset}"
            raise ValueError(msg)

    @property
    def num_keys(self) -> int:
        return self.columns * self.rows

    @property
    def icon_pixels(self) -> int:
        return self.icon_size * self.icon_size

    @property
    def icon_bytes(self) -> int:
        """Size of one icon as a 3-byte-per-pixel buffer."""
        return self.icon_pixels * 3

    @property
    def input_report_length(self) -> int:
        """Header, one byte per key, one trailing padding byte."""
        return self.key_data_offset + self.num_keys + 1


@dataclass(frozen=True, slots=True)
class PacketGeometry:
    """Size limits of image output reports."""

    packet_length: int
    header_length: int = IMAGE_HEADER_LENGTH

    def __post_init__(self) -> None:
        if self.header_length >= self.packet_length:
            msg = (
                f"Packet length {self.packet_length} leaves no room for payload "
                f"after a {self.header_length}-byte header"
            )
            raise ValueError(msg)

    @property
    def payload_length(self) -> int:
        return self.packet_length - self.header_length


@dataclass(frozen=True, slots=True)
class DeviceModel:
    """Everything the driver needs to know about a model."""

    properties: DeviceProperties
    image_converter: ImageConverter
    packet_geometry: PacketGeometry

    @property
    def name(self) -> str:
        return self.properties.model


@dataclass(frozen=True, slots=True)
class KeyEvent:
    """A key changing state. ``key`` is the logical (row-major) index."""

    key: int
    pressed: bool


@dataclass(frozen=True, slots=True)
class DeckOptions:
    """Options applied when a device is opened.

    Attributes:
        reset_to_logo_on_exit: Show the startup logo when the device closes.
        use_original_key_order: Address keys by native index, skipping the
            logical/native translation.
        read_timeout_ms: Poll interval of the input reader. Must be
            positive; hidapi treats 0 or less as a blocking read.
        event_queue_size: Bound on queued key events, 0 for unbounded.
            Events arriving while the queue is full are dropped.
    """

    reset_to_logo_on_exit: bool = False
    use_original_key_order: bool = False
    read_timeout_ms: int = DEFAULT_READ_TIMEOUT_MS
    event_queue_size: int = DEFAULT_EVENT_QUEUE_SIZE

    def __post_init__(self) -> None:
        if self.read_timeout_ms <= 0:
            msg = f"read_timeout_ms must be positive, got {self.read_timeout_ms}"
            raise ValueError(msg)
        if self.event_queue_size < 0:
            msg = f"event_queue_size must not be negative, got {self.event_queue_size}"
            raise ValueError(msg)


ORIGINAL = DeviceModel(
    properties=DeviceProperties(
        model="original",
        columns=5,
        rows=3,
        icon_size=72,
        key_direction=KeyDirection.RTL,
        key_data_offset=1,
    ),
    image_converter=RawImageConverter(PixelFormat.BGR),
    packet_geometry=PacketGeometry(packet_length=8191),
)

MINI = DeviceModel(
    properties=DeviceProperties(
        model="mini",
        columns=3,
        rows=2,
        icon_size=80,
        key_direction=KeyDirection.LTR,
        key_data_offset=1,
    ),
    image_converter=RawImageConverter(PixelFormat.BGR),
    packet_geometry=PacketGeometry(packet_length=1024),
)

MODELS: dict[str, DeviceModel] = {model.name: model for model in (ORIGINAL, MINI)}


def get_model(name: str) -> DeviceModel:
    """Look up a built-in model record by name.

    Raises:
        UnknownModelError: If no model has that name.
    """
    try:
        return MODELS[name]
    except KeyError as e:
        known = ", ".join(sorted(MODELS))
        msg = f"Unknown model {name!r} (known: {known})"
        raise UnknownModelError(msg) from e
