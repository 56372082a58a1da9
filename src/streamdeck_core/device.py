"""Driver for Stream Deck button-grid devices.

``StreamDeck`` owns one open hidapi handle. Image operations validate their
arguments, convert the icon with the model's converter, split it into output
reports and write them; control operations use feature reports. Key presses
are read on a background thread (see ``streamdeck_core.reader``).
"""

import atexit
import contextlib
import logging
import queue
import threading
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Self

import hid

from streamdeck_core.constants import (
    BRIGHTNESS_COMMAND,
    FEATURE_REPORT_LENGTH,
    FEATURE_TEXT_OFFSET,
    REPORT_ID_FIRMWARE,
    REPORT_ID_SERIAL,
    RESET_COMMAND,
    SERIAL_TEXT_END,
)
from streamdeck_core.exceptions import (
    DeviceClosedError,
    DeviceCommunicationError,
    StreamDeckError,
)
from streamdeck_core.image import PixelFormat, SourceRegion, solid_color
from streamdeck_core.input import KeyStateTracker
from streamdeck_core.keys import panel_slot, to_native
from streamdeck_core.models import DeckOptions, DeviceModel, KeyEvent
from streamdeck_core.packets import frame_image
from streamdeck_core.reader import ErrorListener, InputReader, KeyListener
from streamdeck_core.validation import (
    check_brightness,
    check_format,
    check_image_length,
    check_key_index,
    check_rgb_value,
)

if TYPE_CHECKING:
    from collections.abc import Generator, Iterable
    from types import TracebackType

logger = logging.getLogger(__name__)

RESET_REPORT = RESET_COMMAND + bytes(FEATURE_REPORT_LENGTH - len(RESET_COMMAND))


def decode_text(data: "Iterable[int]") -> str:
    """Decode a NUL-terminated ASCII string from report bytes."""
    raw = bytes(data).split(b"\x00", 1)[0]
    return raw.decode("ascii", errors="replace")


class StreamDeck:
    """An open Stream Deck.

    The device is opened on construction and stays open until ``close()``,
    which is also registered to run at interpreter exit. Use as a context
    manager to close it deterministically.

    Example:
        with StreamDeck(path, MINI) as deck:
            deck.set_brightness(70)
            deck.fill_color(0, 255, 0, 0)
            event = deck.events.get()
    """

    def __init__(
        self,
        path: bytes | str,
        model: DeviceModel,
        options: DeckOptions | None = None,
    ) -> None:
        """Open the device at ``path``.

        Args:
            path: hidapi device path.
            model: Capability record for the device model.
            options: Open options; defaults to ``DeckOptions()``.

        Raises:
            DeviceCommunicationError: If the device cannot be opened.
        """
        self._model = model
        self._options = options or DeckOptions()
        self._close_lock = threading.Lock()
        self._closed = False

        self._device: Any = hid.device()
        if isinstance(path, str):
            path = path.encode()
        try:
            self._device.open_path(path)
        except OSError as e:
            msg = f"Failed to open device: {e}"
            raise DeviceCommunicationError(msg) from e
        logger.debug("Opened %s deck at %r", model.name, path)

        props = model.properties
        self.events: queue.Queue[KeyEvent] = queue.Queue(self._options.event_queue_size)
        self._tracker = KeyStateTracker(
            props, use_native_order=self._options.use_original_key_order
        )
        self._reader = InputReader(
            self._device,
            self._tracker,
            props.input_report_length,
            self._options.read_timeout_ms,
            self.events,
        )
        atexit.register(self._close_at_exit)
        self._reader.start()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: "TracebackType | None",
    ) -> None:
        self.close()

    @property
    def model(self) -> str:
        return self._model.name

    @property
    def num_keys(self) -> int:
        return self._model.properties.num_keys

    @property
    def key_columns(self) -> int:
        return self._model.properties.columns

    @property
    def key_rows(self) -> int:
        return self._model.properties.rows

    @property
    def icon_size(self) -> int:
        return self._model.properties.icon_size

    @property
    def icon_pixels(self) -> int:
        return self._model.properties.icon_pixels

    @property
    def icon_bytes(self) -> int:
        return self._model.properties.icon_bytes

    @property
    def is_open(self) -> bool:
        return not self._closed

    @property
    def key_state(self) -> list[bool]:
        """Pressed state of each key, indexed by native key."""
        return self._tracker.state

    def add_key_listener(self, listener: KeyListener) -> None:
        """Call ``listener`` on the reader thread for every key event."""
        self._reader.add_key_listener(listener)

    def add_error_listener(self, listener: ErrorListener) -> None:
        """Call ``listener`` with the error that stopped the input reader."""
        self._reader.add_error_listener(listener)

    def fill_color(self, key: int, r: int, g: int, b: int) -> None:
        """Fill a key with a solid color.

        Args:
            key: Logical key index.
            r: Red value, 0 - 255.
            g: Green value, 0 - 255.
            b: Blue value, 0 - 255.

        Raises:
            InvalidIndexError: If the key index is out of range.
            InvalidColorComponentError: If a component is out of range.
        """
        self._check_open()
        check_key_index(key, self.num_keys)
        for value in (r, g, b):
            check_rgb_value(value)

        pixels = solid_color(self.icon_size, r, g, b)
        region = SourceRegion(PixelFormat.RGB, 0, self.icon_size * 3)
        self._fill_image_range(self._to_native(key), pixels, region)

    def fill_image(
        self, key: int, buffer: bytes, pixel_format: PixelFormat | str = PixelFormat.RGB
    ) -> None:
        """Fill a key with an icon-sized image.

        Args:
            key: Logical key index.
            buffer: ``icon_size`` x ``icon_size`` pixels in ``pixel_format``.
            pixel_format: Channel layout of ``buffer``.

        Raises:
            InvalidIndexError: If the key index is out of range.
            UnknownFormatError: If the format is not rgb, rgba, bgr or bgra.
            InvalidImageLengthError: If the buffer size does not match.
        """
        self._check_open()
        check_key_index(key, self.num_keys)
        fmt = check_format(pixel_format)
        check_image_length(buffer, self.icon_pixels * fmt.bytes_per_pixel)

        region = SourceRegion(fmt, 0, self.icon_size * fmt.bytes_per_pixel)
        self._fill_image_range(self._to_native(key), buffer, region)

    def fill_panel(
        self, buffer: bytes, pixel_format: PixelFormat | str = PixelFormat.RGB
    ) -> None:
        """Fill every key from one image covering the whole grid.

        The buffer is ``key_columns * icon_size`` pixels wide and
        ``key_rows * icon_size`` pixels high, with no gaps between keys.

        Raises:
            UnknownFormatError: If the format is not rgb, rgba, bgr or bgra.
            InvalidImageLengthError: If the buffer size does not match.
        """
        self._check_open()
        fmt = check_format(pixel_format)
        check_image_length(
            buffer, self.icon_pixels * fmt.bytes_per_pixel * self.num_keys
        )

        props = self._model.properties
        icon_row_bytes = self.icon_size * fmt.bytes_per_pixel
        stride = icon_row_bytes * self.key_columns

        for row in range(self.key_rows):
            row_offset = stride * self.icon_size * row
            for column in range(self.key_columns):
                native = panel_slot(row, column, self.key_columns, props.key_direction)
                region = SourceRegion(fmt, row_offset + icon_row_bytes * column, stride)
                self._fill_image_range(native, buffer, region)

    def clear_key(self, key: int) -> None:
        """Fill a key with black."""
        self.fill_color(key, 0, 0, 0)

    def clear_all_keys(self) -> None:
        """Fill every key with black, in ascending key order."""
        for key in range(self.num_keys):
            self.clear_key(key)

    def set_brightness(self, percentage: int) -> None:
        """Set the backlight brightness.

        Raises:
            InvalidRangeError: If the percentage is outside 0 - 100.
        """
        self._check_open()
        check_brightness(percentage)
        report = bytearray(FEATURE_REPORT_LENGTH)
        report[: len(BRIGHTNESS_COMMAND)] = BRIGHTNESS_COMMAND
        report[len(BRIGHTNESS_COMMAND)] = percentage
        self._send_feature_report(bytes(report))

    def reset_to_logo(self) -> None:
        """Show the startup logo."""
        self._check_open()
        self._send_feature_report(RESET_REPORT)

    def get_firmware_version(self) -> str:
        """Read the firmware version string from the device."""
        self._check_open()
        report = self._get_feature_report(REPORT_ID_FIRMWARE, FEATURE_REPORT_LENGTH)
        return decode_text(report[FEATURE_TEXT_OFFSET:])

    def get_serial_number(self) -> str:
        """Read the serial number string from the device."""
        self._check_open()
        report = self._get_feature_report(REPORT_ID_SERIAL, FEATURE_REPORT_LENGTH)
        return decode_text(report[FEATURE_TEXT_OFFSET:SERIAL_TEXT_END])

    def close(self) -> None:
        """Close the device. Further calls do nothing."""
        with self._close_lock:
            if self._closed:
                return
            self._closed = True

        atexit.unregister(self._close_at_exit)
        if self._options.reset_to_logo_on_exit:
            try:
                self._send_feature_report(RESET_REPORT)
            except OSError as e:
                logger.debug("Reset to logo on close failed: %s", e)

        # The handle must outlive any read still in progress on it
        if not self._reader.stop(timeout=max(1.0, 2 * self._options.read_timeout_ms / 1000)):
            logger.warning("Input reader still running, device closes when it finishes")
        self._reader.call_when_stopped(self._close_handle)

    def _close_handle(self) -> None:
        with contextlib.suppress(OSError):
            self._device.close()
        logger.debug("Closed %s deck", self.model)

    def _close_at_exit(self) -> None:
        try:
            self.close()
        except StreamDeckError as e:
            logger.debug("Error closing deck at exit: %s", e)

    def _check_open(self) -> None:
        if self._closed:
            raise DeviceClosedError

    def _to_native(self, key: int) -> int:
        if self._options.use_original_key_order:
            return key
        props = self._model.properties
        return to_native(key, props.columns, props.key_direction)

    def _fill_image_range(self, native: int, buffer: bytes, region: SourceRegion) -> None:
        payload = self._model.image_converter.convert(buffer, region, self.icon_size)
        packets = frame_image(native, payload, self._model.packet_geometry)
        logger.debug(
            "Writing %d byte image to key %d in %d packets", len(payload), native, len(packets)
        )
        for packet in packets:
            self._write(packet)

    def _write(self, data: bytes) -> None:
        try:
            result = self._device.write(data)
        except OSError as e:
            msg = f"Failed to write report: {e}"
            raise DeviceCommunicationError(msg) from e
        if result < 0:
            msg = f"Report rejected by device (result={result})"
            raise DeviceCommunicationError(msg)

    def _send_feature_report(self, data: bytes) -> int:
        try:
            result: int = self._device.send_feature_report(data)
        except OSError as e:
            msg = f"Failed to send feature report: {e}"
            raise DeviceCommunicationError(msg) from e
        if result < 0:
            msg = f"Feature report rejected by device (result={result})"
            raise DeviceCommunicationError(msg)
        return result

    def _get_feature_report(self, report_id: int, length: int) -> list[int]:
        try:
            return list(self._device.get_feature_report(report_id, length))
        except OSError as e:
            msg = f"Failed to read feature report {report_id}: {e}"
            raise DeviceCommunicationError(msg) from e


@contextmanager
def open_device(
    path: bytes | str,
    model: DeviceModel,
    options: DeckOptions | None = None,
) -> "Generator[StreamDeck]":
    """Context manager opening a deck and closing it on exit.

    Example:
        with open_device(path, ORIGINAL) as deck:
            deck.clear_all_keys()
    """
    deck = StreamDeck(path, model, options)
    with deck:
        yield deck
