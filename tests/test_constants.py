"""Tests for constants module."""

from streamdeck_core.constants import (
    BRIGHTNESS_COMMAND,
    DEFAULT_EVENT_QUEUE_SIZE,
    FEATURE_REPORT_LENGTH,
    IMAGE_HEADER_LENGTH,
    REPORT_ID_FIRMWARE,
    REPORT_ID_SERIAL,
    RESET_COMMAND,
    VENDOR_ID,
)


def test_vendor_id() -> None:
    """Vendor ID should be Elgato."""
    assert VENDOR_ID == 0x0FD9


def test_feature_report_ids() -> None:
    """Serial and firmware reports use IDs 3 and 4."""
    assert REPORT_ID_SERIAL == 3
    assert REPORT_ID_FIRMWARE == 4
    assert FEATURE_REPORT_LENGTH == 17


def test_command_prefixes() -> None:
    """Command prefixes should fit in a feature report."""
    assert BRIGHTNESS_COMMAND == bytes([0x05, 0x55, 0xAA, 0xD1, 0x01])
    assert RESET_COMMAND == bytes([0x0B, 0x63])
    assert len(BRIGHTNESS_COMMAND) < FEATURE_REPORT_LENGTH


def test_image_header_length() -> None:
    """Image reports reserve a 16-byte header."""
    assert IMAGE_HEADER_LENGTH == 16


def test_default_event_queue_bounded() -> None:
    """The default event queue should have a finite size."""
    assert DEFAULT_EVENT_QUEUE_SIZE == 256
