"""Constants for Stream Deck HID communication."""

from typing import Final

# Elgato USB Vendor ID
VENDOR_ID: Final[int] = 0x0FD9

# Output report carrying one fragment of a key image
REPORT_ID_IMAGE: Final[int] = 0x02
COMMAND_IMAGE: Final[int] = 0x01
IMAGE_HEADER_LENGTH: Final[int] = 16

# Feature reports
FEATURE_REPORT_LENGTH: Final[int] = 17
REPORT_ID_SERIAL: Final[int] = 0x03
REPORT_ID_FIRMWARE: Final[int] = 0x04

# Text in firmware/serial responses starts after a 5-byte prefix
FEATURE_TEXT_OFFSET: Final[int] = 5
SERIAL_TEXT_END: Final[int] = 17

BRIGHTNESS_COMMAND: Final[bytes] = bytes([0x05, 0x55, 0xAA, 0xD1, 0x01])
RESET_COMMAND: Final[bytes] = bytes([0x0B, 0x63])

# Reader poll interval so the thread can notice shutdown requests
DEFAULT_READ_TIMEOUT_MS: Final[int] = 100

# Key events held for a consumer that is not draining the queue
DEFAULT_EVENT_QUEUE_SIZE: Final[int] = 256
