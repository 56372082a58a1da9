"""Pytest configuration and fixtures."""

import time
from collections.abc import Generator
from unittest.mock import MagicMock, patch

import pytest

from streamdeck_core.device import StreamDeck
from streamdeck_core.image import PixelFormat, RawImageConverter
from streamdeck_core.models import (
    DeckOptions,
    DeviceModel,
    DeviceProperties,
    KeyDirection,
    PacketGeometry,
)

DEVICE_PATH = b"/dev/hidraw3"


def idle_read(length: int, timeout_ms: int = 0) -> list[int]:
    """Stand-in for hid.device.read that never has data."""
    time.sleep(0.001)
    return []


@pytest.fixture
def tiny_model() -> DeviceModel:
    """3x2 right-to-left model with 4px icons and 32-byte packets.

    A 4x4 RGB icon is 48 bytes, which splits into three 16-byte payloads.
    """
    return DeviceModel(
        properties=DeviceProperties(
            model="tiny",
            columns=3,
            rows=2,
            icon_size=4,
            key_direction=KeyDirection.RTL,
            key_data_offset=1,
        ),
        image_converter=RawImageConverter(PixelFormat.RGB),
        packet_geometry=PacketGeometry(packet_length=32),
    )


@pytest.fixture
def mock_hid_device() -> MagicMock:
    """Create a mock hid.device object."""
    device = MagicMock()
    device.open_path = MagicMock()
    device.close = MagicMock()
    device.read = MagicMock(side_effect=idle_read)
    device.write = MagicMock(side_effect=len)
    device.send_feature_report = MagicMock(side_effect=len)
    device.get_feature_report = MagicMock(return_value=[0] * 17)
    return device


@pytest.fixture
def open_deck(mock_hid_device: MagicMock):
    """Factory opening a StreamDeck on the mock device; closes them afterwards."""
    decks: list[StreamDeck] = []

    def factory(model: DeviceModel, options: DeckOptions | None = None) -> StreamDeck:
        with patch("streamdeck_core.device.hid.device", return_value=mock_hid_device):
            deck = StreamDeck(DEVICE_PATH, model, options)
        decks.append(deck)
        return deck

    yield factory

    for deck in decks:
        deck.close()


@pytest.fixture
def deck(open_deck, tiny_model: DeviceModel) -> Generator[StreamDeck]:
    """An open deck of the tiny model."""
    yield open_deck(tiny_model)

