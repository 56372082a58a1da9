"""Tests for packets module."""

import pytest

from streamdeck_core.models import PacketGeometry
from streamdeck_core.packets import frame_image, write_image_header

GEOMETRY = PacketGeometry(packet_length=32, header_length=16)


def payload_of(packets: list[bytes], length: int) -> bytes:
    """Concatenate packet payloads and trim the final padding."""
    return b"".join(packet[16:] for packet in packets)[:length]


class TestWriteImageHeader:
    """Tests for write_image_header function."""

    def test_header_layout(self) -> None:
        """Header should carry report, command, part, last flag and key."""
        packet = bytearray(32)
        write_image_header(packet, key=4, part=0x0102, is_last=True)
        assert packet[:6] == bytes([0x02, 0x01, 0x02, 0x01, 0x01, 0x05])
        assert packet[6:] == bytes(26)

    def test_not_last(self) -> None:
        """Last flag should be zero for intermediate parts."""
        packet = bytearray(32)
        write_image_header(packet, key=0, part=0, is_last=False)
        assert packet[4] == 0
        assert packet[5] == 1


class TestFrameImage:
    """Tests for frame_image function."""

    def test_splits_payload(self) -> None:
        """A 40-byte image should need three 16-byte payloads."""
        payload = bytes(range(40))
        packets = list(frame_image(2, payload, GEOMETRY))

        assert len(packets) == 3
        assert all(len(p) == 32 for p in packets)
        assert [p[2] for p in packets] == [0, 1, 2]
        assert [p[4] for p in packets] == [0, 0, 1]
        assert all(p[5] == 3 for p in packets)
        assert payload_of(packets, 40) == payload

    def test_last_packet_zero_padded(self) -> None:
        """Unused payload bytes in the final packet should be zero."""
        packets = list(frame_image(0, b"\xff" * 20, GEOMETRY))
        assert packets[-1][16:20] == b"\xff" * 4
        assert packets[-1][20:] == bytes(12)

    def test_exact_multiple(self) -> None:
        """A payload filling packets exactly should not add an empty packet."""
        packets = list(frame_image(0, b"\x01" * 32, GEOMETRY))
        assert len(packets) == 2
        assert packets[1][4] == 1
        assert packets[1][16:] == b"\x01" * 16

    def test_empty_payload(self) -> None:
        """An empty image should still produce one final header-only packet."""
        packets = list(frame_image(1, b"", GEOMETRY))
        assert len(packets) == 1
        assert packets[0][:6] == bytes([0x02, 0x01, 0x00, 0x00, 0x01, 0x02])
        assert packets[0][16:] == bytes(16)

    @pytest.mark.parametrize("length", [0, 1, 15, 16, 17, 48, 100, 1000])
    def test_packet_count(self, length: int) -> None:
        """Packet count should be ceil(max(1, len) / payload length)."""
        framed = frame_image(0, bytes(length), GEOMETRY)
        expected = -(-max(1, length) // 16)
        assert len(framed) == expected
        assert len(list(framed)) == expected

    def test_restartable(self) -> None:
        """Iterating twice should yield the same packets."""
        framed = frame_image(3, bytes(range(100)), GEOMETRY)
        assert list(framed) == list(framed)

    def test_part_index_little_endian(self) -> None:
        """Part indexes above 255 should use both header bytes."""
        packets = list(frame_image(0, bytes(16 * 300), GEOMETRY))
        assert packets[-1][2:4] == (299).to_bytes(2, "little")
