"""Fragmentation of key images into fixed-size output reports.

Packet layout (``header_length`` bytes of header, then payload):

- Byte 0: report ID (0x02)
- Byte 1: command (0x01, set key image)
- Bytes 2-3: part index, little-endian
- Byte 4: 1 on the final part, else 0
- Byte 5: native key index + 1
- Remaining header bytes: zero

Every packet is ``packet_length`` bytes; the final one is zero-padded.
"""

from collections.abc import Iterator

from streamdeck_core.constants import COMMAND_IMAGE, REPORT_ID_IMAGE
from streamdeck_core.models import PacketGeometry


def write_image_header(packet: bytearray, key: int, part: int, is_last: bool) -> None:
    """Write the image command header into the start of ``packet``."""
    packet[0] = REPORT_ID_IMAGE
    packet[1] = COMMAND_IMAGE
    packet[2:4] = part.to_bytes(2, "little")
    packet[4] = 1 if is_last else 0
    packet[5] = key + 1


class FramedImage:
    """Lazy sequence of output packets for one key image.

    Iterating again starts over from part 0; no state is kept between
    iterations.
    """

    __slots__ = ("_geometry", "_key", "_payload")

    def __init__(self, key: int, payload: bytes, geometry: PacketGeometry) -> None:
        self._key = key
        self._payload = payload
        self._geometry = geometry

    def __len__(self) -> int:
        size = self._geometry.payload_length
        return max(1, -(-len(self._payload) // size))

    def __iter__(self) -> Iterator[bytes]:
        header_length = self._geometry.header_length
        size = self._geometry.payload_length
        view = memoryview(self._payload)
        count = len(self)

        for part in range(count):
            chunk = view[part * size : (part + 1) * size]
            packet = bytearray(self._geometry.packet_length)
            write_image_header(packet, self._key, part, part == count - 1)
            packet[header_length : header_length + len(chunk)] = chunk
            yield bytes(packet)


def frame_image(key: int, payload: bytes, geometry: PacketGeometry) -> FramedImage:
    """Split a wire image into output packets for a native key index."""
    return FramedImage(key, payload, geometry)
