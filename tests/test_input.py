"""Tests for input module."""

from streamdeck_core.input import KeyStateTracker
from streamdeck_core.models import DeviceProperties, KeyDirection, KeyEvent

PROPS = DeviceProperties(
    model="test",
    columns=5,
    rows=3,
    icon_size=72,
    key_direction=KeyDirection.RTL,
    key_data_offset=1,
)


def report(*pressed: int, trailer: int = 0) -> bytes:
    """Build an input report with the given native keys held down."""
    keys = bytearray(PROPS.num_keys)
    for native in pressed:
        keys[native] = 1
    return bytes([0x01]) + bytes(keys) + bytes([trailer])


class TestKeyStateTracker:
    """Tests for KeyStateTracker class."""

    def test_initially_released(self) -> None:
        """All keys should start released."""
        tracker = KeyStateTracker(PROPS)
        assert tracker.state == [False] * 15

    def test_press_emits_one_event(self) -> None:
        """Pressing one key should emit exactly one press event."""
        tracker = KeyStateTracker(PROPS)
        # Native 0 is the top-right key, logical 4
        assert tracker.on_report(report(0)) == [KeyEvent(4, True)]

    def test_repeated_report_is_silent(self) -> None:
        """Feeding the same state twice should emit nothing the second time."""
        tracker = KeyStateTracker(PROPS)
        tracker.on_report(report(0, 7))
        assert tracker.on_report(report(0, 7)) == []

    def test_release(self) -> None:
        """Releasing a held key should emit a release event."""
        tracker = KeyStateTracker(PROPS)
        tracker.on_report(report(5))
        assert tracker.on_report(report()) == [KeyEvent(9, False)]
        assert tracker.state[5] is False

    def test_events_in_native_order(self) -> None:
        """Simultaneous changes should be reported in native index order."""
        tracker = KeyStateTracker(PROPS)
        events = tracker.on_report(report(14, 0, 6))
        assert [e.key for e in events] == [4, 8, 10]

    def test_any_nonzero_is_pressed(self) -> None:
        """Any non-zero key byte should count as pressed."""
        tracker = KeyStateTracker(PROPS)
        data = bytearray(report())
        data[1 + 2] = 0x80
        assert tracker.on_report(bytes(data)) == [KeyEvent(2, True)]

    def test_header_and_trailer_ignored(self) -> None:
        """The report ID and trailing padding byte are not key data."""
        tracker = KeyStateTracker(PROPS)
        assert tracker.on_report(report(trailer=0xFF)) == []

    def test_native_order_option(self) -> None:
        """Native indexes should be reported unchanged when requested."""
        tracker = KeyStateTracker(PROPS, use_native_order=True)
        assert tracker.on_report(report(0)) == [KeyEvent(0, True)]

    def test_accepts_int_lists(self) -> None:
        """hidapi returns reports as lists of ints."""
        tracker = KeyStateTracker(PROPS)
        assert tracker.on_report(list(report(1))) == [KeyEvent(3, True)]

    def test_short_report(self) -> None:
        """Keys missing from a short report should keep their state."""
        tracker = KeyStateTracker(PROPS)
        tracker.on_report(report(14))
        assert tracker.on_report(bytes([0x01, 0x01, 0x00])) == [KeyEvent(4, True)]
        assert tracker.state[14] is True

    def test_reset(self) -> None:
        """reset() should release all keys without events."""
        tracker = KeyStateTracker(PROPS)
        tracker.on_report(report(3))
        tracker.reset()
        assert tracker.state == [False] * 15
        assert tracker.on_report(report(3)) == [KeyEvent(1, True)]
