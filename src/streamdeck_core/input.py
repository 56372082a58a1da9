"""Decoding of input reports into key press/release events."""

import logging

from streamdeck_core.keys import to_logical
from streamdeck_core.models import DeviceProperties, KeyEvent

logger = logging.getLogger(__name__)


class KeyStateTracker:
    """Per-key pressed state, updated from raw input reports.

    Reports are expected one at a time; this class does no locking.

    Args:
        properties: Model description (key count, key data offset).
        use_native_order: Report native indexes instead of logical ones.
    """

    def __init__(self, properties: DeviceProperties, use_native_order: bool = False) -> None:
        self._properties = properties
        self._use_native_order = use_native_order
        self._state = [False] * properties.num_keys

    @property
    def state(self) -> list[bool]:
        """Copy of the pressed state, indexed by native key."""
        return list(self._state)

    def reset(self) -> None:
        """Mark every key released without emitting events."""
        self._state = [False] * self._properties.num_keys

    def on_report(self, report: bytes | list[int]) -> list[KeyEvent]:
        """Apply one input report and return the keys that changed.

        The report header and the trailing padding byte are skipped; each
        remaining byte is one native key, non-zero meaning pressed. Events
        are ordered by native index.
        """
        props = self._properties
        data = report[props.key_data_offset : len(report) - 1]
        if len(data) < props.num_keys:
            logger.debug(
                "Short input report: %d key bytes, expected %d", len(data), props.num_keys
            )

        events: list[KeyEvent] = []
        for native, value in enumerate(data[: props.num_keys]):
            pressed = value != 0
            if pressed == self._state[native]:
                continue
            self._state[native] = pressed
            key = native
            if not self._use_native_order:
                key = to_logical(native, props.columns, props.key_direction)
            events.append(KeyEvent(key, pressed))
        return events
