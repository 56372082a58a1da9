"""Background thread reading input reports from the device.

Decoded key events are put on a queue so the consumer can drain them at its
own pace, and are also passed to any registered listeners on the reader
thread. Transport errors end the loop and are delivered to error listeners
instead of being raised.
"""

import logging
import queue
import threading
from collections.abc import Callable
from enum import Enum
from typing import Any

from streamdeck_core.input import KeyStateTracker
from streamdeck_core.models import KeyEvent

logger = logging.getLogger(__name__)

KeyListener = Callable[[KeyEvent], None]
ErrorListener = Callable[[BaseException], None]


class ReaderState(Enum):
    """Lifecycle of the reader thread."""

    STOPPED = "stopped"
    STARTING = "starting"
    RUNNING = "running"


class InputReader:
    """Poll ``device.read`` on a daemon thread and dispatch key events.

    Args:
        device: Open hidapi device (anything with ``read(length, timeout_ms)``).
        tracker: Key state tracker fed with each report.
        report_length: Number of bytes to request per read.
        timeout_ms: Read timeout; bounds how long ``stop()`` waits.
        events: Queue receiving decoded key events.
    """

    def __init__(
        self,
        device: Any,
        tracker: KeyStateTracker,
        report_length: int,
        timeout_ms: int,
        events: "queue.Queue[KeyEvent]",
    ) -> None:
        self._device = device
        self._tracker = tracker
        self._report_length = report_length
        self._timeout_ms = timeout_ms
        self._events = events
        self._key_listeners: list[KeyListener] = []
        self._error_listeners: list[ErrorListener] = []
        self._stop = threading.Event()
        self._lock = threading.Lock()
        self._thread: threading.Thread | None = None
        self._state = ReaderState.STOPPED
        self._after_stop: list[Callable[[], None]] = []
        self._overflowing = False

    @property
    def state(self) -> ReaderState:
        return self._state

    def add_key_listener(self, listener: KeyListener) -> None:
        self._key_listeners.append(listener)

    def add_error_listener(self, listener: ErrorListener) -> None:
        self._error_listeners.append(listener)

    def start(self) -> None:
        """Start the reader thread. Does nothing if already started."""
        with self._lock:
            if self._state is not ReaderState.STOPPED:
                return
            self._state = ReaderState.STARTING
            self._stop.clear()
            self._thread = threading.Thread(
                target=self._run, name="streamdeck-reader", daemon=True
            )
            self._thread.start()

    def stop(self, timeout: float | None = None) -> bool:
        """Ask the reader to stop and wait for it to finish.

        Returns:
            True if the thread has finished, False if it is still running
            (blocked in ``read`` past ``timeout``, or ``stop`` was called
            from the reader thread itself).
        """
        self._stop.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
        with self._lock:
            if thread is not None and thread.is_alive():
                return False
            self._thread = None
            self._state = ReaderState.STOPPED
            return True

    def call_when_stopped(self, callback: Callable[[], None]) -> None:
        """Run ``callback`` now if stopped, else when the thread finishes."""
        with self._lock:
            if self._state is not ReaderState.STOPPED:
                self._after_stop.append(callback)
                return
        callback()

    def _run(self) -> None:
        try:
            with self._lock:
                if self._stop.is_set():
                    return
                self._state = ReaderState.RUNNING
            logger.debug("Input reader started")
            self._poll()
        finally:
            with self._lock:
                self._state = ReaderState.STOPPED
                callbacks, self._after_stop = self._after_stop, []
            for callback in callbacks:
                callback()
            logger.debug("Input reader stopped")

    def _poll(self) -> None:
        while not self._stop.is_set():
            try:
                report = self._device.read(self._report_length, self._timeout_ms)
            except OSError as e:
                logger.warning("Input reader stopped on transport error: %s", e)
                self._notify_error(e)
                return
            if report:
                self._dispatch(self._tracker.on_report(report))

    def _dispatch(self, events: list[KeyEvent]) -> None:
        for event in events:
            try:
                self._events.put_nowait(event)
                self._overflowing = False
            except queue.Full:
                if not self._overflowing:
                    logger.warning("Key event queue full, dropping events until drained")
                    self._overflowing = True
            for listener in self._key_listeners:
                try:
                    listener(event)
                except Exception:
                    logger.exception("Key listener failed for %s", event)

    def _notify_error(self, error: BaseException) -> None:
        for listener in self._error_listeners:
            try:
                listener(error)
            except Exception:
                logger.exception("Error listener failed")
