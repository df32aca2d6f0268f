"""
Pixelmanip -- Cancellation
A thread-safe flag a long-running effect can poll between iterations.
"""

import threading


class CancelToken:
    """Set once to cancel; pass `token.is_set` as a `should_stop` callback."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    def is_set(self) -> bool:
        return self._event.is_set()

    def clear(self) -> None:
        self._event.clear()

    def __bool__(self) -> bool:
        return self.is_set()
