"""Cancellable request context.

A ``RequestContext`` is shared between a caller and the attempt loop. The caller
may cancel it from any thread, or give it a deadline up front; the loop checks it
before each send and waits on it between attempts, so a cancellation cuts the
inter-attempt wait short.
"""

import threading
import time

from .errors import RequestCancelledError


class RequestContext:
    """Cancellation flag plus optional deadline for one or more calls"""

    def __init__(self, timeout: float | None = None):
        self._cancelled = threading.Event()
        self._deadline = time.monotonic() + timeout if timeout is not None else None

    def cancel(self) -> None:
        """Cancel the context; pending and future waits return immediately"""
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def expired(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline

    @property
    def done(self) -> bool:
        return self.cancelled or self.expired

    def remaining(self) -> float | None:
        """Seconds left before the deadline, or None when there is no deadline"""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def error(self) -> RequestCancelledError | None:
        """The error a send should fail with, or None while the context is live"""
        if self.cancelled:
            return RequestCancelledError("context canceled")
        if self.expired:
            return RequestCancelledError("context deadline exceeded")
        return None

    def wait(self, seconds: float) -> bool:
        """Block for ``seconds`` or until cancelled/expired.

        Returns True when the wait was cut short by the context.
        """
        remaining = self.remaining()
        if remaining is not None and remaining < seconds:
            self._cancelled.wait(remaining)
            return True
        return self._cancelled.wait(seconds)


def background() -> RequestContext:
    """A context that is never cancelled and has no deadline"""
    return RequestContext()
