"""
Command Mailbox
===============

One slot for a servo position the dashboard wants the device to move to.

We can't push to the device. Instead the dashboard drops a position here
and the device picks it up the next time it polls GET /servo-check.

- A new command overwrites an unread one (no queue)
- Reading the command empties the slot, so it's delivered at most once
- The mailbox doesn't check the range; the router does that
"""

import threading
from typing import Optional, Union

Position = Union[int, float]


class CommandMailbox:
    """Single-slot, read-once holder for the pending servo position."""

    def __init__(self):
        self._lock = threading.Lock()
        self._pending: Optional[Position] = None

    def set_pending(self, position: Position) -> None:
        with self._lock:
            self._pending = position

    def poll_and_clear(self) -> Optional[Position]:
        """
        Take the pending position out of the mailbox.

        Returns None when there is nothing pending. Position 0 is a real
        command and comes back as 0.
        """
        with self._lock:
            position, self._pending = self._pending, None
            return position
