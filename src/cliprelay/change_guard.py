#!/usr/bin/env python3
"""
Change detection and echo suppression for one connection.

Without tracking, text received from the peer and written to the local
clipboard would be picked up by the next poll as a local change and sent
straight back, and the two sides would bounce it forever.

ChangeGuard tracks three values:
- last_local_sent: Prevents re-sending unchanged content
- last_remote_applied: Prevents echo (sending back what we just received)
- suppress_next_poll: Skips the one poll tick that may race the clipboard
  write triggered by a received message

Critical ordering: on_message_received() must be called BEFORE writing the
clipboard so the following poll tick is already suppressed.

Both entry points are synchronous and never await, so calls made from the
read task and the poll task on the same event loop cannot interleave.
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class Emit:
    """Send this value to the peer."""

    value: str


@dataclass(frozen=True)
class Suppress:
    """Do not send; reason is used for debug logging."""

    reason: str


@dataclass
class ChangeGuard:
    """
    Decide whether a sampled clipboard value is a new local change.

    Attributes:
        last_local_sent: Last value pushed to the peer.
        last_remote_applied: Last value received from the peer, trimmed.
        suppress_next_poll: True when the next sample must be ignored.
    """

    last_local_sent: str = ""
    last_remote_applied: str = ""
    suppress_next_poll: bool = False

    def on_clipboard_sample(self, value: str) -> Emit | Suppress:
        """
        Classify one trimmed clipboard sample taken by a poll tick.

        Returns Suppress unconditionally for the first tick after a remote
        update (clearing the flag), and for empty values, values equal to
        the last one sent, and values equal to the last one received.
        Otherwise records value as sent and returns Emit.

        Args:
            value: Clipboard text with surrounding whitespace removed.

        Returns:
            Emit(value) if the value should be sent, Suppress otherwise.
        """
        if self.suppress_next_poll:
            self.suppress_next_poll = False
            return Suppress("first tick after remote update")
        if not value:
            return Suppress("clipboard empty")
        if value == self.last_local_sent:
            return Suppress("unchanged since last send")
        if value == self.last_remote_applied:
            return Suppress("echo of received content")
        self.last_local_sent = value
        return Emit(value)

    def on_message_received(self, value: str) -> None:
        """
        Record content received from the peer.

        CRITICAL: Must be called BEFORE writing the clipboard. The value is
        trimmed so it compares equal to what the poll loop will sample.

        Args:
            value: Decoded message body.
        """
        self.last_remote_applied = value.strip()
        self.suppress_next_poll = True

    def clear(self) -> None:
        """Reset to the initial state."""
        self.last_local_sent = ""
        self.last_remote_applied = ""
        self.suppress_next_poll = False
