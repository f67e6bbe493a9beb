#!/usr/bin/env python3
"""
Content-Length framing for clipboard text.

Each message is a textual header carrying the body length in bytes, a blank
line, then the raw UTF-8 body:

    Content-Length: 5\\r\\n\\r\\nhello

The header/body delimiter is normally CRLF CRLF; a bare LF LF is accepted
when no CRLF CRLF is present in the buffer. The length always counts encoded
bytes, so "héllo" is declared as 6.

This module provides the encoder, a pure extraction step over a byte buffer,
and FrameDecoder, which owns the per-connection parse buffer and turns
arbitrary socket reads into complete message bodies.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

logger = logging.getLogger(__name__)

# Maximum size of clipboard content in bytes (10 MB).
# Applied to outbound content and to declared inbound lengths.
MAX_CONTENT_SIZE: int = 10485760

# Maximum header size in bytes. A buffer this long with no header/body
# delimiter cannot start a valid frame.
MAX_HEADER_SIZE: int = 8192

CRLF_DELIMITER: bytes = b"\r\n\r\n"
LF_DELIMITER: bytes = b"\n\n"

_CONTENT_LENGTH_RE = re.compile(rb"Content-Length: (\d+)", re.IGNORECASE)


class ParseError(Exception):
    """
    Exception raised when a buffer does not hold exactly one valid frame.

    The streaming decoder never raises this; it reports malformed input
    through the Malformed result and discards the buffer instead.
    """

    pass


@dataclass(frozen=True)
class Incomplete:
    """More bytes are needed before a frame can be extracted."""


@dataclass(frozen=True)
class Malformed:
    """The buffer cannot start a valid frame; reason says why."""

    header: bytes
    reason: str = "Invalid Content-Length header"


@dataclass(frozen=True)
class Frame:
    """A complete frame: its body and the number of buffer bytes it spans."""

    body: bytes
    consumed: int


def encode_frame(text: str) -> bytes:
    """
    Encode clipboard text as a Content-Length frame.

    Args:
        text: Clipboard text to send.

    Returns:
        Header, CRLF CRLF delimiter and UTF-8 body as bytes.
    """
    body = text.encode("utf-8")
    return f"Content-Length: {len(body)}".encode("ascii") + CRLF_DELIMITER + body


def validate_content_size(data: bytes) -> bool:
    """
    Check if content size is within the allowed limit.

    Args:
        data: Encoded clipboard content to validate.

    Returns:
        True if len(data) <= MAX_CONTENT_SIZE, False otherwise.
    """
    return len(data) <= MAX_CONTENT_SIZE


def _find_delimiter(buffer: bytes | bytearray) -> tuple[int, int]:
    """Return (position, length) of the header delimiter, or (-1, 0)."""
    position = buffer.find(CRLF_DELIMITER)
    if position != -1:
        return position, len(CRLF_DELIMITER)
    position = buffer.find(LF_DELIMITER)
    if position != -1:
        return position, len(LF_DELIMITER)
    return -1, 0


def try_extract_frame(buffer: bytes | bytearray) -> Incomplete | Malformed | Frame:
    """
    Try to extract the first frame from the start of a buffer.

    The buffer is never modified; callers remove Frame.consumed bytes
    themselves once the body has been handled. Any bytes past the frame
    belong to the next message.

    Args:
        buffer: Accumulated bytes received from the peer.

    Returns:
        Incomplete if no delimiter or not enough body bytes are present yet,
        Malformed if the header lacks a valid Content-Length, declares more
        than MAX_CONTENT_SIZE bytes, or no delimiter appears within
        MAX_HEADER_SIZE bytes, otherwise the extracted Frame.
    """
    position, delimiter_length = _find_delimiter(buffer)
    if position == -1:
        if len(buffer) > MAX_HEADER_SIZE:
            return Malformed(
                bytes(buffer[:MAX_HEADER_SIZE]),
                f"No header delimiter within {MAX_HEADER_SIZE} bytes",
            )
        return Incomplete()

    header = bytes(buffer[:position])
    match = _CONTENT_LENGTH_RE.search(header)
    if match is None:
        return Malformed(header)

    content_length = int(match.group(1))
    if content_length > MAX_CONTENT_SIZE:
        return Malformed(
            header,
            f"Declared Content-Length {content_length} exceeds limit {MAX_CONTENT_SIZE}",
        )

    body_start = position + delimiter_length
    if len(buffer) - body_start < content_length:
        return Incomplete()

    body_end = body_start + content_length
    return Frame(body=bytes(buffer[body_start:body_end]), consumed=body_end)


def decode_frame(data: bytes) -> str:
    """
    Decode a buffer holding exactly one complete frame.

    Args:
        data: Bytes of a single encoded frame.

    Returns:
        The frame body as text.

    Raises:
        ParseError: If the header is malformed, the body is truncated, or
            bytes follow the frame.
    """
    result = try_extract_frame(data)
    if isinstance(result, Malformed):
        raise ParseError(f"{result.reason}: {result.header!r}")
    if isinstance(result, Incomplete):
        raise ParseError("Incomplete frame")
    if result.consumed != len(data):
        raise ParseError(f"{len(data) - result.consumed} trailing bytes after frame")
    return result.body.decode("utf-8", errors="replace")


class FrameDecoder:
    """
    Incremental decoder owning one connection's parse buffer.

    Bytes are appended as they arrive; every complete frame is removed from
    the front of the buffer. A partial header or body stays buffered until
    the rest arrives. A malformed header discards the whole buffer, with no
    attempt to resynchronize on a later header.
    """

    def __init__(self) -> None:
        self._buffer = bytearray()

    @property
    def pending(self) -> int:
        """Number of buffered bytes not yet consumed by a frame."""
        return len(self._buffer)

    def feed(self, data: bytes) -> list[str]:
        """
        Append received bytes and return the bodies of all complete frames.

        Args:
            data: Bytes from one socket read.

        Returns:
            Decoded bodies in arrival order, possibly empty.
        """
        self._buffer.extend(data)
        bodies: list[str] = []
        while self._buffer:
            result = try_extract_frame(self._buffer)
            if isinstance(result, Incomplete):
                logger.debug("Waiting for more data, %d bytes buffered", len(self._buffer))
                break
            if isinstance(result, Malformed):
                logger.error(
                    "%s, discarding %d buffered bytes: %r",
                    result.reason,
                    len(self._buffer),
                    result.header[:80],
                )
                self._buffer.clear()
                break
            del self._buffer[: result.consumed]
            bodies.append(result.body.decode("utf-8", errors="replace"))
        return bodies

    def reset(self) -> None:
        """Drop any buffered bytes."""
        self._buffer.clear()
