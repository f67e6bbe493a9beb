#!/usr/bin/env python3
"""
Unit tests for FrameDecoder and decode_frame.

Tests incremental feeding, several frames per read, malformed input
handling and round trips of awkward content.
"""
import logging

import pytest

from cliprelay.protocol import (
    MAX_CONTENT_SIZE,
    MAX_HEADER_SIZE,
    FrameDecoder,
    ParseError,
    decode_frame,
    encode_frame,
)


@pytest.mark.parametrize(
    "text",
    ["", "hello", "héllo wörld", "日本語テキスト", "emoji 🎉", "line1\nline2", "a\r\n\r\nb", "\n\n"],
)
def test_round_trip_encode_decode(text: str) -> None:
    """Test that decoding an encoded frame returns the original text."""
    assert decode_frame(encode_frame(text)) == text


def test_decode_frame_rejects_malformed() -> None:
    """Test decode_frame raises ParseError on a bad header."""
    with pytest.raises(ParseError, match="Content-Length"):
        decode_frame(b"garbage\r\n\r\nbody")


def test_decode_frame_rejects_truncated() -> None:
    """Test decode_frame raises ParseError when the body is short."""
    with pytest.raises(ParseError, match="Incomplete"):
        decode_frame(b"Content-Length: 10\r\n\r\nshort")


def test_decode_frame_rejects_trailing_bytes() -> None:
    """Test decode_frame raises ParseError when bytes follow the frame."""
    with pytest.raises(ParseError, match="trailing"):
        decode_frame(encode_frame("a") + b"extra")


def test_feed_byte_at_a_time_yields_one_message() -> None:
    """Test splitting a frame into single bytes yields it exactly once."""
    decoder = FrameDecoder()
    text = "split ünïcode\r\nacross reads"
    results: list[str] = []
    for byte in encode_frame(text):
        results.extend(decoder.feed(bytes([byte])))
    assert results == [text]
    assert decoder.pending == 0


def test_feed_arbitrary_chunks() -> None:
    """Test uneven chunk boundaries, including inside the delimiter."""
    decoder = FrameDecoder()
    data = encode_frame("chunked")
    chunks = [data[:3], data[3:18], data[18:20], data[20:]]
    results: list[str] = []
    for chunk in chunks:
        results.extend(decoder.feed(chunk))
    assert results == ["chunked"]


def test_feed_multiple_frames_in_one_read() -> None:
    """Test two frames in one read are returned in order with no leftover."""
    decoder = FrameDecoder()
    assert decoder.feed(encode_frame("a") + encode_frame("b")) == ["a", "b"]
    assert decoder.pending == 0


def test_feed_keeps_partial_second_frame() -> None:
    """Test a trailing partial frame stays buffered for the next read."""
    decoder = FrameDecoder()
    second = encode_frame("second")
    assert decoder.feed(encode_frame("first") + second[:7]) == ["first"]
    assert decoder.pending == 7
    assert decoder.feed(second[7:]) == ["second"]


def test_feed_malformed_clears_buffer(caplog: pytest.LogCaptureFixture) -> None:
    """Test a malformed header discards the buffer, valid frame included."""
    decoder = FrameDecoder()
    with caplog.at_level(logging.ERROR):
        result = decoder.feed(b"garbage\r\n\r\nbody" + encode_frame("valid"))
    assert result == []
    assert decoder.pending == 0
    assert "Invalid Content-Length header" in caplog.text


def test_feed_recovers_after_malformed() -> None:
    """Test frames arriving after a discarded buffer decode normally."""
    decoder = FrameDecoder()
    decoder.feed(b"garbage\r\n\r\n")
    assert decoder.feed(encode_frame("next")) == ["next"]


def test_feed_frames_before_malformed_are_kept() -> None:
    """Test frames decoded earlier in the same read are still returned."""
    decoder = FrameDecoder()
    assert decoder.feed(encode_frame("ok") + b"junk\r\n\r\n") == ["ok"]
    assert decoder.pending == 0


def test_feed_lf_framing() -> None:
    """Test LF LF framed input is decoded."""
    decoder = FrameDecoder()
    assert decoder.feed(b"Content-Length: 5\n\nhello") == ["hello"]


def test_feed_replaces_invalid_utf8() -> None:
    """Test invalid UTF-8 in a body does not raise."""
    decoder = FrameDecoder()
    assert decoder.feed(b"Content-Length: 2\r\n\r\n\xff\xfe") == ["\ufffd\ufffd"]


def test_reset_drops_pending_bytes() -> None:
    """Test reset empties the buffer."""
    decoder = FrameDecoder()
    decoder.feed(b"Content-Length: 5\r\n\r\nhe")
    decoder.reset()
    assert decoder.pending == 0


def test_feed_without_delimiter_does_not_grow_unbounded(caplog: pytest.LogCaptureFixture) -> None:
    """Test a peer streaming bytes with no header delimiter is discarded."""
    decoder = FrameDecoder()
    chunk = b"x" * 65536
    with caplog.at_level(logging.ERROR):
        for _ in range(200):
            assert decoder.feed(chunk) == []
            assert decoder.pending <= MAX_HEADER_SIZE
    assert decoder.pending == 0
    assert "No header delimiter" in caplog.text


def test_feed_short_header_without_delimiter_stays_buffered() -> None:
    """Test a partial header below the header limit waits for more data."""
    decoder = FrameDecoder()
    assert decoder.feed(b"Content-Length: 5") == []
    assert decoder.pending == len(b"Content-Length: 5")


def test_feed_recovers_after_missing_delimiter() -> None:
    """Test a valid frame decodes after an over-long header was discarded."""
    decoder = FrameDecoder()
    decoder.feed(b"x" * (MAX_HEADER_SIZE + 1))
    assert decoder.feed(encode_frame("after")) == ["after"]


def test_feed_oversized_length_logs_declared_size(caplog: pytest.LogCaptureFixture) -> None:
    """Test an oversized declared length is logged with its value."""
    decoder = FrameDecoder()
    declared = MAX_CONTENT_SIZE + 1
    with caplog.at_level(logging.ERROR):
        decoder.feed(f"Content-Length: {declared}\r\n\r\n".encode("ascii"))
    assert decoder.pending == 0
    assert f"Declared Content-Length {declared} exceeds limit" in caplog.text
    assert "Invalid Content-Length header" not in caplog.text
