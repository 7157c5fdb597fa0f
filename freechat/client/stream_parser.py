"""Incremental decoder for the ``0:"word "`` chat stream."""

from __future__ import annotations

import codecs

from ..utils.streaming import decode_line


class StreamDecoder:
    """Turn raw response bytes into text tokens as they arrive.

    Byte chunks may split a UTF-8 sequence or a line anywhere, so both
    are buffered until complete.  Call :meth:`flush` once the stream has
    closed to process a final line that lacks its newline.
    """

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""

    def feed(self, chunk: bytes) -> list[str]:
        self._buffer += self._decoder.decode(chunk)
        *lines, self._buffer = self._buffer.split("\n")
        return self._tokens(lines)

    def flush(self) -> list[str]:
        remainder = self._buffer + self._decoder.decode(b"", final=True)
        self._buffer = ""
        return self._tokens([remainder]) if remainder else []

    @staticmethod
    def _tokens(lines: list[str]) -> list[str]:
        tokens = []
        for line in lines:
            token = decode_line(line.rstrip("\r"))
            if token is not None:
                tokens.append(token)
        return tokens


def decode_stream(body: bytes) -> str:
    """Decode a complete response body into the assistant text."""
    decoder = StreamDecoder()
    return "".join(decoder.feed(body) + decoder.flush())
