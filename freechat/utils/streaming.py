"""Line-delimited pseudo-stream wire format.

Each line carries one word of the assistant reply::

    0:"hello "\n

The payload is a JSON string literal.  The stream has no end marker;
the consumer treats connection close as completion.
"""

from __future__ import annotations

import asyncio
import json
from typing import AsyncIterator

from loguru import logger

CHUNK_PREFIX = "0:"


def split_words(text: str) -> list[str]:
    """Split on single spaces, keeping empty tokens between repeated spaces."""
    return text.split(" ")


def encode_chunk(token: str) -> str:
    """Return the wire line for one word, including its trailing space."""
    return f"{CHUNK_PREFIX}{json.dumps(f'{token} ')}\n"


def decode_line(line: str) -> str | None:
    """Return the text payload of a wire line, or ``None`` to skip it.

    Lines without the ``0:`` prefix are ignored.  A prefixed line whose
    payload is not a JSON string is logged and skipped.
    """
    if not line.startswith(CHUNK_PREFIX):
        return None
    try:
        payload = json.loads(line[len(CHUNK_PREFIX):])
    except json.JSONDecodeError:
        logger.warning("Skipping malformed stream line: {!r}", line)
        return None
    if not isinstance(payload, str):
        logger.warning("Skipping non-string stream payload: {!r}", line)
        return None
    return payload


async def word_stream(text: str, delay: float = 0.0) -> AsyncIterator[bytes]:
    """Yield ``text`` word by word as encoded wire chunks.

    ``delay`` seconds are slept between chunks to mimic typing.  When the
    consumer disconnects the generator is cancelled at the next await.
    """
    words = split_words(text)
    sent = 0
    try:
        for index, word in enumerate(words):
            if index and delay > 0:
                await asyncio.sleep(delay)
            yield encode_chunk(word).encode("utf-8")
            sent += 1
    except (asyncio.CancelledError, GeneratorExit):
        logger.info("Stream cancelled by client after {}/{} chunks", sent, len(words))
        raise
    logger.debug("Stream closed after {} chunks", sent)
