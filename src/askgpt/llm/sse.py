"""Event-stream parsing for streamed chat completions.

Two stages kept separate so each can be tested on its own:

- :func:`iter_lines` frames an arbitrarily chunked byte stream into complete
  lines. It only emits a line once its line feed has arrived.
- :func:`decode_event` turns one line into a text delta, the end-of-stream
  marker, or nothing.
"""

import codecs
import logging
from collections.abc import AsyncIterable, AsyncIterator
from enum import Enum

from pydantic import ValidationError

from .models import ChatCompletionChunk

logger = logging.getLogger(__name__)

DATA_PREFIX = "data:"
DONE_SENTINEL = "[DONE]"


class StreamEnd(Enum):
    """Marker returned by :func:`decode_event` for the ``[DONE]`` payload."""

    DONE = "done"


async def iter_lines(chunks: AsyncIterable[bytes]) -> AsyncIterator[str]:
    """Split a byte stream into lines terminated by ``\\n``.

    Bytes are decoded as UTF-8 incrementally, so a character split across
    two network reads is reassembled. Yielded lines keep no line feed.
    A trailing fragment without a line feed is dropped when the stream ends.
    """
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    pending = ""
    async for chunk in chunks:
        pending += decoder.decode(chunk)
        while True:
            index = pending.find("\n")
            if index < 0:
                break
            line, pending = pending[:index], pending[index + 1:]
            yield line
    pending += decoder.decode(b"", final=True)
    if pending:
        logger.debug("dropping unterminated trailing line (%d chars)", len(pending))


def decode_event(line: str) -> str | StreamEnd | None:
    """Decode one event-stream line.

    Returns:
        StreamEnd.DONE for the ``[DONE]`` payload, the non-empty text delta of
        a completion chunk, or None for anything to skip (framing, keep-alive
        lines, malformed JSON, chunks without text)
    """
    if not line.startswith(DATA_PREFIX):
        return None

    payload = line[len(DATA_PREFIX):].strip()
    if payload == DONE_SENTINEL:
        return StreamEnd.DONE

    try:
        chunk = ChatCompletionChunk.model_validate_json(payload)
    except ValidationError:
        logger.debug("skipping malformed chunk: %.80s", payload)
        return None

    return chunk.delta_text or None


async def iter_deltas(chunks: AsyncIterable[bytes]) -> AsyncIterator[str]:
    """Yield text deltas from a raw event-stream body until ``[DONE]`` or its end."""
    async for line in iter_lines(chunks):
        event = decode_event(line)
        if event is StreamEnd.DONE:
            logger.debug("stream finished with [DONE]")
            return
        if event:
            yield event
    logger.debug("stream ended without [DONE]")
