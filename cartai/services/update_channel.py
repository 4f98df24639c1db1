"""
Update channel between a negotiation run and a streaming transport.

WHAT: Queue-backed on_update sink plus the SSE frame generator built on it
WHY: The engine pushes updates; EventSourceResponse pulls frames
HOW: Background task runs the negotiation into an asyncio.Queue, the generator drains it
"""

import asyncio
import json
from typing import AsyncIterator, Awaitable, Callable

from ..models.negotiation import NegotiationUpdate
from ..utils.logger import get_logger

logger = get_logger(__name__)

_CLOSED = object()


class UpdateChannel:
    """
    Single-run update sink.

    publish() is the on_update callback; iterating the channel yields
    (variant_id, update) pairs until close() is called. An error passed to
    close() is kept on .error instead of being raised into the consumer.
    """

    def __init__(self):
        self._queue: asyncio.Queue = asyncio.Queue()
        self._closed = False
        self.error: Exception | None = None

    @property
    def closed(self) -> bool:
        return self._closed

    def publish(self, update: NegotiationUpdate) -> None:
        self.publish_variant(None, update)

    def publish_variant(self, variant_id: str | None, update: NegotiationUpdate) -> None:
        if self._closed:
            logger.warning(f"Dropping {update.type} update published after close")
            return
        self._queue.put_nowait((variant_id, update))

    def close(self, error: Exception | None = None) -> None:
        if self._closed:
            return
        self._closed = True
        self.error = error
        self._queue.put_nowait(_CLOSED)

    async def __aiter__(self):
        while True:
            item = await self._queue.get()
            if item is _CLOSED:
                return
            yield item


def update_frame(update: NegotiationUpdate, variant_id: str | None = None) -> dict:
    """Serialize one update as an SSE frame dict for EventSourceResponse."""
    payload = update.model_dump(mode="json")
    if variant_id is not None:
        payload["provider"] = variant_id
    return {"event": update.type, "data": json.dumps(payload)}


def error_frame(error: Exception) -> dict:
    return {
        "event": "error",
        "data": json.dumps({
            "type": "error",
            "data": {"error": "Negotiation failed", "message": str(error)},
        }),
    }


async def stream_negotiation(
    run: Callable[[UpdateChannel], Awaitable[object]]
) -> AsyncIterator[dict]:
    """
    Generate SSE frames for one negotiation.

    WHAT: Stream message / metric / complete frames, or a terminal error frame
    WHY: Real-time updates to the frontend
    HOW: Run the negotiation as a task publishing into a channel; cancel it if the client leaves

    Args:
        run: Coroutine factory that runs the negotiation, publishing into the channel

    Yields:
        SSE event dicts
    """
    channel = UpdateChannel()

    async def drive() -> None:
        try:
            await run(channel)
        except Exception as e:
            logger.error(f"Negotiation failed: {e}", exc_info=True)
            channel.close(e)
        else:
            channel.close()

    task = asyncio.create_task(drive())
    try:
        async for variant_id, update in channel:
            yield update_frame(update, variant_id)

        if channel.error is not None:
            yield error_frame(channel.error)
    finally:
        # Client disconnected or stream finished; never leave the run behind
        if not task.done():
            logger.info("Stream closed before negotiation finished, cancelling run")
            task.cancel()
