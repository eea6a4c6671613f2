from __future__ import annotations

import asyncio
import logging
from typing import Dict, Optional

from config.settings import Settings, get_settings
from responder.completion import CompletionError, StructuredCompletionClient
from responder.core.memory import SessionHistoryStore
from responder.core.reply import (
    StructuredReply,
    degraded_reply,
    parse_command,
    parse_reply,
)


logger = logging.getLogger(__name__)


class ResponsePipeline:
    """Turns one user message into a reply and records the exchange.

    Calls for the same user are serialised so each completion sees the
    previous exchange and turns are appended in call order.
    """

    def __init__(
        self,
        store: SessionHistoryStore,
        client: StructuredCompletionClient,
    ) -> None:
        self.store = store
        self.client = client
        self._locks: Dict[str, asyncio.Lock] = {}

    def _lock_for(self, user_id: str) -> asyncio.Lock:
        lock = self._locks.get(user_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[user_id] = lock
        return lock

    async def _reply(self, user_id: str, user_message: str) -> StructuredReply:
        history = self.store.get_history(user_id)
        try:
            raw = await self.client.complete(user_message, history)
        except CompletionError as exc:
            logger.warning("AI generation failed for user=%s: %s", user_id, exc)
            return degraded_reply()
        return parse_reply(raw)

    async def handle_message(self, user_id: str, user_message: str) -> StructuredReply:
        async with self._lock_for(user_id):
            try:
                reply = await self._reply(user_id, user_message)
            except Exception:
                logger.exception("Unexpected failure handling message for user=%s", user_id)
                reply = degraded_reply()

            self.store.add_to_history(user_id, "user", user_message)
            self.store.add_to_history(user_id, "assistant", reply.response)

        if reply.command and parse_command(reply.command) is None:
            logger.warning("Model returned unrecognised command: %r", reply.command)
        logger.info(
            "Reply ready: user=%s command=%s terminate=%s chars=%s",
            user_id,
            reply.command,
            reply.terminate,
            len(reply.response),
        )
        return reply


def build_pipeline(settings: Optional[Settings] = None) -> ResponsePipeline:
    settings = settings or get_settings()
    store = SessionHistoryStore(max_turns=settings.history_max_turns)
    client = StructuredCompletionClient(settings=settings)
    return ResponsePipeline(store, client)
