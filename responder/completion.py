from __future__ import annotations

import asyncio
import logging
from typing import Optional, Sequence

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import SystemMessage
from langchain_core.output_parsers import StrOutputParser
from langchain_core.prompts import ChatPromptTemplate, MessagesPlaceholder
from langchain_core.runnables import Runnable
from langchain_google_genai import ChatGoogleGenerativeAI

from config.settings import Settings, get_settings
from responder.core.memory import ConversationTurn, to_lc_messages
from responder.core.prompt import RESPONSE_SCHEMA, SYSTEM_PROMPT, USER_TEMPLATE


logger = logging.getLogger(__name__)


class CompletionError(RuntimeError):
    """The completion backend could not produce a reply."""


def build_llm(settings: Settings) -> BaseChatModel:
    if not settings.google_api_key:
        raise RuntimeError(
            "GOOGLE_API_KEY not set. Please configure it in environment or .env"
        )

    return ChatGoogleGenerativeAI(
        model=settings.gemini_model,
        google_api_key=settings.google_api_key,
        temperature=settings.temperature,
        top_p=settings.top_p,
        top_k=settings.top_k,
        max_output_tokens=settings.max_output_tokens,
        max_retries=settings.max_retries,
        response_mime_type="application/json",
        response_schema=RESPONSE_SCHEMA,
    )


def build_prompt() -> ChatPromptTemplate:
    # The system prompt carries literal JSON braces, so it goes in as a
    # message rather than a template.
    return ChatPromptTemplate.from_messages(
        [
            SystemMessage(content=SYSTEM_PROMPT),
            MessagesPlaceholder("chat_history", optional=True),
            ("human", USER_TEMPLATE),
        ]
    )


class StructuredCompletionClient:
    """One structured Gemini completion per call.

    The returned text is whatever the model produced; callers must not assume
    it matches RESPONSE_SCHEMA. In-flight requests are capped by a semaphore,
    and the wait for a slot counts against ``request_timeout``.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        llm: Optional[Runnable] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._llm = llm
        self._prompt = build_prompt()
        self._chain: Optional[Runnable] = None
        self._slots = asyncio.Semaphore(max(1, self.settings.max_concurrent_requests))

    @property
    def llm(self) -> Runnable:
        if self._llm is None:
            self._llm = build_llm(self.settings)
        return self._llm

    @property
    def chain(self) -> Runnable:
        if self._chain is None:
            self._chain = self._prompt | self.llm | StrOutputParser()
        return self._chain

    async def _invoke(self, payload: dict) -> str:
        async with self._slots:
            return await self.chain.ainvoke(payload)

    async def complete(
        self, user_message: str, history: Sequence[ConversationTurn] = ()
    ) -> str:
        payload = {"input": user_message}
        chat_history = to_lc_messages(history)
        if chat_history:
            payload["chat_history"] = chat_history

        try:
            text = await asyncio.wait_for(
                self._invoke(payload), timeout=self.settings.request_timeout
            )
        except asyncio.TimeoutError as exc:
            raise CompletionError(
                f"completion timed out after {self.settings.request_timeout}s"
            ) from exc
        except Exception as exc:
            raise CompletionError(f"completion request failed: {exc}") from exc

        logger.debug(
            "Completion received: history_turns=%s chars=%s",
            len(chat_history),
            len(text),
        )
        return text
