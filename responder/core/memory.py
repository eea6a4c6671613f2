"""Per-user conversation memory.

Each user identity gets its own bounded transcript. Appending past the bound
drops the oldest turns first, so the store never grows beyond
``max_turns`` entries per user. Everything lives in process memory.
"""

from __future__ import annotations

from collections import deque
from typing import Deque, Dict, List, Literal, Sequence, Tuple

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage
from pydantic import BaseModel, ConfigDict


Role = Literal["user", "assistant"]


class ConversationTurn(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Role
    text: str


class SessionHistoryStore:
    def __init__(self, max_turns: int = 20) -> None:
        if max_turns < 1:
            raise ValueError("max_turns must be at least 1")
        self.max_turns = max_turns
        self._histories: Dict[str, Deque[ConversationTurn]] = {}

    def get_history(self, user_id: str) -> Tuple[ConversationTurn, ...]:
        """Return a snapshot of the user's transcript, oldest turn first."""
        history = self._histories.get(user_id)
        if history is None:
            return ()
        return tuple(history)

    def add_to_history(self, user_id: str, role: Role, text: str) -> None:
        history = self._histories.get(user_id)
        if history is None:
            history = deque(maxlen=self.max_turns)
            self._histories[user_id] = history
        history.append(ConversationTurn(role=role, text=text))

    def __len__(self) -> int:
        return len(self._histories)


def to_lc_messages(history: Sequence[ConversationTurn]) -> List[BaseMessage]:
    messages: List[BaseMessage] = []
    for turn in history:
        if not turn.text:
            continue
        if turn.role == "assistant":
            messages.append(AIMessage(content=turn.text))
        else:
            messages.append(HumanMessage(content=turn.text))
    return messages
