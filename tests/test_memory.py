"""Tests for the per-user session history store."""

import pytest
from langchain_core.messages import AIMessage, HumanMessage
from pydantic import ValidationError

from responder.core.memory import ConversationTurn, SessionHistoryStore, to_lc_messages


def test_unknown_user_has_empty_history() -> None:
    store = SessionHistoryStore(max_turns=4)
    assert store.get_history("nobody") == ()
    assert len(store) == 0


def test_history_keeps_chronological_order() -> None:
    store = SessionHistoryStore(max_turns=4)
    store.add_to_history("u1", "user", "hi")
    store.add_to_history("u1", "assistant", "hey")

    history = store.get_history("u1")
    assert [(t.role, t.text) for t in history] == [("user", "hi"), ("assistant", "hey")]


@pytest.mark.parametrize("appends", [0, 1, 3, 4, 5, 11])
def test_fifo_eviction_keeps_most_recent_turns(appends: int) -> None:
    store = SessionHistoryStore(max_turns=4)
    for i in range(appends):
        store.add_to_history("u1", "user", f"m{i}")

    history = store.get_history("u1")
    assert len(history) == min(appends, 4)
    assert [t.text for t in history] == [f"m{i}" for i in range(max(0, appends - 4), appends)]


def test_append_at_capacity_drops_single_oldest() -> None:
    store = SessionHistoryStore(max_turns=3)
    for text in ("a", "b", "c"):
        store.add_to_history("u1", "user", text)

    store.add_to_history("u1", "assistant", "d")

    assert [t.text for t in store.get_history("u1")] == ["b", "c", "d"]


def test_users_are_isolated() -> None:
    store = SessionHistoryStore(max_turns=2)
    store.add_to_history("alice", "user", "one")
    store.add_to_history("bob", "user", "two")
    store.add_to_history("bob", "user", "three")
    store.add_to_history("bob", "user", "four")

    assert [t.text for t in store.get_history("alice")] == ["one"]
    assert [t.text for t in store.get_history("bob")] == ["three", "four"]


def test_returned_history_is_a_snapshot() -> None:
    store = SessionHistoryStore(max_turns=2)
    store.add_to_history("u1", "user", "first")
    snapshot = store.get_history("u1")

    store.add_to_history("u1", "assistant", "second")
    store.add_to_history("u1", "user", "third")

    assert [t.text for t in snapshot] == ["first"]
    assert isinstance(snapshot, tuple)


def test_empty_text_is_allowed() -> None:
    store = SessionHistoryStore(max_turns=2)
    store.add_to_history("u1", "user", "")
    assert store.get_history("u1")[0].text == ""


def test_turns_are_immutable() -> None:
    turn = ConversationTurn(role="user", text="hi")
    with pytest.raises(ValidationError):
        turn.text = "changed"


def test_rejects_non_positive_bound() -> None:
    with pytest.raises(ValueError):
        SessionHistoryStore(max_turns=0)


def test_to_lc_messages_maps_roles_and_skips_empty() -> None:
    turns = [
        ConversationTurn(role="user", text="hi"),
        ConversationTurn(role="assistant", text=""),
        ConversationTurn(role="assistant", text="hey"),
    ]
    messages = to_lc_messages(turns)

    assert len(messages) == 2
    assert isinstance(messages[0], HumanMessage)
    assert isinstance(messages[1], AIMessage)
    assert messages[1].content == "hey"
