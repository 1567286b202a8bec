import pytest

from colloquy.runtime.conversation.errors import NotFoundError
from colloquy.runtime.conversation.history import ConversationHistory
from colloquy.runtime.conversation.models import Message


def test_push_defaults_feedback_to_zero():
    history = ConversationHistory()
    message = history.push_text("Alice", "hello")

    assert message.feedback.as_tuple() == (0, 0)
    assert history.last() is message
    assert len(history) == 1


def test_messages_for_keeps_original_indices():
    history = ConversationHistory()
    history.push_text("A", "one")
    history.push_text("B", "two")
    history.push_text("A", "three")

    by_a = history.messages_for("A")
    assert sorted(by_a) == [0, 2]
    assert by_a[2].text == "three"
    assert history.messages_for("nobody") == {}


def test_stats_percentages():
    history = ConversationHistory()
    for text in ("aa", "bb", "cc"):
        history.push_text("A", text)
    history.push_text("B", "dd")

    stats = history.stats()
    assert stats["A"].count == 3
    assert stats["A"].percentage == pytest.approx(0.75)
    assert stats["B"].percentage == pytest.approx(0.25)
    assert stats["A"].text_count == 6
    assert stats["B"].text_percentage == pytest.approx(0.25)
    assert sum(s.percentage for s in stats.values()) == pytest.approx(1.0)


def test_stats_empty_and_zero_length_text():
    history = ConversationHistory()
    assert history.stats() == {}

    history.push_text("A", "")
    stats = history.stats()
    assert stats["A"].percentage == 1.0
    assert stats["A"].text_percentage == 0.0


def test_clean_ephemeral_preserves_order():
    history = ConversationHistory()
    history.push_text("A", "keep-1")
    history.push_text("M", "drop-1", ephemeral=True)
    history.push_text("B", "keep-2")
    history.push_text("M", "drop-2", ephemeral=True)
    history.push_text("A", "keep-3")

    assert history.clean_ephemeral() == 2
    assert [m.text for m in history] == ["keep-1", "keep-2", "keep-3"]
    assert history.clean_ephemeral() == 0


def test_feedback_is_by_identity():
    history = ConversationHistory()
    stored = history.push_text("A", "same text")
    lookalike = Message.create(actor="A", text="same text")

    history.up(stored)
    history.up(stored)
    history.down(stored)
    assert stored.feedback.as_tuple() == (2, 1)

    with pytest.raises(NotFoundError):
        history.up(lookalike)
    with pytest.raises(NotFoundError):
        history.down(lookalike)
    assert lookalike.feedback.as_tuple() == (0, 0)


def test_first_last_and_clear_in_place():
    history = ConversationHistory()
    assert history.first() is None
    assert history.last() is None

    history.push_text("A", "first")
    history.push_text("B", "last")
    assert history.first().text == "first"
    assert history.last().text == "last"

    live = history.messages
    history.clear()
    assert live == []
    assert len(history) == 0


def test_to_dict_lists_messages_in_order():
    history = ConversationHistory()
    history.push_text("A", "hi", tokens=[1, 2])
    history.push_text("B", "yo", ephemeral=True)

    doc = history.to_dict()
    assert doc["messages"][0] == {"actor": "A", "text": "hi", "feedback": [0, 0], "tokens": [1, 2]}
    assert doc["messages"][1]["ephemeral"] is True


def test_negative_feedback_rejected():
    with pytest.raises(ValueError):
        Message.create(actor="A", text="x", feedback=(-1, 0))
