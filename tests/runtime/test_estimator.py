import pytest

from colloquy.runtime.conversation.estimator import (
    DEFAULT_ESTIMATOR,
    LengthEstimator,
    WordHeuristicEstimator,
    cost_of,
    exact_length,
)
from colloquy.runtime.conversation.models import ContextEntry, GenerateTextResult, Message


@pytest.mark.parametrize(
    "text,expected",
    [("hello", 1), ("hello world", 2), ("a b c d", 3), ("", 1), ("one two three four five six seven", 6)],
)
def test_word_heuristic(text, expected):
    assert DEFAULT_ESTIMATOR.estimate(text) == expected


def test_exact_lengths_are_authoritative():
    tokened = Message.create(actor="A", text="many words " * 50, tokens=[1, 2, 3])
    embedded = ContextEntry(name="n", value="v", embeddings=[0.1] * 7)
    both = Message.create(actor="A", text="x", tokens=[1], embeddings=[0.0] * 9)

    assert exact_length(tokened) == 3
    assert cost_of(tokened, tokened.text) == 3
    assert cost_of(embedded, embedded.text) == 7
    assert cost_of(both, both.text) == 1
    assert exact_length(Message.create(actor="A", text="x")) is None


def test_estimator_protocol_and_ratio_validation():
    assert isinstance(WordHeuristicEstimator(), LengthEstimator)
    with pytest.raises(ValueError):
        WordHeuristicEstimator(ratio=0)


def test_generate_text_result_coercion():
    assert GenerateTextResult.coerce("plain").text == "plain"
    mapped = GenerateTextResult.coerce({"text": "hi", "tokens": [1]})
    assert mapped.tokens == [1]

    class Reply:
        text = "obj"
        embeddings = [0.1]

    assert GenerateTextResult.coerce(Reply()).embeddings == [0.1]
    with pytest.raises(TypeError):
        GenerateTextResult.coerce({"content": "missing text"})
    with pytest.raises(TypeError):
        GenerateTextResult.coerce(42)
