import pytest

from colloquy.runtime.conversation.actor import Actor, KnowledgeType, MemoryType, PersonaType, Section
from colloquy.runtime.conversation.models import ContextEntry, Message
from colloquy.runtime.conversation.prompting import DEFAULT_ACTOR_TEMPLATE, load_template, render_prompt


def test_actor_has_name_and_id():
    actor = Actor("Bob", id_factory=lambda: "bob-1")
    assert actor.name == "Bob"
    assert str(actor) == "Bob"
    assert actor.id == "bob-1"
    assert actor.template == DEFAULT_ACTOR_TEMPLATE


def test_sections_bucket_by_type():
    actor = Actor(
        "Newton",
        persona={PersonaType.GOAL: [{"name": "optics", "value": "explain light"}]},
        knowledge={"fact": [ContextEntry(name="g", value="9.81", type="wrong")]},
    )
    actor.add(Section.MEMORY, {"name": "apple", "value": "it fell"}, type_=MemoryType.EVENT)
    actor.add("knowledge", ContextEntry(name="calculus", value="invented it", type=KnowledgeType.SKILL))

    assert [e.name for e in actor.persona["goal"]] == ["optics"]
    assert actor.knowledge["fact"][0].type == "fact"
    assert [e.name for e in actor.knowledge["skill"]] == ["calculus"]
    assert actor.memory["event"][0].value == "it fell"

    with pytest.raises(ValueError):
        actor.add(Section.CONTEXT, {"name": "x", "value": "y"})


def test_labeled_entries_overlay_shared_context():
    actor = Actor("A", context={"mood": {"name": "ignored", "value": "calm"}, "topic": {"name": "topic", "value": "private"}})
    assert actor.context["mood"].name == "mood"

    shared = [ContextEntry(name="topic", value="gravity")]
    view = actor.labeled_entries(shared)

    assert [e.value for e in view["context"]["general"]] == ["calm", "gravity"]
    assert set(view) == {"context", "persona", "knowledge", "memory"}


def test_set_context_replacement_moves_entry_to_end():
    actor = Actor("A")
    actor.set_context({"name": "first", "value": "1"})
    actor.set_context({"name": "second", "value": "2"})
    actor.set_context({"name": "first", "value": "1b"})

    assert list(actor.context) == ["second", "first"]
    assert actor.context["first"].value == "1b"
    assert actor.delete_context("second") is True
    assert actor.delete_context("second") is False


def test_context_entries_are_frozen():
    entry = ContextEntry(name="topic", value="gravity")
    with pytest.raises(Exception):
        entry.priority = 10  # type: ignore[misc]


def test_default_template_renders_sections_and_messages():
    actor = Actor("Einstein", persona={PersonaType.TRAIT: [{"name": "playful", "description": "tone", "value": "jokes"}]})
    prompt = actor.render(
        {
            "actor": "Einstein",
            "participants": ["Einstein", "Newton"],
            "context": {"general": [ContextEntry(name="topic", value="gravity")]},
            "persona": {"trait": actor.persona["trait"]},
            "knowledge": {},
            "memory": {},
            "messages": [Message.create(actor="Newton", text="Good evening.")],
        }
    )

    assert "You are Einstein." in prompt
    assert "Participants: Einstein, Newton" in prompt
    assert "- [general] topic: gravity" in prompt
    assert "- [trait] playful (tone): jokes" in prompt
    assert "Knowledge:" not in prompt
    assert "Newton: Good evening." in prompt
    assert prompt.endswith("Einstein:")


def test_custom_template_and_loader(tmp_path):
    path = tmp_path / "actor.j2"
    path.write_text("{{ actor }} speaks after {{ messages | length }} messages", encoding="utf-8")

    actor = Actor("Bob", load_template(path))
    assert actor.render({"actor": "Bob", "messages": [1, 2]}) == "Bob speaks after 2 messages"
    assert render_prompt("{{ x }}", {"x": "y"}) == "y"


def test_actor_to_dict():
    actor = Actor("A", knowledge={KnowledgeType.FACT: [{"name": "pi", "value": "3.14", "priority": 2}]}, id_factory=lambda: "a")
    doc = actor.to_dict()
    assert doc["id"] == "a"
    assert doc["knowledge"]["fact"][0] == {
        "name": "pi",
        "value": "3.14",
        "description": "",
        "type": "fact",
        "priority": 2,
        "keep": False,
    }
