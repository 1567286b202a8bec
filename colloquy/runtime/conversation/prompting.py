"""
Prompt Rendering - Actor prompt templates

WHAT: Default Jinja2 template and rendering helpers for actor prompts
WHERE: colloquy/runtime/conversation/prompting.py - prompt generation layer
WHO: Actors rendering the windowed conversation state into a prompt string
TIME: Prompt assembly <1ms once the template is compiled

The renderer is a pure function from a template context mapping to a string.
Template contexts carry:
- actor: name of the participant being prompted
- participants: names of every participant in construction order
- context / persona / knowledge / memory: {type: [ContextEntry, ...]}
- messages: the (masked) message history, oldest first
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping

from jinja2 import Environment, Template

DEFAULT_ACTOR_TEMPLATE = """\
{%- macro section(title, buckets) -%}
{%- if buckets %}
{{ title }}:
{%- for type, entries in buckets.items() %}
{%- for entry in entries %}
- [{{ type }}] {{ entry.name }}{% if entry.description %} ({{ entry.description }}){% endif %}: {{ entry.value }}
{%- endfor %}
{%- endfor %}
{% endif -%}
{%- endmacro -%}
You are {{ actor }}. Stay in character and reply with your next message only.
Participants: {{ participants | join(", ") }}
{{ section("Context", context) }}
{{- section("Persona", persona) }}
{{- section("Knowledge", knowledge) }}
{{- section("Memory", memory) }}
Conversation:
{% for message in messages -%}
{{ message.actor }}: {{ message.text }}
{% endfor -%}
{{ actor }}:"""

_ENVIRONMENT = Environment(autoescape=False, keep_trailing_newline=False)


@lru_cache(maxsize=64)
def compile_template(source: str) -> Template:
    return _ENVIRONMENT.from_string(source)


def render_prompt(template: str, variables: Mapping[str, Any]) -> str:
    """Render ``template`` with the given template context."""

    return compile_template(template).render(**variables)


def load_template(path: str | Path) -> str:
    p = Path(path).expanduser().resolve()
    return p.read_text(encoding="utf-8")


__all__ = [
    "DEFAULT_ACTOR_TEMPLATE",
    "compile_template",
    "load_template",
    "render_prompt",
]
