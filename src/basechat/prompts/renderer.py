"""
Prompt template rendering.

Templates are Jinja2 sources rendered in a sandboxed environment because tenant
admins can override them from the settings page. Undefined variables render as
empty strings so a template referencing a field the context does not carry still
renders. Malformed syntax, and templates that compile but fail while rendering
(a call on a missing value, an include, an operation on the wrong type), surface
as 'TemplateError'.
"""

from datetime import datetime, timezone
from typing import Any

import jinja2
from jinja2 import ChainableUndefined, TemplateSyntaxError
from jinja2.sandbox import SandboxedEnvironment
from pydantic import BaseModel

from basechat.prompts.defaults import DEFAULT_GROUNDING_PROMPT, DEFAULT_SYSTEM_PROMPT

_environment = SandboxedEnvironment(autoescape=False, keep_trailing_newline=True, undefined=ChainableUndefined)


class TemplateError(Exception):
    """A prompt template could not be compiled or rendered."""

    def __init__(self, message: str, lineno: int | None = None) -> None:
        super().__init__(message if lineno is None else f"{message} (line {lineno})")
        self.lineno = lineno


class Company(BaseModel):
    name: str


class GroundingPromptContext(BaseModel):
    company: Company


class SystemPromptContext(BaseModel):
    company: Company
    chunks: str


def render(template_source: str, context: dict[str, Any]) -> str:
    """Render 'template_source' against 'context'. Raises 'TemplateError' if it cannot be compiled or rendered."""
    try:
        template = _environment.from_string(template_source)
    except TemplateSyntaxError as exc:
        raise TemplateError(exc.message or "Invalid template", exc.lineno) from exc
    try:
        return template.render(context)
    except (jinja2.TemplateError, TypeError) as exc:
        raise TemplateError(f"Template could not be rendered: {exc}") from exc


def render_grounding_prompt(
    context: GroundingPromptContext,
    prompt: str | None = None,
    now: datetime | None = None,
) -> str:
    """Render the tenant's grounding prompt, or the default one, with the current timestamp injected."""
    timestamp = (now or datetime.now(timezone.utc)).isoformat()
    return render(prompt or DEFAULT_GROUNDING_PROMPT, {**context.model_dump(), "now": timestamp})


def render_system_prompt(context: SystemPromptContext, prompt: str | None = None) -> str:
    return render(prompt or DEFAULT_SYSTEM_PROMPT, context.model_dump())
