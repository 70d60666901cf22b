from basechat.prompts.defaults import DEFAULT_GROUNDING_PROMPT, DEFAULT_SYSTEM_PROMPT
from basechat.prompts.renderer import (
    Company,
    GroundingPromptContext,
    SystemPromptContext,
    TemplateError,
    render,
    render_grounding_prompt,
    render_system_prompt,
)

__all__ = [
    "DEFAULT_GROUNDING_PROMPT",
    "DEFAULT_SYSTEM_PROMPT",
    "Company",
    "GroundingPromptContext",
    "SystemPromptContext",
    "TemplateError",
    "render",
    "render_grounding_prompt",
    "render_system_prompt",
]
