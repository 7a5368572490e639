"""Prompt template rendering.

Prompts are Jinja2 templates rendered in a sandboxed environment so that
model-produced text embedded as parameters can never execute template code.
"""

from __future__ import annotations

from jinja2 import StrictUndefined
from jinja2.sandbox import SandboxedEnvironment


class PromptBuilder:
    """Renders the meta-prompts used by the dialogue loop phases."""

    _env = SandboxedEnvironment(
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=False,
    )

    @classmethod
    def render(cls, template: str, **params) -> str:
        """Render a template string.

        Args:
            template: Jinja2 template source
            **params: Template parameters (all referenced names are required)

        Returns:
            Rendered prompt text
        """
        return cls._env.from_string(template).render(**params)


__all__ = ["PromptBuilder"]
