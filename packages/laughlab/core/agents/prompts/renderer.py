"""Prompt template rendering with Jinja2."""

from __future__ import annotations

import logging
from typing import Any

from jinja2 import Environment, StrictUndefined, TemplateSyntaxError, UndefinedError

logger = logging.getLogger(__name__)


class RenderError(Exception):
    """Raised when template rendering fails."""

    pass


class PromptRenderer:
    """Renders prompt templates using Jinja2.

    Features:
    - Jinja2 strict mode (StrictUndefined)
    - Fail-fast on missing variables
    - Full Jinja2 feature set (conditionals, loops, filters)
    """

    def __init__(self) -> None:
        self.env = Environment(
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=False,
        )

    def render(self, template: str, variables: dict[str, Any]) -> str:
        """Render template with variables.

        Args:
            template: Template string (Jinja2 format)
            variables: Variables for template rendering

        Returns:
            Rendered template string

        Raises:
            RenderError: If rendering fails (missing variables, syntax errors, etc.)
        """
        try:
            return self.env.from_string(template).render(**variables)

        except UndefinedError as e:
            raise RenderError(f"Missing variable in template: {e}") from e

        except TemplateSyntaxError as e:
            raise RenderError(f"Invalid template syntax: {e}") from e
