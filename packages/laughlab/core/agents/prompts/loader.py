"""Prompt pack loading.

A prompt pack is a directory holding ``system.j2`` and, optionally,
``user.j2``. Packs for the Evidence-Lock stages ship inside the package.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from laughlab.core.agents.prompts.renderer import PromptRenderer

logger = logging.getLogger(__name__)

SYSTEM_TEMPLATE = "system.j2"
USER_TEMPLATE = "user.j2"


class LoadError(Exception):
    """Raised when a prompt pack is missing or incomplete."""

    pass


@dataclass(frozen=True)
class PromptPack:
    """System and optional user template text for one agent."""

    name: str
    system: str
    user: str | None = None

    def to_messages(self) -> list[dict[str, str]]:
        messages = [{"role": "system", "content": self.system}]
        if self.user is not None:
            messages.append({"role": "user", "content": self.user})
        return messages


class PromptPackLoader:
    """Reads prompt packs from a base directory and renders them."""

    def __init__(self, base_path: str | Path, renderer: PromptRenderer | None = None):
        self.base_path = Path(base_path)
        self.renderer = renderer or PromptRenderer()

    def load(self, pack_name: str) -> PromptPack:
        """Read a pack's templates without rendering them.

        Raises:
            LoadError: If the pack directory or its system template is missing
        """
        pack_dir = self.base_path / pack_name
        if not pack_dir.is_dir():
            raise LoadError(f"Prompt pack '{pack_name}' does not exist at {pack_dir}")

        system_path = pack_dir / SYSTEM_TEMPLATE
        if not system_path.is_file():
            raise LoadError(f"Prompt pack '{pack_name}' missing required {SYSTEM_TEMPLATE}")

        user_path = pack_dir / USER_TEMPLATE
        pack = PromptPack(
            name=pack_name,
            system=system_path.read_text(encoding="utf-8"),
            user=user_path.read_text(encoding="utf-8") if user_path.is_file() else None,
        )
        logger.debug(f"Loaded prompt pack '{pack_name}' (user template: {pack.user is not None})")
        return pack

    def load_and_render(self, pack_name: str, variables: dict[str, Any]) -> PromptPack:
        """Load a pack and render every template with the same variables.

        Raises:
            LoadError: If loading fails
            RenderError: If a template references an undefined variable or is malformed
        """
        pack = self.load(pack_name)
        return replace(
            pack,
            system=self.renderer.render(pack.system, variables),
            user=self.renderer.render(pack.user, variables) if pack.user is not None else None,
        )
