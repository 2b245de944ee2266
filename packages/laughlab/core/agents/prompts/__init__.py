"""Prompt pack loading and rendering."""

from laughlab.core.agents.prompts.loader import LoadError, PromptPack, PromptPackLoader
from laughlab.core.agents.prompts.renderer import PromptRenderer, RenderError

__all__ = ["LoadError", "PromptPack", "PromptPackLoader", "PromptRenderer", "RenderError"]
