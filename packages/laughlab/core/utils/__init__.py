"""Shared utilities for laughlab."""

from laughlab.core.utils.logging import StructuredJSONFormatter, configure_logging

__all__ = ["StructuredJSONFormatter", "configure_logging"]
