"""Prompt construction for the README pipeline."""

from .builder import PromptBuilder
from .constants import ATTRIBUTION_LINE, README_SECTIONS

__all__ = ["ATTRIBUTION_LINE", "PromptBuilder", "README_SECTIONS"]
