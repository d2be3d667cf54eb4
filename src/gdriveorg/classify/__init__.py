"""Classification exports for gdriveorg."""

from __future__ import annotations

from .gateway import ClassificationGateway, parse_results
from .prompt import SYSTEM_INSTRUCTION, build_user_prompt

__all__ = [
    "ClassificationGateway",
    "parse_results",
    "SYSTEM_INSTRUCTION",
    "build_user_prompt",
]
