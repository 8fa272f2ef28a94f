"""
Prompt 模板模块
"""

from .templates import (
    REWRITE_SYSTEM_PROMPT,
    REWRITE_PROMPT,
    REWRITE_INSTRUCTIONS,
    GENERATION_SYSTEM_PROMPT,
    GENERATION_PROMPT,
    build_rewrite_prompt,
    build_generation_prompt,
)

__all__ = [
    "REWRITE_SYSTEM_PROMPT",
    "REWRITE_PROMPT",
    "REWRITE_INSTRUCTIONS",
    "GENERATION_SYSTEM_PROMPT",
    "GENERATION_PROMPT",
    "build_rewrite_prompt",
    "build_generation_prompt",
]
