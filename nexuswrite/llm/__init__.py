"""
LLM 模块
"""

from .base import (
    LLMProvider,
    LLMPurpose,
    LLMResponse,
    extract_message_content,
)
from .providers import (
    DeepSeekProvider,
    OpenAICompatibleProvider,
    QwenProvider,
    create_provider,
    parse_sse_line,
)

__all__ = [
    "LLMProvider",
    "LLMPurpose",
    "LLMResponse",
    "extract_message_content",
    "OpenAICompatibleProvider",
    "QwenProvider",
    "DeepSeekProvider",
    "create_provider",
    "parse_sse_line",
]
