"""
写作流程模块：状态流、流式生成与写作会话
"""

from .flow import (
    GENERAL_FLOW,
    AGENT_FLOW,
    get_flow,
    is_valid_transition,
    get_next_state,
)
from .generation import (
    GenerationEvent,
    GenerationEventKind,
    GenerationTask,
    chunk_text,
    llm_text_stream,
)
from .session import MENTION_MARKER, WritingSession, detect_mode

__all__ = [
    "GENERAL_FLOW",
    "AGENT_FLOW",
    "get_flow",
    "is_valid_transition",
    "get_next_state",
    "GenerationEvent",
    "GenerationEventKind",
    "GenerationTask",
    "chunk_text",
    "llm_text_stream",
    "MENTION_MARKER",
    "WritingSession",
    "detect_mode",
]
