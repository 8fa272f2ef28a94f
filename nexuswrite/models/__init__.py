"""
数据模型模块
"""

from .writing import Mode, WritingState, WritingContext, DEFAULT_DOCUMENT_NAME
from .task import Message, Task, UPDATABLE_FIELDS
from .outline import (
    OutlineNode,
    walk_nodes,
    rename_node,
    remove_node,
    flatten_titles,
    outline_to_markdown,
)
from .scenario import ConfigField, AgentConfig, GeneralData, Scenario
from .options import LLMOptions, GenerationSettings

__all__ = [
    "Mode",
    "WritingState",
    "WritingContext",
    "DEFAULT_DOCUMENT_NAME",
    "Message",
    "Task",
    "UPDATABLE_FIELDS",
    "OutlineNode",
    "walk_nodes",
    "rename_node",
    "remove_node",
    "flatten_titles",
    "outline_to_markdown",
    "ConfigField",
    "AgentConfig",
    "GeneralData",
    "Scenario",
    "LLMOptions",
    "GenerationSettings",
]
