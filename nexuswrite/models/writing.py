"""
写作工作台核心状态定义：模式、状态与写作上下文
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class Mode(str, Enum):
    """写作模式"""
    GENERAL = "GENERAL"  # 通用模式：需要经过大纲确认步骤
    AGENT = "AGENT"      # 智能体模式：跳过大纲，直接生成


class WritingState(str, Enum):
    """写作状态"""
    INPUT = "INPUT"                      # 输入阶段
    THINKING = "THINKING"                # 思考阶段：AI 正在分析
    OUTLINE_CONFIRM = "OUTLINE_CONFIRM"  # 大纲确认阶段
    GENERATING = "GENERATING"            # 生成阶段
    FINISHED = "FINISHED"                # 完成阶段


DEFAULT_DOCUMENT_NAME = "新文档_1"


class WritingContext(BaseModel):
    """写作会话上下文（仅属于一个会话，不跨会话共享）"""
    mode: Mode = Field(default=Mode.GENERAL, description="当前模式")
    current_state: WritingState = Field(default=WritingState.INPUT, description="当前状态")
    input: str = Field(default="", description="用户输入内容")
    agent_id: str | None = Field(default=None, description="选中的智能体 ID（AGENT 模式）")
    memory_config: dict[str, Any] = Field(default_factory=dict, description="记忆配置（AGENT 模式）")
    params_config: dict[str, Any] = Field(default_factory=dict, description="参数配置（AGENT 模式）")
    outline: str | None = Field(default=None, description="大纲文本（GENERAL 模式）")
    content: str | None = Field(default=None, description="生成的内容")
    task_id: str | None = Field(default=None, description="任务 ID")
    document_name: str = Field(default=DEFAULT_DOCUMENT_NAME, description="文档名称")
