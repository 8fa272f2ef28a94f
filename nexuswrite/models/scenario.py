"""
场景数据模型：智能体配置与参考内容
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field


class ConfigField(BaseModel):
    """记忆变量 / 参数配置项"""
    key: str = Field(..., description="字段键名")
    label: str = Field(..., description="显示名称")
    type: Literal["text", "textarea", "select", "file"] = Field(default="text", description="字段类型")
    default_value: Any = Field(default=None, description="默认值")
    options: list[str] | None = Field(default=None, description="可选值（select 类型）")


class AgentConfig(BaseModel):
    """智能体配置"""
    id: str = Field(..., description="智能体 ID")
    name: str = Field(..., description="智能体名称")
    description: str = Field(default="", description="智能体描述")
    memory_configs: list[ConfigField] = Field(default_factory=list, description="记忆变量配置")
    param_configs: list[ConfigField] = Field(default_factory=list, description="参数配置")


class GeneralData(BaseModel):
    """通用模式参考内容"""
    outline: str = Field(default="", description="大纲（Markdown 标题）")
    full_text: str = Field(default="", description="完整正文")


class Scenario(BaseModel):
    """写作场景"""
    id: str = Field(..., description="场景 ID")
    name: str = Field(..., description="场景名称")
    category: str = Field(default="WRITING", description="场景分类")
    agent_config: AgentConfig = Field(..., description="智能体配置")
    general_data: GeneralData = Field(default_factory=GeneralData, description="参考内容")
