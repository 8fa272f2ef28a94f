"""
任务数据模型：一次写作会话的持久化记录
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from .writing import DEFAULT_DOCUMENT_NAME, Mode, WritingState


class Message(BaseModel):
    """对话消息"""
    role: Literal["user", "ai"] = Field(..., description="消息角色")
    content: str = Field(..., description="消息内容")


class Task(BaseModel):
    """
    任务记录

    存储时使用 camelCase 字段名（createdAt、updatedAt 等），
    时间戳为毫秒级 Unix 时间。
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="任务 ID")
    name: str = Field(..., description="任务名称（用户输入的 query）")
    created_at: int = Field(..., alias="createdAt", description="创建时间（毫秒）")
    updated_at: int = Field(..., alias="updatedAt", description="更新时间（毫秒）")
    mode: Mode = Field(..., description="写作模式")
    writing_state: WritingState = Field(
        default=WritingState.THINKING, alias="writingState", description="当前状态"
    )
    input: str = Field(default="", description="用户输入")
    scenario_id: str | None = Field(default=None, alias="scenarioId", description="智能体/场景 ID")
    content: str = Field(default="", description="文档内容")
    document_name: str = Field(
        default=DEFAULT_DOCUMENT_NAME, alias="documentName", description="文档名称"
    )
    outline: str = Field(default="", description="大纲内容")
    memory_config: dict[str, Any] = Field(default_factory=dict, alias="memoryConfig", description="记忆配置")
    params_config: dict[str, Any] = Field(default_factory=dict, alias="paramsConfig", description="参数配置")
    messages: list[Message] = Field(default_factory=list, description="对话消息历史")

    def to_storage(self) -> dict[str, Any]:
        """转换为存储用的 JSON 字典（camelCase）"""
        return self.model_dump(mode="json", by_alias=True)


# 可通过 update 修改的字段（python 属性名 -> 存储别名）
UPDATABLE_FIELDS: dict[str, str] = {
    name: (field.alias or name)
    for name, field in Task.model_fields.items()
    if name not in ("id", "created_at", "updated_at")
}
