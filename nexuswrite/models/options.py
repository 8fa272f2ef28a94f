"""
生成相关的选项模型
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class LLMOptions(BaseModel):
    """LLM 调用选项"""
    max_tokens: int = Field(default=4096, description="最大 Token 数")
    temperature: float = Field(default=0.7, description="温度参数")
    top_p: float = Field(default=0.9, description="Top-P 采样")
    timeout: float = Field(default=120.0, description="超时时间（秒）")


class GenerationSettings(BaseModel):
    """流式生成设置"""
    chunk_size: int = Field(default=10, ge=1, description="每次追加的字符数")
    interval: float = Field(default=0.05, ge=0, description="追加间隔（秒）")
