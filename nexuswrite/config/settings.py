"""
配置管理模块
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field
from rich.console import Console

from ..llm import LLMPurpose, LLMProvider, create_provider
from ..models import GenerationSettings, LLMOptions, Scenario
from ..store import FileStorage, TaskStore


DEFAULT_BASE_URL = "https://dashscope.aliyuncs.com/compatible-mode/v1"
DEFAULT_MODEL = "qwen-plus"
DEFAULT_DATA_FILE = "~/.nexuswrite/storage.json"


class LLMConfig(BaseModel):
    """LLM 配置"""
    api_key: str
    base_url: str
    model: str
    provider_type: str = "openai_compatible"


class AppConfig(BaseModel):
    """应用配置"""
    llm: LLMConfig = Field(..., description="写作/改写模型配置")
    data_file: Path = Field(default=Path(DEFAULT_DATA_FILE), description="任务存储文件")
    max_tasks: int = Field(default=50, ge=1, description="最多保存的任务数")
    generation: GenerationSettings = Field(default_factory=GenerationSettings, description="流式生成设置")
    max_tokens: int = Field(default=4096, description="最大 Token 数")
    rewrite_temperature: float = Field(default=0.7, description="改写温度参数")

    def llm_options(self) -> LLMOptions:
        return LLMOptions(max_tokens=self.max_tokens, temperature=self.rewrite_temperature)


def load_config(env_file: str | Path | None = None) -> AppConfig:
    """
    从环境变量加载配置

    Args:
        env_file: .env 文件路径，默认为当前目录的 .env

    Returns:
        AppConfig 实例
    """
    if env_file:
        load_dotenv(env_file)
    else:
        load_dotenv()

    llm = LLMConfig(
        api_key=os.getenv("QWEN_API_KEY", ""),
        base_url=os.getenv("QWEN_BASE_URL", DEFAULT_BASE_URL),
        model=os.getenv("QWEN_MODEL", DEFAULT_MODEL),
        provider_type="qwen",
    )

    return AppConfig(
        llm=llm,
        data_file=Path(os.getenv("NEXUSWRITE_DATA_FILE", DEFAULT_DATA_FILE)).expanduser(),
        max_tasks=int(os.getenv("NEXUSWRITE_MAX_TASKS", "50")),
        generation=GenerationSettings(
            chunk_size=int(os.getenv("NEXUSWRITE_CHUNK_SIZE", "10")),
            interval=float(os.getenv("NEXUSWRITE_CHUNK_INTERVAL", "0.05")),
        ),
        max_tokens=int(os.getenv("NEXUSWRITE_LLM_MAX_TOKENS", "4096")),
        rewrite_temperature=float(os.getenv("NEXUSWRITE_REWRITE_TEMPERATURE", "0.7")),
    )


def create_writing_provider(config: AppConfig) -> LLMProvider:
    """创建写作模型 Provider"""
    return create_provider(
        provider_type=config.llm.provider_type,
        api_key=config.llm.api_key,
        base_url=config.llm.base_url,
        model=config.llm.model,
        purpose=LLMPurpose.WRITING,
    )


def create_rewrite_provider(config: AppConfig) -> LLMProvider:
    """创建改写模型 Provider"""
    return create_provider(
        provider_type=config.llm.provider_type,
        api_key=config.llm.api_key,
        base_url=config.llm.base_url,
        model=config.llm.model,
        purpose=LLMPurpose.REWRITE,
    )


def create_task_store(config: AppConfig, console: Console | None = None) -> TaskStore:
    """根据配置创建基于文件的任务存储"""
    return TaskStore(
        FileStorage(config.data_file),
        max_tasks=config.max_tasks,
        console=console,
    )


def load_scenarios(file_path: str | Path) -> list[Scenario]:
    """
    从 YAML 文件加载场景列表

    Args:
        file_path: YAML 文件路径，顶层为 scenarios 列表

    Returns:
        Scenario 列表
    """
    with open(file_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    scenarios_data: list[dict[str, Any]] = data.get("scenarios", []) if isinstance(data, dict) else []
    return [Scenario.model_validate(s) for s in scenarios_data]


def save_scenarios(scenarios: list[Scenario], file_path: str | Path) -> None:
    """
    将场景列表保存到 YAML 文件

    Args:
        scenarios: Scenario 列表
        file_path: 输出文件路径
    """
    data = {
        "scenarios": [s.model_dump(mode="json", exclude_none=True) for s in scenarios],
    }
    with open(file_path, "w", encoding="utf-8") as f:
        yaml.dump(data, f, allow_unicode=True, default_flow_style=False, sort_keys=False)


def find_scenario(scenarios: list[Scenario], scenario_id: str | None) -> Scenario | None:
    """按 ID 查找场景"""
    if scenario_id is None:
        return None
    for scenario in scenarios:
        if scenario.id == scenario_id:
            return scenario
    return None
