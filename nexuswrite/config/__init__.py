"""
配置模块
"""

from .settings import (
    LLMConfig,
    AppConfig,
    load_config,
    create_writing_provider,
    create_rewrite_provider,
    create_task_store,
    load_scenarios,
    save_scenarios,
    find_scenario,
)

__all__ = [
    "LLMConfig",
    "AppConfig",
    "load_config",
    "create_writing_provider",
    "create_rewrite_provider",
    "create_task_store",
    "load_scenarios",
    "save_scenarios",
    "find_scenario",
]
