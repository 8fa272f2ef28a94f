"""
记忆变量与参数配置的值存储

按场景 ID 分别保存用户填写过的值，再次打开配置时优先使用已保存的值。
"""

from __future__ import annotations

from typing import Any

from ..models import ConfigField


class ScenarioValueStore:
    """按场景保存记忆变量值和参数配置值"""

    def __init__(self) -> None:
        self._memory: dict[str, dict[str, Any]] = {}
        self._params: dict[str, dict[str, Any]] = {}

    # 记忆变量

    def get_memory_values(self, scenario_id: str) -> dict[str, Any]:
        return dict(self._memory.get(scenario_id, {}))

    def set_memory_values(self, scenario_id: str, values: dict[str, Any]) -> None:
        """合并写入记忆变量值"""
        self._memory[scenario_id] = {**self._memory.get(scenario_id, {}), **values}

    def update_memory_value(self, scenario_id: str, key: str, value: Any) -> None:
        self._memory.setdefault(scenario_id, {})[key] = value

    def reset_memory_values(self, scenario_id: str) -> None:
        self._memory[scenario_id] = {}

    # 参数配置

    def get_param_values(self, scenario_id: str) -> dict[str, Any]:
        return dict(self._params.get(scenario_id, {}))

    def set_param_values(self, scenario_id: str, values: dict[str, Any]) -> None:
        """合并写入参数配置值"""
        self._params[scenario_id] = {**self._params.get(scenario_id, {}), **values}

    def update_param_value(self, scenario_id: str, key: str, value: Any) -> None:
        self._params.setdefault(scenario_id, {})[key] = value

    def reset_param_values(self, scenario_id: str) -> None:
        self._params[scenario_id] = {}


def initial_values(fields: list[ConfigField], saved: dict[str, Any] | None = None) -> dict[str, Any]:
    """表单初始值：已保存的值 > 默认值 > 空字符串"""
    saved = saved or {}
    values: dict[str, Any] = {}
    for field in fields:
        value = saved.get(field.key)
        if value is None:
            value = field.default_value if field.default_value is not None else ""
        values[field.key] = value
    return values


def missing_required(fields: list[ConfigField], values: dict[str, Any]) -> list[str]:
    """返回未填写的字段名称（参数配置项均为必填）"""
    missing = []
    for field in fields:
        value = values.get(field.key)
        if not value or (isinstance(value, str) and not value.strip()):
            missing.append(field.label)
    return missing
