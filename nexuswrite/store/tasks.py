"""
任务存储服务

管理历史任务（最近任务）的创建、保存、恢复与删除。
所有任务以一个 JSON 数组保存在存储后端的固定键下，每次修改都整体重写该数组。

读-改-写之间没有加锁：单线程宿主下是安全的；多进程共用同一存储时，
需要在写入前重新读取或引入版本号，否则可能丢失更新。
"""

from __future__ import annotations

import json
import secrets
import string
import time
from typing import Any, Callable, Mapping

from pydantic import ValidationError
from rich.console import Console

from ..models import Message, Mode, Task, WritingState, UPDATABLE_FIELDS
from .backends import StorageBackend


STORAGE_KEY = "nexus_writing_tasks"
MAX_TASKS = 50  # 最多保存 50 个任务

_ID_ALPHABET = string.digits + string.ascii_lowercase


def now_ms() -> int:
    """当前毫秒时间戳"""
    return int(time.time() * 1000)


def generate_task_id(timestamp: int) -> str:
    """生成任务 ID：task_<毫秒时间戳>_<9 位随机 base36>"""
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
    return f"task_{timestamp}_{suffix}"


class TaskStore:
    """
    任务仓库

    对调用方从不抛出异常：存储损坏或缺失时退化为空结果 / 空操作，
    并在控制台输出诊断信息。
    """

    def __init__(
        self,
        storage: StorageBackend,
        *,
        key: str = STORAGE_KEY,
        max_tasks: int = MAX_TASKS,
        console: Console | None = None,
        clock: Callable[[], int] | None = None,
    ):
        self.storage = storage
        self.key = key
        self.max_tasks = max_tasks
        self.console = console or Console(stderr=True)
        self._clock = clock or now_ms

    # ------------------------------------------------------------------
    # 读取
    # ------------------------------------------------------------------

    def list(self) -> list[Task]:
        """获取所有任务，按更新时间倒序"""
        tasks = self._load()
        return sorted(tasks, key=lambda t: t.updated_at, reverse=True)

    def get(self, task_id: str) -> Task | None:
        """获取指定任务，不存在时返回 None"""
        for task in self._load():
            if task.id == task_id:
                return task
        return None

    # ------------------------------------------------------------------
    # 写入
    # ------------------------------------------------------------------

    def create(
        self,
        name: str,
        input: str,
        mode: Mode,
        scenario_id: str | None = None,
    ) -> Task:
        """
        创建新任务并保存

        容量在插入之后检查：超过上限时按更新时间淘汰最旧的任务，插入本身不会失败。
        """
        tasks = self._load()
        now = self._clock()
        existing_ids = {t.id for t in tasks}
        task_id = generate_task_id(now)
        while task_id in existing_ids:
            task_id = generate_task_id(now)

        task = Task(
            id=task_id,
            name=name,
            created_at=now,
            updated_at=now,
            mode=mode,
            writing_state=WritingState.THINKING,
            input=input,
            scenario_id=scenario_id,
            messages=[Message(role="user", content=input)],
        )

        if len(tasks) + 1 > self.max_tasks:
            # 只从已有任务中淘汰，新任务总是保留
            tasks.sort(key=lambda t: t.updated_at, reverse=True)
            keep = max(self.max_tasks - 1, 0)
            evicted = tasks[keep:]
            del tasks[keep:]
            self.console.print(
                f"[dim]任务数超过上限 {self.max_tasks}，已淘汰 {len(evicted)} 个最旧任务[/dim]"
            )

        tasks.append(task)
        self._save(tasks)
        return task

    def update(
        self,
        task_id: str,
        updates: Mapping[str, Any] | None = None,
        **fields: Any,
    ) -> Task | None:
        """
        浅合并字段并刷新更新时间

        字段名可以是属性名（writing_state）或存储别名（writingState）。
        任务不存在时不做任何事。

        Returns:
            更新后的任务；任务不存在或更新失败时返回 None
        """
        changes: dict[str, Any] = {**(updates or {}), **fields}
        tasks = self._load()
        index = next((i for i, t in enumerate(tasks) if t.id == task_id), None)
        if index is None:
            return None

        current = tasks[index]
        data = current.to_storage()
        aliases = set(UPDATABLE_FIELDS.values())
        for name, value in changes.items():
            alias = UPDATABLE_FIELDS.get(name, name if name in aliases else None)
            if alias is None:
                self.console.print(f"[yellow]警告: 忽略未知或只读字段 {name!r}[/yellow]")
                continue
            data[alias] = _to_jsonable(value)

        # 同一毫秒内的连续更新也要保证 updatedAt 严格递增
        data["updatedAt"] = max(self._clock(), current.updated_at + 1)

        try:
            updated = Task.model_validate(data)
        except ValidationError as e:
            self.console.print(f"[red]✗ 更新任务失败 {task_id}: {e}[/red]")
            return None

        tasks[index] = updated
        self._save(tasks)
        return updated

    def delete(self, task_id: str) -> bool:
        """删除任务，不存在时为空操作"""
        tasks = self._load()
        remaining = [t for t in tasks if t.id != task_id]
        self._save(remaining)
        return len(remaining) != len(tasks)

    def clear(self) -> None:
        """清空所有任务"""
        self._save([])

    # ------------------------------------------------------------------
    # 持久化
    # ------------------------------------------------------------------

    def _load(self) -> list[Task]:
        try:
            stored = self.storage.get_item(self.key)
        except Exception as e:
            self.console.print(f"[red]✗ 读取任务失败: {e}[/red]")
            return []
        if not stored:
            return []

        try:
            raw = json.loads(stored)
        except json.JSONDecodeError as e:
            self.console.print(f"[red]✗ 任务数据已损坏，无法解析: {e}[/red]")
            return []
        if not isinstance(raw, list):
            self.console.print("[red]✗ 任务数据格式错误：应为 JSON 数组[/red]")
            return []

        tasks: list[Task] = []
        for item in raw:
            try:
                tasks.append(Task.model_validate(item))
            except ValidationError:
                self.console.print("[yellow]警告: 跳过一条无效的任务记录[/yellow]")
        return tasks

    def _save(self, tasks: list[Task]) -> None:
        try:
            payload = json.dumps([t.to_storage() for t in tasks], ensure_ascii=False)
            self.storage.set_item(self.key, payload)
        except Exception as e:
            self.console.print(f"[red]✗ 保存任务失败: {e}[/red]")

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}: {self.key} ({self.storage!r})>"


def _to_jsonable(value: Any) -> Any:
    """将 pydantic 模型 / 枚举转换为可直接校验的 JSON 值"""
    if hasattr(value, "model_dump"):
        return value.model_dump(mode="json", by_alias=True)
    if isinstance(value, list):
        return [_to_jsonable(v) for v in value]
    if isinstance(value, (Mode, WritingState)):
        return value.value
    return value
