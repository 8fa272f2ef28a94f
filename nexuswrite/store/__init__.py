"""
存储模块
"""

from .backends import StorageBackend, StorageError, MemoryStorage, FileStorage
from .tasks import TaskStore, STORAGE_KEY, MAX_TASKS, generate_task_id, now_ms
from .values import ScenarioValueStore, initial_values, missing_required

__all__ = [
    "StorageBackend",
    "StorageError",
    "MemoryStorage",
    "FileStorage",
    "TaskStore",
    "STORAGE_KEY",
    "MAX_TASKS",
    "generate_task_id",
    "now_ms",
    "ScenarioValueStore",
    "initial_values",
    "missing_required",
]
