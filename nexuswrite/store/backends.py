"""
键值存储后端

TaskStore 只依赖 get_item / set_item / remove_item 三个操作，
对应浏览器 localStorage 的语义：键和值都是字符串。
"""

from __future__ import annotations

import json
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path


class StorageError(Exception):
    """存储后端读写失败"""


class StorageBackend(ABC):
    """键值存储抽象基类"""

    @abstractmethod
    def get_item(self, key: str) -> str | None:
        """读取键对应的值，不存在时返回 None"""
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """写入键值（整体覆盖）"""
        pass

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """删除键，不存在时忽略"""
        pass

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}>"


class MemoryStorage(StorageBackend):
    """进程内存储，用于测试和临时会话"""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)


class FileStorage(StorageBackend):
    """
    基于单个 JSON 文件的持久化存储

    文件内容是 {key: value} 的 JSON 对象。每次写入先写临时文件再 os.replace，
    保证文件要么是旧内容要么是新内容，不会出现写了一半的记录。
    """

    def __init__(self, path: str | Path):
        self.path = Path(path).expanduser()

    def _read_all(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"无法读取存储文件 {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageError(f"存储文件格式错误: {self.path}")
        return data

    def _write_all(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as e:
            Path(tmp_path).unlink(missing_ok=True)
            raise StorageError(f"无法写入存储文件 {self.path}: {e}") from e

    def get_item(self, key: str) -> str | None:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def remove_item(self, key: str) -> None:
        data = self._read_all()
        if key in data:
            del data[key]
            self._write_all(data)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}: {self.path}>"
