"""
任务存储测试
"""

import json
import re

import pytest

from nexuswrite.models import Mode, WritingState
from nexuswrite.store import (
    FileStorage,
    MemoryStorage,
    STORAGE_KEY,
    StorageBackend,
    TaskStore,
    generate_task_id,
)


def test_create_sets_defaults(store):
    task = store.create("写一份周报", "写一份周报", Mode.GENERAL, "weekly_report")
    stored = store.get(task.id)

    assert stored is not None
    assert re.fullmatch(r"task_\d+_[0-9a-z]{9}", stored.id)
    assert stored.created_at == stored.updated_at
    assert stored.writing_state == WritingState.THINKING
    assert stored.scenario_id == "weekly_report"
    assert stored.content == "" and stored.outline == ""
    assert stored.memory_config == {} and stored.params_config == {}
    assert stored.document_name == "新文档_1"
    assert [(m.role, m.content) for m in stored.messages] == [("user", "写一份周报")]


def test_get_missing_returns_none(store):
    assert store.get("task_missing") is None


def test_update_merges_and_strictly_increases_updated_at(store):
    task = store.create("a", "a", Mode.GENERAL)

    # 时钟不前进时 updatedAt 也必须严格递增
    updated = store.update(task.id, {"content": "x"})
    stored = store.get(task.id)

    assert updated is not None
    assert stored.content == "x"
    assert stored.updated_at > task.updated_at
    assert stored.created_at == task.created_at
    assert stored.input == "a"


def test_update_accepts_attribute_names_and_aliases(store, clock):
    task = store.create("a", "a", Mode.AGENT)
    clock.advance(5)

    store.update(task.id, writing_state=WritingState.GENERATING)
    store.update(task.id, {"documentName": "周报", "paramsConfig": {"tone": "正式"}})
    stored = store.get(task.id)

    assert stored.writing_state == WritingState.GENERATING
    assert stored.document_name == "周报"
    assert stored.params_config == {"tone": "正式"}
    assert stored.updated_at == clock.now + 1


def test_update_ignores_read_only_and_unknown_fields(store, console):
    task = store.create("a", "a", Mode.GENERAL)

    store.update(task.id, id="task_other", created_at=1, unknown="?")
    stored = store.get(task.id)

    assert stored.id == task.id
    assert stored.created_at == task.created_at
    assert "unknown" in console.export_text()


def test_update_missing_task_is_noop(store, storage):
    store.create("a", "a", Mode.GENERAL)
    before = storage.get_item(STORAGE_KEY)

    assert store.update("task_missing", content="x") is None
    assert storage.get_item(STORAGE_KEY) == before


def test_delete(store):
    first = store.create("a", "a", Mode.GENERAL)
    second = store.create("b", "b", Mode.GENERAL)

    assert store.delete(first.id)
    assert not store.delete(first.id)
    assert [t.id for t in store.list()] == [second.id]


def test_list_sorted_by_updated_at_desc(store, clock):
    first = store.create("a", "a", Mode.GENERAL)
    clock.advance()
    second = store.create("b", "b", Mode.GENERAL)
    clock.advance()
    third = store.create("c", "c", Mode.GENERAL)
    clock.advance()
    store.update(first.id, content="touched")

    assert [t.id for t in store.list()] == [first.id, third.id, second.id]


def test_capacity_evicts_oldest_after_insert(store, clock):
    tasks = []
    for i in range(50):
        tasks.append(store.create(f"t{i}", f"t{i}", Mode.GENERAL))
        clock.advance()

    # 最早创建的任务被更新过，此时最旧的是第二个
    store.update(tasks[0].id, content="keep me")
    clock.advance()
    newest = store.create("t50", "t50", Mode.GENERAL)

    remaining = {t.id for t in store.list()}
    assert len(remaining) == 50
    assert tasks[1].id not in remaining
    assert tasks[0].id in remaining
    assert newest.id in remaining


def test_capacity_keeps_new_task_when_timestamps_tie(store):
    for i in range(50):
        store.create(f"t{i}", f"t{i}", Mode.GENERAL)

    newest = store.create("t50", "t50", Mode.GENERAL)

    assert len(store.list()) == 50
    assert store.get(newest.id) is not None
    assert store.update(newest.id, content="正文") is not None


def test_capacity_is_configurable(storage, console, clock):
    small = TaskStore(storage, max_tasks=2, console=console, clock=clock)
    a = small.create("a", "a", Mode.GENERAL)
    clock.advance()
    small.create("b", "b", Mode.GENERAL)
    clock.advance()
    small.create("c", "c", Mode.GENERAL)

    assert len(small.list()) == 2
    assert small.get(a.id) is None


def test_persisted_as_single_json_array(store, storage):
    task = store.create("a", "a", Mode.AGENT, "s1")

    raw = json.loads(storage.get_item(STORAGE_KEY))

    assert isinstance(raw, list) and len(raw) == 1
    record = raw[0]
    assert record["id"] == task.id
    assert record["createdAt"] == record["updatedAt"]
    assert record["mode"] == "AGENT"
    assert record["writingState"] == "THINKING"
    assert record["scenarioId"] == "s1"
    assert record["messages"] == [{"role": "user", "content": "a"}]


def test_corrupt_storage_degrades_to_empty(store, storage, console):
    storage.set_item(STORAGE_KEY, "{not json")

    assert store.list() == []
    assert store.get("anything") is None
    assert store.update("anything", content="x") is None
    assert "损坏" in console.export_text()

    # 损坏的数据不会阻止新任务写入
    task = store.create("a", "a", Mode.GENERAL)
    assert store.get(task.id) is not None


def test_non_array_storage_degrades_to_empty(store, storage):
    storage.set_item(STORAGE_KEY, json.dumps({"id": "x"}))
    assert store.list() == []


def test_invalid_records_are_skipped(store, storage, console):
    task = store.create("a", "a", Mode.GENERAL)
    raw = json.loads(storage.get_item(STORAGE_KEY))
    raw.append({"foo": "bar"})
    storage.set_item(STORAGE_KEY, json.dumps(raw))

    assert [t.id for t in store.list()] == [task.id]
    assert "跳过" in console.export_text()


class BrokenStorage(StorageBackend):
    def get_item(self, key):
        raise OSError("disk unavailable")

    def set_item(self, key, value):
        raise OSError("disk unavailable")

    def remove_item(self, key):
        raise OSError("disk unavailable")


def test_storage_failures_never_raise(console):
    store = TaskStore(BrokenStorage(), console=console)

    task = store.create("a", "a", Mode.GENERAL)
    assert task.name == "a"
    assert store.list() == []
    assert store.get(task.id) is None
    assert not store.delete(task.id)
    output = console.export_text()
    assert "读取任务失败" in output
    assert "保存任务失败" in output


def test_serialization_failures_never_raise(store, monkeypatch):
    def broken_dumps(*args, **kwargs):
        raise TypeError("not serializable")

    monkeypatch.setattr("nexuswrite.store.tasks.json.dumps", broken_dumps)

    task = store.create("a", "a", Mode.GENERAL)

    assert task.name == "a"
    assert store.list() == []
    assert "保存任务失败" in store.console.export_text()


def test_clear(store):
    store.create("a", "a", Mode.GENERAL)
    store.clear()
    assert store.list() == []


def test_file_storage_shared_between_store_instances(tmp_path, console):
    path = tmp_path / "storage.json"
    writer = TaskStore(FileStorage(path), console=console)
    task = writer.create("持久化", "持久化", Mode.GENERAL)
    writer.update(task.id, content="正文")

    reader = TaskStore(FileStorage(path), console=console)
    stored = reader.get(task.id)

    assert stored is not None
    assert stored.content == "正文"


def test_generated_ids_differ():
    ids = {generate_task_id(1_700_000_000_000) for _ in range(100)}
    assert len(ids) == 100


def test_memory_storage_isolated_per_instance():
    a, b = MemoryStorage(), MemoryStorage()
    TaskStore(a).create("a", "a", Mode.GENERAL)
    assert b.get_item(STORAGE_KEY) is None


@pytest.mark.parametrize("mode", [Mode.GENERAL, Mode.AGENT])
def test_create_keeps_mode(store, mode):
    assert store.get(store.create("a", "a", mode).id).mode == mode
