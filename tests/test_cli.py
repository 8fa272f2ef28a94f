"""
命令行测试
"""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from nexuswrite.cli import app
from nexuswrite.models import Mode, WritingState
from nexuswrite.store import FileStorage, TaskStore


EXAMPLE_SCENARIOS = Path(__file__).resolve().parent.parent / "examples" / "scenarios.yaml"

runner = CliRunner()


@pytest.fixture
def data_file(tmp_path, monkeypatch):
    path = tmp_path / "storage.json"
    monkeypatch.setenv("NEXUSWRITE_DATA_FILE", str(path))
    monkeypatch.setenv("NEXUSWRITE_CHUNK_INTERVAL", "0")
    monkeypatch.setenv("NEXUSWRITE_CHUNK_SIZE", "50")
    monkeypatch.setenv("COLUMNS", "200")
    return path


@pytest.fixture
def env_file(tmp_path):
    path = tmp_path / ".env"
    path.write_text("", encoding="utf-8")
    return str(path)


def test_outline_command(tmp_path):
    outline_file = tmp_path / "outline.md"
    outline_file.write_text("# 总标题\n## 第一章\n### 1.1 小节\n", encoding="utf-8")

    result = runner.invoke(app, ["outline", str(outline_file)])

    assert result.exit_code == 0
    assert "总标题" in result.output
    assert "1.1 小节" in result.output


def test_outline_command_without_headings(tmp_path):
    outline_file = tmp_path / "plain.md"
    outline_file.write_text("没有标题的文本", encoding="utf-8")

    result = runner.invoke(app, ["outline", str(outline_file)])

    assert result.exit_code == 0
    assert "无法解析大纲内容" in result.output


def test_tasks_list_empty(data_file, env_file):
    result = runner.invoke(app, ["tasks", "list", "--env", env_file])

    assert result.exit_code == 0
    assert "暂无任务" in result.output


def test_write_general_mode_finishes(data_file, env_file):
    result = runner.invoke(app, [
        "write", "写一份周报",
        "--scenarios", str(EXAMPLE_SCENARIOS),
        "--yes",
        "--env", env_file,
    ])

    assert result.exit_code == 0, result.output
    assert "文档生成完成" in result.output

    tasks = TaskStore(FileStorage(data_file)).list()
    assert len(tasks) == 1
    task = tasks[0]
    assert task.mode == Mode.GENERAL
    assert task.writing_state == WritingState.FINISHED
    assert task.document_name == "产品研发部周报"
    assert task.outline.startswith("# 产品研发部周报")
    assert task.content.startswith("# 产品研发部周报")


def test_write_agent_mode_with_output_file(data_file, env_file, tmp_path):
    output = tmp_path / "report.md"
    result = runner.invoke(app, [
        "write", "@周报助手 本周进展",
        "--scenarios", str(EXAMPLE_SCENARIOS),
        "--scenario", "weekly_report",
        "--yes",
        "--output", str(output),
        "--env", env_file,
    ])

    assert result.exit_code == 0, result.output
    task = TaskStore(FileStorage(data_file)).list()[0]
    assert task.mode == Mode.AGENT
    assert task.writing_state == WritingState.FINISHED
    assert output.read_text(encoding="utf-8") == task.content


def test_write_unknown_scenario(data_file, env_file):
    result = runner.invoke(app, [
        "write", "写一份周报",
        "--scenarios", str(EXAMPLE_SCENARIOS),
        "--scenario", "missing",
        "--yes",
        "--env", env_file,
    ])

    assert result.exit_code != 0


def test_tasks_show_and_delete(data_file, env_file):
    store = TaskStore(FileStorage(data_file))
    task = store.create("季度总结", "季度总结", Mode.GENERAL)

    shown = runner.invoke(app, ["tasks", "show", task.id, "--env", env_file])
    assert shown.exit_code == 0
    assert task.id in shown.output

    deleted = runner.invoke(app, ["tasks", "delete", task.id, "--env", env_file])
    assert deleted.exit_code == 0
    assert "已删除任务" in deleted.output
    assert TaskStore(FileStorage(data_file)).list() == []

    again = runner.invoke(app, ["tasks", "delete", task.id, "--env", env_file])
    assert "任务不存在" in again.output


def test_tasks_show_missing(data_file, env_file):
    result = runner.invoke(app, ["tasks", "show", "task_0_missing", "--env", env_file])
    assert result.exit_code == 1
    assert "未找到任务" in result.output
