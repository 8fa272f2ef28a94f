"""
场景配置值与 Prompt 构建测试
"""

from nexuswrite.models import ConfigField
from nexuswrite.prompts import build_generation_prompt, build_rewrite_prompt
from nexuswrite.store import ScenarioValueStore, initial_values, missing_required


FIELDS = [
    ConfigField(key="tone", label="语气", type="select", default_value="正式", options=["正式", "轻松"]),
    ConfigField(key="highlights", label="本周重点", type="textarea"),
]


def test_values_are_kept_per_scenario():
    values = ScenarioValueStore()
    values.set_param_values("a", {"tone": "轻松"})
    values.set_param_values("a", {"highlights": "上线"})
    values.update_memory_value("b", "team", "设计部")

    assert values.get_param_values("a") == {"tone": "轻松", "highlights": "上线"}
    assert values.get_param_values("b") == {}
    assert values.get_memory_values("b") == {"team": "设计部"}

    values.reset_param_values("a")
    assert values.get_param_values("a") == {}


def test_get_returns_copy():
    values = ScenarioValueStore()
    values.set_memory_values("a", {"team": "产品部"})
    values.get_memory_values("a")["team"] = "改动"
    assert values.get_memory_values("a") == {"team": "产品部"}


def test_initial_values_prefers_saved_then_default():
    assert initial_values(FIELDS) == {"tone": "正式", "highlights": ""}
    assert initial_values(FIELDS, {"highlights": "发布 2.0"}) == {"tone": "正式", "highlights": "发布 2.0"}


def test_missing_required_reports_blank_labels():
    assert missing_required(FIELDS, {"tone": "正式", "highlights": "  "}) == ["本周重点"]
    assert missing_required(FIELDS, {"tone": "正式", "highlights": "上线"}) == []


def test_build_generation_prompt_includes_outline_and_config():
    prompt = build_generation_prompt(
        "写周报",
        outline="# 周报\n## 本周工作",
        memory_config={"team": "产品研发部"},
        params_config={"tone": "正式", "highlights": ""},
    )

    assert "写周报" in prompt
    assert "## 本周工作" in prompt
    assert "- team: 产品研发部" in prompt
    assert "highlights" not in prompt


def test_build_rewrite_prompt():
    prompt = build_rewrite_prompt("原文", "润色")
    assert "改写要求：润色" in prompt
    assert "原文" in prompt
