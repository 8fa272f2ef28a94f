"""
测试公共夹具
"""

from __future__ import annotations

import pytest
from rich.console import Console

from nexuswrite.models import AgentConfig, ConfigField, GeneralData, GenerationSettings, Scenario
from nexuswrite.store import MemoryStorage, TaskStore


OUTLINE_TEXT = """# 产品研发部周报
## 本周工作
### 需求评审
### 版本发布
## 下周计划
"""

FULL_TEXT = """# 产品研发部周报

## 本周工作

### 需求评审
完成了写作工作台的需求评审。

### 版本发布
1.3 版本已按计划上线。

## 下周计划
推进改写功能接入。
"""


class FakeClock:
    """可控的毫秒时钟"""

    def __init__(self, start: int = 1_700_000_000_000):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int = 1) -> int:
        self.now += ms
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def console() -> Console:
    return Console(record=True, force_terminal=False, color_system=None, width=200)


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def store(storage: MemoryStorage, console: Console, clock: FakeClock) -> TaskStore:
    return TaskStore(storage, console=console, clock=clock)


@pytest.fixture
def scenario() -> Scenario:
    return Scenario(
        id="weekly_report",
        name="周报撰写",
        category="WORKFLOW",
        agent_config=AgentConfig(
            id="agent_weekly_report",
            name="周报助手",
            memory_configs=[
                ConfigField(key="team", label="所在团队", default_value="产品研发部"),
            ],
            param_configs=[
                ConfigField(key="tone", label="语气", type="select", options=["正式", "轻松"]),
                ConfigField(key="highlights", label="本周重点", type="textarea"),
            ],
        ),
        general_data=GeneralData(outline=OUTLINE_TEXT, full_text=FULL_TEXT),
    )


@pytest.fixture
def fast_settings() -> GenerationSettings:
    return GenerationSettings(chunk_size=10, interval=0)
