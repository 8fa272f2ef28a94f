"""
NexusWrite: AI 辅助写作工作台核心
从「一句写作需求」到「大纲确认 / 智能体配置 → 流式生成文档」，并保存历史任务
"""

__version__ = "0.1.0"

from .models import (
    Mode,
    WritingState,
    WritingContext,
    Task,
    Message,
    OutlineNode,
    Scenario,
    AgentConfig,
    ConfigField,
    GenerationSettings,
    LLMOptions,
)
from .llm import LLMProvider, LLMPurpose, LLMResponse, create_provider
from .config import load_config, load_scenarios, save_scenarios, AppConfig
from .store import TaskStore, MemoryStorage, FileStorage, ScenarioValueStore
from .utils import parse_outline, extract_first_h1
from .workflow import (
    GENERAL_FLOW,
    AGENT_FLOW,
    is_valid_transition,
    get_next_state,
    GenerationTask,
    WritingSession,
)
from .rewrite import RewriteType, RewriteError, Rewriter, sanitize_rewrite_output

__all__ = [
    # 版本
    "__version__",
    # 模型
    "Mode",
    "WritingState",
    "WritingContext",
    "Task",
    "Message",
    "OutlineNode",
    "Scenario",
    "AgentConfig",
    "ConfigField",
    "GenerationSettings",
    "LLMOptions",
    # LLM
    "LLMProvider",
    "LLMPurpose",
    "LLMResponse",
    "create_provider",
    # 配置
    "load_config",
    "load_scenarios",
    "save_scenarios",
    "AppConfig",
    # 存储
    "TaskStore",
    "MemoryStorage",
    "FileStorage",
    "ScenarioValueStore",
    # 大纲
    "parse_outline",
    "extract_first_h1",
    # 写作流程
    "GENERAL_FLOW",
    "AGENT_FLOW",
    "is_valid_transition",
    "get_next_state",
    "GenerationTask",
    "WritingSession",
    # 改写
    "RewriteType",
    "RewriteError",
    "Rewriter",
    "sanitize_rewrite_output",
]
