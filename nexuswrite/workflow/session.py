"""
写作会话

持有一个 WritingContext，负责：
- 按状态流推进写作状态（非法转换静默忽略）
- 模式切换与 @ 提及检测
- 大纲解析、智能体配置
- 启动 / 取消流式生成
- 在关键节点把会话同步到 TaskStore
"""

from __future__ import annotations

from typing import Any, AsyncIterator, Callable

from rich.console import Console

from ..models import (
    GenerationSettings,
    Mode,
    OutlineNode,
    Scenario,
    Task,
    WritingContext,
    WritingState,
    outline_to_markdown,
)
from ..store import ScenarioValueStore, TaskStore, missing_required
from ..utils import extract_first_h1, parse_outline
from .flow import is_valid_transition
from .generation import GenerationEvent, GenerationEventKind, GenerationTask, chunk_text


MENTION_MARKER = "@"

# 根据会话上下文提供生成内容的来源（默认使用场景中的完整正文）
TextSourceFactory = Callable[[WritingContext], AsyncIterator[str]]


def detect_mode(text: str, default: Mode = Mode.GENERAL) -> Mode:
    """输入中包含 @ 时进入智能体模式"""
    if MENTION_MARKER in (text or ""):
        return Mode.AGENT
    return default


class WritingSession:
    """
    一次写作会话

    场景（scenario）由调用方显式传入，会话不读取任何全局的"当前场景"。
    """

    def __init__(
        self,
        store: TaskStore,
        *,
        scenario: Scenario | None = None,
        values: ScenarioValueStore | None = None,
        settings: GenerationSettings | None = None,
        text_source: TextSourceFactory | None = None,
        console: Console | None = None,
    ):
        self.store = store
        self.scenario = scenario
        self.values = values or ScenarioValueStore()
        self.settings = settings or GenerationSettings()
        self.text_source = text_source
        self.console = console or Console(stderr=True)
        self.context = WritingContext()
        self.outline_nodes: list[OutlineNode] = []
        self.generation: GenerationTask | None = None

    # ------------------------------------------------------------------
    # 属性
    # ------------------------------------------------------------------

    @property
    def mode(self) -> Mode:
        return self.context.mode

    @property
    def state(self) -> WritingState:
        return self.context.current_state

    @property
    def task_id(self) -> str | None:
        return self.context.task_id

    @property
    def target_text(self) -> str:
        """场景提供的完整正文"""
        if self.scenario:
            return self.scenario.general_data.full_text
        return ""

    # ------------------------------------------------------------------
    # 会话创建 / 恢复
    # ------------------------------------------------------------------

    def start(self, input: str, mode: Mode | None = None) -> Task:
        """
        从首页提交输入，创建任务并进入工作台

        GENERAL 模式进入 THINKING；AGENT 模式停留在 INPUT 等待配置。
        """
        mode = detect_mode(input, mode or Mode.GENERAL)
        scenario_id = self.scenario.id if self.scenario else None
        task = self.store.create(input, input, mode, scenario_id)

        self.context = WritingContext(mode=mode, input=input, task_id=task.id)
        self.outline_nodes = []

        if mode == Mode.GENERAL:
            self.transition(WritingState.THINKING)
        else:
            self._enter_agent_mode()
            self._persist(writing_state=self.state)
        return task

    @classmethod
    def restore(
        cls,
        store: TaskStore,
        task_id: str,
        *,
        scenario: Scenario | None = None,
        **kwargs: Any,
    ) -> WritingSession | None:
        """从任务记录恢复会话；任务不存在时返回 None"""
        task = store.get(task_id)
        if task is None:
            return None
        session = cls(store, scenario=scenario, **kwargs)
        session.context = WritingContext(
            mode=task.mode,
            current_state=task.writing_state,
            input=task.input,
            agent_id=(scenario.agent_config.id if scenario and task.mode == Mode.AGENT else None),
            memory_config=dict(task.memory_config),
            params_config=dict(task.params_config),
            outline=task.outline or None,
            content=task.content or None,
            task_id=task.id,
            document_name=task.document_name,
        )
        session.outline_nodes = parse_outline(task.outline)
        return session

    # ------------------------------------------------------------------
    # 状态流转
    # ------------------------------------------------------------------

    def transition(self, next_state: WritingState) -> bool:
        """
        尝试转换到下一个状态

        非法转换不报错，保持当前状态并返回 False。
        """
        if not self._advance(next_state):
            return False
        self._persist(writing_state=next_state)
        return True

    def _advance(self, next_state: WritingState) -> bool:
        if not is_valid_transition(self.mode, self.state, next_state):
            return False
        self.context.current_state = next_state
        return True

    def set_input(self, text: str) -> None:
        """更新输入内容；GENERAL 模式下出现 @ 时切换到智能体模式"""
        self.context.input = text
        if self.mode == Mode.GENERAL and detect_mode(text) == Mode.AGENT:
            self.switch_mode(Mode.AGENT)

    def switch_mode(self, mode: Mode) -> None:
        """
        切换模式

        状态重置为 INPUT；进入 AGENT 时从场景读取智能体 ID，
        离开 AGENT 时清空智能体 ID 与记忆/参数配置。
        """
        self.cancel()
        self.context.mode = Mode(mode)
        self.context.current_state = WritingState.INPUT
        if self.context.mode == Mode.AGENT:
            self._enter_agent_mode()
        else:
            self.context.agent_id = None
            self.context.memory_config = {}
            self.context.params_config = {}
        self._persist(
            mode=self.context.mode,
            writing_state=self.state,
            memory_config=self.context.memory_config,
            params_config=self.context.params_config,
        )

    def _enter_agent_mode(self) -> None:
        self.context.current_state = WritingState.INPUT
        if self.scenario:
            self.context.agent_id = self.scenario.agent_config.id

    def submit(self) -> bool:
        """发送查询：GENERAL 模式 INPUT -> THINKING"""
        if not self.context.input.strip() or self.mode != Mode.GENERAL:
            return False
        return self.transition(WritingState.THINKING)

    # ------------------------------------------------------------------
    # GENERAL：大纲
    # ------------------------------------------------------------------

    def finish_thinking(self, outline: str | None = None) -> list[OutlineNode]:
        """
        思考结束，进入大纲确认

        Args:
            outline: 大纲文本；默认使用场景中的大纲

        Returns:
            解析后的大纲树；无法解析时为空列表
        """
        if not self._advance(WritingState.OUTLINE_CONFIRM):
            return self.outline_nodes
        if outline is None:
            outline = self.scenario.general_data.outline if self.scenario else ""
        self.context.outline = outline
        self.outline_nodes = parse_outline(outline)
        if not self.outline_nodes:
            self.console.print("[yellow]警告: 未能从大纲中解析出任何标题[/yellow]")
        self._persist(writing_state=self.state, outline=outline)
        return self.outline_nodes

    def outline_title(self) -> str:
        """大纲标题：大纲一级标题 > 正文一级标题 > 场景名称"""
        title = extract_first_h1(self.context.outline or "")
        if title:
            return title
        if self.scenario:
            return extract_first_h1(self.target_text) or self.scenario.name
        return ""

    def confirm_outline(self, nodes: list[OutlineNode] | None = None) -> GenerationTask | None:
        """
        确认大纲并开始生成

        Args:
            nodes: 用户编辑后的大纲树（默认使用当前树）

        Returns:
            生成任务（尚未启动）；当前状态不允许生成时返回 None
        """
        if self.mode != Mode.GENERAL:
            return None
        if nodes is not None:
            self.outline_nodes = nodes
        if not is_valid_transition(self.mode, self.state, WritingState.GENERATING):
            return None
        self.context.outline = outline_to_markdown(self.outline_nodes)
        return self._begin_generation(outline=self.context.outline)

    # ------------------------------------------------------------------
    # AGENT：配置
    # ------------------------------------------------------------------

    def update_memory_config(self, values: dict[str, Any]) -> None:
        """保存记忆变量配置"""
        self.context.memory_config = dict(values)
        if self.scenario:
            self.values.set_memory_values(self.scenario.id, values)
        self._persist(memory_config=self.context.memory_config)

    def update_params_config(self, values: dict[str, Any]) -> list[str]:
        """
        保存参数配置

        Returns:
            未填写的必填项名称；不为空时不保存
        """
        if self.scenario:
            missing = missing_required(self.scenario.agent_config.param_configs, values)
            if missing:
                return missing
            self.values.set_param_values(self.scenario.id, values)
        self.context.params_config = dict(values)
        self._persist(params_config=self.context.params_config)
        return []

    def start_generation(self) -> GenerationTask | None:
        """智能体模式下直接开始生成"""
        if self.mode != Mode.AGENT:
            return None
        if not is_valid_transition(self.mode, self.state, WritingState.GENERATING):
            return None
        return self._begin_generation()

    # ------------------------------------------------------------------
    # 生成
    # ------------------------------------------------------------------

    def _begin_generation(self, **fields: Any) -> GenerationTask:
        self._advance(WritingState.GENERATING)
        self.context.content = ""

        if self.text_source is not None:
            generation = GenerationTask(self.text_source(self.context))
        else:
            # 回放已知正文时，标题可以提前确定
            target = self.target_text
            title = extract_first_h1(target)
            if title:
                self.context.document_name = title
            generation = GenerationTask(chunk_text(target, self.settings), target_text=target)
        generation.add_listener(self._on_generation_event)
        self.generation = generation

        self._persist(
            writing_state=self.state,
            content="",
            document_name=self.context.document_name,
            **fields,
        )
        return generation

    def _on_generation_event(self, event: GenerationEvent) -> None:
        if event.kind == GenerationEventKind.CHUNK:
            self.context.content = event.content
        elif event.kind == GenerationEventKind.TITLE:
            self.context.document_name = event.title or self.context.document_name
        elif event.kind == GenerationEventKind.FINISHED:
            self.context.content = event.content
            self._advance(WritingState.FINISHED)
            # 完成时一次性整体写入
            self._persist(
                writing_state=self.state,
                content=event.content,
                document_name=self.context.document_name,
            )
            self.console.print("[green]✓ 文档生成完成[/green]")
        elif event.kind == GenerationEventKind.CANCELLED:
            self.console.print("[yellow]生成已取消[/yellow]")
        elif event.kind == GenerationEventKind.FAILED:
            self.context.content = event.content
            self._persist(content=event.content, document_name=self.context.document_name)
            self.console.print(f"[red]✗ 生成失败: {event.error}[/red]")

    def cancel(self) -> None:
        """取消正在进行的生成；写作状态保持不变"""
        if self.generation is not None and not self.generation.done:
            self.generation.cancel()

    # ------------------------------------------------------------------
    # 持久化
    # ------------------------------------------------------------------

    def _persist(self, **fields: Any) -> None:
        if self.context.task_id:
            self.store.update(self.context.task_id, **fields)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}: {self.mode.value}/{self.state.value} ({self.task_id})>"
