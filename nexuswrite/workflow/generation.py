"""
流式生成任务

把目标文本（或任意异步文本流）逐块追加到文档中，并以事件的形式通知外部。
任务可以随时取消：取消后不再产生任何内容事件，也不会推进写作状态。
"""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import AsyncIterator, Callable

from pydantic import BaseModel, Field

from ..llm import LLMProvider
from ..models import GenerationSettings, LLMOptions
from ..utils import extract_first_h1


class GenerationEventKind(str, Enum):
    """生成事件类型"""
    CHUNK = "chunk"          # 追加了一段内容
    TITLE = "title"          # 识别到文档标题（只会出现一次）
    FINISHED = "finished"    # 生成完成
    CANCELLED = "cancelled"  # 生成被取消
    FAILED = "failed"        # 生成来源出错


TERMINAL_EVENTS = (
    GenerationEventKind.FINISHED,
    GenerationEventKind.CANCELLED,
    GenerationEventKind.FAILED,
)


class GenerationEvent(BaseModel):
    """生成事件"""
    kind: GenerationEventKind = Field(..., description="事件类型")
    content: str = Field(default="", description="截至当前的完整内容")
    delta: str = Field(default="", description="本次追加的内容")
    title: str | None = Field(default=None, description="文档标题")
    error: str | None = Field(default=None, description="失败原因")


GenerationListener = Callable[[GenerationEvent], None]


async def chunk_text(
    text: str,
    settings: GenerationSettings | None = None,
) -> AsyncIterator[str]:
    """按固定大小、固定间隔逐块输出文本"""
    settings = settings or GenerationSettings()
    for start in range(0, len(text), settings.chunk_size):
        await asyncio.sleep(settings.interval)
        yield text[start:start + settings.chunk_size]


async def llm_text_stream(
    provider: LLMProvider,
    prompt: str,
    *,
    system_prompt: str | None = None,
    options: LLMOptions | None = None,
) -> AsyncIterator[str]:
    """使用 LLM 流式接口作为生成来源"""
    async for delta in provider.invoke_stream(prompt, system_prompt=system_prompt, options=options):
        if delta:
            yield delta


class GenerationTask:
    """
    可取消的流式生成任务

    - 每次追加内容都会发出 CHUNK 事件
    - 已生成内容中第一次出现一级标题时发出 TITLE 事件，之后不再覆盖
    - 全部完成后发出 FINISHED 事件；若给定 target_text，最终内容以它为准
    - 取消后发出 CANCELLED 事件，不再追加任何内容
    - 来源抛出异常时发出 FAILED 事件，异常继续向上抛出

    用法：
        task.start()            # 在当前事件循环中后台运行
        await task.wait()
    或直接：
        await task.run()
    """

    def __init__(
        self,
        source: AsyncIterator[str],
        *,
        target_text: str | None = None,
    ):
        self._source = source
        self.target_text = target_text
        self.content = ""
        self.title: str | None = None
        self._listeners: list[GenerationListener] = []
        self._queues: list[asyncio.Queue[GenerationEvent]] = []
        self._history: list[GenerationEvent] = []
        self._task: asyncio.Task[str] | None = None
        self._cancel_requested = False
        self._running = False
        self._finished = False
        self._cancelled = False
        self.error: Exception | None = None

    @classmethod
    def from_text(cls, text: str, settings: GenerationSettings | None = None) -> GenerationTask:
        """以已知目标文本构建模拟流式生成任务"""
        return cls(chunk_text(text, settings), target_text=text)

    # ------------------------------------------------------------------
    # 状态
    # ------------------------------------------------------------------

    @property
    def finished(self) -> bool:
        return self._finished

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def failed(self) -> bool:
        return self.error is not None

    @property
    def done(self) -> bool:
        return self._finished or self._cancelled or self.error is not None

    # ------------------------------------------------------------------
    # 订阅
    # ------------------------------------------------------------------

    def add_listener(self, listener: GenerationListener) -> GenerationTask:
        """添加同步事件监听器"""
        self._listeners.append(listener)
        return self

    async def events(self) -> AsyncIterator[GenerationEvent]:
        """异步迭代事件（包括订阅前已发出的事件），终止事件后结束"""
        queue: asyncio.Queue[GenerationEvent] = asyncio.Queue()
        for event in self._history:
            queue.put_nowait(event)
        self._queues.append(queue)
        try:
            while True:
                event = await queue.get()
                yield event
                if event.kind in TERMINAL_EVENTS:
                    return
        finally:
            self._queues.remove(queue)

    def _emit(self, event: GenerationEvent) -> None:
        self._history.append(event)
        for listener in list(self._listeners):
            listener(event)
        for queue in self._queues:
            queue.put_nowait(event)

    # ------------------------------------------------------------------
    # 执行
    # ------------------------------------------------------------------

    def start(self) -> asyncio.Task[str]:
        """在当前运行的事件循环中启动任务"""
        if self._task is None:
            self._task = asyncio.get_running_loop().create_task(self.run())
        return self._task

    async def wait(self) -> str:
        """等待任务结束（完成或取消），返回当前内容"""
        if self._task is None:
            return await self.run()
        await asyncio.wait({self._task})
        if not self._task.cancelled():
            self._task.result()
        return self.content

    def cancel(self) -> None:
        """请求取消；已结束的任务不受影响"""
        if self.done:
            return
        self._cancel_requested = True
        if self._task is not None and not self._task.done():
            self._task.cancel()
        if not self._running:
            # 尚未开始运行，直接标记为已取消
            self._mark_cancelled()

    async def run(self) -> str:
        """执行生成，返回最终内容"""
        if self.done:
            await _aclose(self._source)
            return self.content
        self._running = True
        try:
            async for delta in self._source:
                if self._cancel_requested:
                    break
                self._append(delta)
        except asyncio.CancelledError:
            self._mark_cancelled()
            raise
        except Exception as e:
            self._mark_failed(e)
            raise
        finally:
            await _aclose(self._source)

        if self._cancel_requested:
            self._mark_cancelled()
            return self.content

        self._complete()
        return self.content

    def _append(self, delta: str) -> None:
        self.content += delta
        self._emit(GenerationEvent(
            kind=GenerationEventKind.CHUNK,
            content=self.content,
            delta=delta,
        ))
        if self.title is None:
            # 只在已完整输出的行中查找标题
            self._detect_title(self.content[: self.content.rfind("\n") + 1])

    def _detect_title(self, text: str) -> None:
        title = extract_first_h1(text)
        if title:
            self.title = title
            self._emit(GenerationEvent(
                kind=GenerationEventKind.TITLE,
                content=self.content,
                title=title,
            ))

    def _complete(self) -> None:
        if self.target_text is not None:
            self.content = self.target_text
        # 流式过程中未捕获到标题时，用最终内容再提取一次
        if self.title is None:
            self._detect_title(self.content)
        self._finished = True
        self._emit(GenerationEvent(
            kind=GenerationEventKind.FINISHED,
            content=self.content,
            title=self.title,
        ))

    def _mark_cancelled(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        self._emit(GenerationEvent(
            kind=GenerationEventKind.CANCELLED,
            content=self.content,
            title=self.title,
        ))

    def _mark_failed(self, error: Exception) -> None:
        self.error = error
        self._emit(GenerationEvent(
            kind=GenerationEventKind.FAILED,
            content=self.content,
            title=self.title,
            error=str(error) or error.__class__.__name__,
        ))

    def __repr__(self) -> str:
        if self._finished:
            status = "finished"
        elif self._cancelled:
            status = "cancelled"
        elif self.error is not None:
            status = "failed"
        else:
            status = "pending"
        return f"<{self.__class__.__name__}: {status} ({len(self.content)} chars)>"


async def _aclose(source: AsyncIterator[str]) -> None:
    aclose = getattr(source, "aclose", None)
    if aclose is not None:
        await aclose()
