"""
状态流定义

每种模式都是一条固定的线性状态序列：只能前进到紧邻的下一个状态，
不能跳过、不能回退。
"""

from __future__ import annotations

from ..models import Mode, WritingState


# 输入 -> THINKING -> OUTLINE_CONFIRM -> GENERATING -> FINISHED
GENERAL_FLOW: tuple[WritingState, ...] = (
    WritingState.INPUT,
    WritingState.THINKING,
    WritingState.OUTLINE_CONFIRM,
    WritingState.GENERATING,
    WritingState.FINISHED,
)

# 输入 @ 选择智能体 -> 配置记忆/参数 -> GENERATING -> FINISHED
AGENT_FLOW: tuple[WritingState, ...] = (
    WritingState.INPUT,
    WritingState.GENERATING,
    WritingState.FINISHED,
)

FLOWS: dict[Mode, tuple[WritingState, ...]] = {
    Mode.GENERAL: GENERAL_FLOW,
    Mode.AGENT: AGENT_FLOW,
}


def get_flow(mode: Mode) -> tuple[WritingState, ...]:
    """获取模式对应的状态序列"""
    return FLOWS[Mode(mode)]


def is_valid_transition(mode: Mode, current: WritingState, next_state: WritingState) -> bool:
    """验证状态转换是否合法：两个状态都在序列中，且 next 紧跟在 current 之后"""
    flow = get_flow(mode)
    if current not in flow or next_state not in flow:
        return False
    return flow.index(next_state) == flow.index(current) + 1


def get_next_state(mode: Mode, current: WritingState) -> WritingState | None:
    """获取下一个状态；当前为终态或不在序列中时返回 None"""
    flow = get_flow(mode)
    if current not in flow:
        return None
    index = flow.index(current)
    if index == len(flow) - 1:
        return None
    return flow[index + 1]
