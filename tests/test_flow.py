"""
状态流规则测试
"""

import pytest

from nexuswrite.models import Mode, WritingState
from nexuswrite.workflow import AGENT_FLOW, GENERAL_FLOW, get_flow, get_next_state, is_valid_transition


def test_documented_transitions():
    assert is_valid_transition(Mode.GENERAL, WritingState.INPUT, WritingState.THINKING)
    assert not is_valid_transition(Mode.GENERAL, WritingState.INPUT, WritingState.GENERATING)
    assert not is_valid_transition(Mode.AGENT, WritingState.INPUT, WritingState.THINKING)


@pytest.mark.parametrize("mode", [Mode.GENERAL, Mode.AGENT])
def test_only_immediate_successor_is_valid(mode):
    flow = get_flow(mode)
    for i, current in enumerate(flow):
        for j, target in enumerate(flow):
            assert is_valid_transition(mode, current, target) == (j == i + 1)


def test_agent_flow_skips_outline_stages():
    assert AGENT_FLOW == (WritingState.INPUT, WritingState.GENERATING, WritingState.FINISHED)
    assert is_valid_transition(Mode.AGENT, WritingState.INPUT, WritingState.GENERATING)
    assert not is_valid_transition(Mode.AGENT, WritingState.OUTLINE_CONFIRM, WritingState.GENERATING)


def test_jumps_and_backward_moves_rejected():
    assert not is_valid_transition(Mode.GENERAL, WritingState.INPUT, WritingState.FINISHED)
    assert not is_valid_transition(Mode.GENERAL, WritingState.GENERATING, WritingState.OUTLINE_CONFIRM)
    assert not is_valid_transition(Mode.GENERAL, WritingState.THINKING, WritingState.THINKING)


def test_get_next_state():
    assert get_next_state(Mode.GENERAL, WritingState.INPUT) == WritingState.THINKING
    assert get_next_state(Mode.GENERAL, WritingState.OUTLINE_CONFIRM) == WritingState.GENERATING
    assert get_next_state(Mode.AGENT, WritingState.INPUT) == WritingState.GENERATING
    assert get_next_state(Mode.GENERAL, WritingState.FINISHED) is None
    assert get_next_state(Mode.AGENT, WritingState.FINISHED) is None
    assert get_next_state(Mode.AGENT, WritingState.THINKING) is None


def test_flows_are_walkable_to_finished():
    for mode, flow in ((Mode.GENERAL, GENERAL_FLOW), (Mode.AGENT, AGENT_FLOW)):
        state = WritingState.INPUT
        visited = [state]
        while (state := get_next_state(mode, state)) is not None:
            visited.append(state)
        assert tuple(visited) == flow
