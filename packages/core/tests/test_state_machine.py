"""状态机流转单元测试

测试内容：
1. 合法流转通过
2. 非法流转被拒绝
3. 终态不可再流转
"""

import pytest
from brain.core.models.enums import (
    PRIORITY_RANK,
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    Priority,
    TaskStatus,
    validate_transition,
)


class TestStateMachineTransitions:
    """状态机流转验证"""

    @pytest.mark.parametrize(
        "from_status,to_status",
        [
            (TaskStatus.QUEUED, TaskStatus.ACTIVE),
            (TaskStatus.QUEUED, TaskStatus.CANCELLED),
            (TaskStatus.ACTIVE, TaskStatus.ACTIVE),
            (TaskStatus.ACTIVE, TaskStatus.COMPLETED),
            (TaskStatus.ACTIVE, TaskStatus.CANCELLED),
        ],
    )
    def test_valid_transition(self, from_status: TaskStatus, to_status: TaskStatus):
        """合法流转应通过验证"""
        assert validate_transition(from_status, to_status) is True

    @pytest.mark.parametrize(
        "from_status,to_status",
        [
            (TaskStatus.QUEUED, TaskStatus.COMPLETED),
            (TaskStatus.QUEUED, TaskStatus.QUEUED),
            (TaskStatus.ACTIVE, TaskStatus.QUEUED),
            (TaskStatus.COMPLETED, TaskStatus.ACTIVE),
            (TaskStatus.CANCELLED, TaskStatus.ACTIVE),
        ],
    )
    def test_invalid_transition(self, from_status: TaskStatus, to_status: TaskStatus):
        """非法流转应被拒绝"""
        assert validate_transition(from_status, to_status) is False

    def test_all_terminal_states_cannot_transition(self):
        """所有终态都不能再流转"""
        for terminal in TERMINAL_STATES:
            for target in TaskStatus:
                assert validate_transition(terminal, target) is False, (
                    f"终态 {terminal} 不应能流转到 {target}"
                )

    def test_valid_transitions_completeness(self):
        """VALID_TRANSITIONS 覆盖所有状态"""
        for state in TaskStatus:
            assert state in VALID_TRANSITIONS, f"{state} 未在 VALID_TRANSITIONS 中定义"


class TestPriorityRank:
    def test_rank_order(self):
        ordered = sorted(Priority, key=lambda p: PRIORITY_RANK[p])
        assert ordered == [Priority.CRITICAL, Priority.HIGH, Priority.NORMAL, Priority.LOW]

    def test_rank_covers_every_priority(self):
        assert set(PRIORITY_RANK) == set(Priority)
        assert sorted(PRIORITY_RANK.values()) == list(range(len(Priority)))
