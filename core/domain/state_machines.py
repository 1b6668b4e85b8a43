"""
State Machines

원천 문서(세금계산서/전표)의 상태 전이 관리.
draft → posted → voided 외의 전이는 모두 거부.
"""

import logging
from enum import Enum

from core.ledger.errors import InvalidStateTransitionError
from core.ledger.types import DocumentStatus

logger = logging.getLogger(__name__)


class StateMachine:
    """상태 머신 기본 클래스

    Args:
        initial_state: 초기 상태
        transitions: 허용된 전이 정의 {from_state: [to_states]}
        name: 머신 이름 (로깅용)
    """

    def __init__(
        self,
        initial_state: str | Enum,
        transitions: dict[str, list[str]],
        name: str = "StateMachine",
    ):
        self._state = initial_state.value if isinstance(initial_state, Enum) else initial_state
        self._transitions = transitions
        self._name = name
        self._history: list[tuple[str, str]] = []

    @property
    def state(self) -> str:
        """현재 상태"""
        return self._state

    def can_transition(self, to_state: str | Enum) -> bool:
        """전이 가능 여부 확인

        Args:
            to_state: 목표 상태

        Returns:
            전이 가능 여부
        """
        target = to_state.value if isinstance(to_state, Enum) else to_state
        allowed = self._transitions.get(self._state, [])
        return target in allowed

    def transition(self, to_state: str | Enum) -> str:
        """상태 전이

        Args:
            to_state: 목표 상태

        Returns:
            새 상태

        Raises:
            InvalidStateTransitionError: 허용되지 않은 전이
        """
        target = to_state.value if isinstance(to_state, Enum) else to_state

        if not self.can_transition(target):
            allowed = self._transitions.get(self._state, [])
            raise InvalidStateTransitionError(
                current=self._state,
                requested=target,
                message=(
                    f"{self._name}: Cannot transition from {self._state} to {target}. "
                    f"Allowed: {allowed}"
                ),
            )

        old_state = self._state
        self._state = target
        self._history.append((old_state, target))

        logger.debug(
            f"{self._name}: {old_state} → {target}",
        )

        return target

    @property
    def history(self) -> list[tuple[str, str]]:
        """상태 전이 이력"""
        return self._history.copy()


class DocumentStateMachine(StateMachine):
    """문서 상태 머신

    전이 규칙:
    - draft → posted: 전기 (정확히 1회)
    - posted → voided: 취소 (정확히 1회)
    """

    TRANSITIONS: dict[str, list[str]] = {
        "draft": ["posted"],
        "posted": ["voided"],
    }

    def __init__(self, initial_state: str | DocumentStatus = DocumentStatus.DRAFT):
        super().__init__(
            initial_state=initial_state,
            transitions=self.TRANSITIONS,
            name="DocumentStateMachine",
        )

    @property
    def is_editable(self) -> bool:
        """라인 수정/삭제 가능 여부"""
        return self._state == "draft"

    @property
    def is_terminal(self) -> bool:
        """종료 상태 여부"""
        return self._state == "voided"
