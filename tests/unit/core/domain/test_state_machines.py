"""
core/domain/state_machines.py 테스트

문서 상태 전이: draft → posted → voided
"""

import pytest

from core.domain.state_machines import DocumentStateMachine, StateMachine
from core.ledger.errors import InvalidStateTransitionError
from core.ledger.types import DocumentStatus


class TestStateMachine:
    """기본 상태 머신"""

    def test_transition_and_history(self) -> None:
        machine = StateMachine("a", {"a": ["b"], "b": ["c"]}, name="Test")

        machine.transition("b")
        machine.transition("c")

        assert machine.state == "c"
        assert machine.history == [("a", "b"), ("b", "c")]

    def test_history_is_copy(self) -> None:
        machine = StateMachine("a", {"a": ["b"]})
        machine.transition("b")

        machine.history.clear()

        assert machine.history == [("a", "b")]


class TestDocumentStateMachine:
    """문서 상태 머신"""

    def test_default_draft(self) -> None:
        machine = DocumentStateMachine()

        assert machine.state == "draft"
        assert machine.is_editable is True
        assert machine.is_terminal is False

    def test_post_then_void(self) -> None:
        machine = DocumentStateMachine(DocumentStatus.DRAFT)

        machine.transition(DocumentStatus.POSTED)
        assert machine.is_editable is False

        machine.transition(DocumentStatus.VOIDED)
        assert machine.is_terminal is True

    @pytest.mark.parametrize(
        ("current", "requested"),
        [
            (DocumentStatus.DRAFT, DocumentStatus.VOIDED),
            (DocumentStatus.POSTED, DocumentStatus.POSTED),
            (DocumentStatus.POSTED, DocumentStatus.DRAFT),
            (DocumentStatus.VOIDED, DocumentStatus.POSTED),
            (DocumentStatus.VOIDED, DocumentStatus.VOIDED),
            (DocumentStatus.VOIDED, DocumentStatus.DRAFT),
        ],
    )
    def test_rejected_transitions(
        self,
        current: DocumentStatus,
        requested: DocumentStatus,
    ) -> None:
        """허용되지 않은 전이는 현재/요청 상태를 담아 거부"""
        machine = DocumentStateMachine(current)

        with pytest.raises(InvalidStateTransitionError) as exc_info:
            machine.transition(requested)

        assert exc_info.value.current == current.value
        assert exc_info.value.requested == requested.value
        assert machine.state == current.value

    def test_can_transition(self) -> None:
        machine = DocumentStateMachine("posted")

        assert machine.can_transition(DocumentStatus.VOIDED) is True
        assert machine.can_transition("draft") is False
