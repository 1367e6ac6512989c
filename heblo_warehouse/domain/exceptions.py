"""Heblo 창고 도메인 예외 정의."""

from __future__ import annotations

from collections.abc import Iterable

from heblo_warehouse.domain.enums import TransportBoxState


class DomainError(Exception):
    """도메인 계층 기본 예외."""


class TransportBoxValidationError(DomainError):
    """운송 박스 입력/상태 검증 실패 시."""


class InvalidStateTransitionError(TransportBoxValidationError):
    """허용되지 않는 운송 박스 상태 전이 시.

    Args:
        current_state: 현재 상태.
        requested_state: 요청된 상태.
        allowed_states: 이 동작에 필요한 상태 집합.
    """

    def __init__(
        self,
        current_state: TransportBoxState,
        requested_state: TransportBoxState,
        allowed_states: Iterable[TransportBoxState],
    ) -> None:
        self.current_state = current_state
        self.requested_state = requested_state
        self.allowed_states = frozenset(allowed_states)
        allowed = ', '.join(sorted(s.value for s in self.allowed_states))
        super().__init__(
            f'Unable to change state from {current_state} to '
            f'{requested_state} ({allowed} state is required for this action)'
        )


class DuplicateActiveBoxError(TransportBoxValidationError):
    """같은 코드의 활성 박스가 이미 존재할 때."""


class TransportBoxNotFoundError(DomainError):
    """존재하지 않는 운송 박스 접근 시."""


class StockUpError(DomainError):
    """입고 작업 생성/전이 실패 시."""
