"""운송 박스 상태 이력 엔티티."""

from dataclasses import dataclass
from datetime import datetime

from heblo_warehouse.domain.enums import TransportBoxState


@dataclass(frozen=True)
class TransportBoxStateLog:
    """상태 전이 1건의 감사 기록 (append-only).

    Args:
        state: 전이된 새 상태.
        timestamp: 전이 시각.
        user_name: 전이를 수행한 사용자.
        description: 부가 설명 (에러 메시지 등).
    """

    state: TransportBoxState
    timestamp: datetime
    user_name: str
    description: str | None = None
