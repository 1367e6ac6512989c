"""Heblo 창고 도메인 이벤트 정의.

도메인 레이어에서 발생하는 이벤트를 정의한다.
usecase/infra 레이어에서 이벤트를 구독하여 부가 로직을 처리한다.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime

from heblo_warehouse.domain.enums import TransportBoxState


@dataclass(frozen=True)
class DomainEvent:
    """도메인 이벤트 기본 클래스.

    Args:
        timestamp: 이벤트 발생 시각 (UTC).
    """

    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))


@dataclass(frozen=True)
class TransportBoxStateChangedEvent(DomainEvent):
    """운송 박스 상태 변경 이벤트.

    Args:
        box_id: 박스 ID.
        box_code: 박스 코드 (없으면 None).
        previous_state: 이전 상태.
        new_state: 새 상태.
        user_name: 전이를 수행한 사용자.
        description: 부가 설명 (에러 메시지 등).
    """

    box_id: int = 0
    box_code: str | None = None
    previous_state: TransportBoxState = TransportBoxState.NEW
    new_state: TransportBoxState = TransportBoxState.NEW
    user_name: str = ''
    description: str | None = None

