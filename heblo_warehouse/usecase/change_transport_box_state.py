"""운송 박스 상태 변경 유스케이스.

선언적 전이 테이블을 통해 박스를 목표 상태로 전이시키고,
전이별 부가 처리(코드 중복 검사, 예비 위치 검증, 입고 작업 생성)를 수행한다.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
import logging

from heblo_warehouse.domain.entities.stock_up_operation import (
    make_document_number,
)
from heblo_warehouse.domain.entities.transport_box import TransportBox
from heblo_warehouse.domain.entities.transport_box_transitions import (
    TransitionArgs,
)
from heblo_warehouse.domain.enums import StockUpSourceType, TransportBoxState
from heblo_warehouse.domain.events.transport_events import (
    TransportBoxStateChangedEvent,
)
from heblo_warehouse.domain.exceptions import (
    DuplicateActiveBoxError,
    TransportBoxNotFoundError,
    TransportBoxValidationError,
)
from heblo_warehouse.domain.value_objects.box_code import BoxCode
from heblo_warehouse.usecase.ports.event_publisher import EventPublisher
from heblo_warehouse.usecase.ports.stock_up_gateway import StockUpGateway
from heblo_warehouse.usecase.ports.transport_box_repository import (
    TransportBoxRepository,
)

logger = logging.getLogger(__name__)

_Hook = Callable[
    ['ChangeTransportBoxState', TransportBox, TransitionArgs, str, datetime],
    None,
]


def _utc_now() -> datetime:
    return datetime.now(UTC)


class ChangeTransportBoxState:
    """운송 박스 상태 변경 유스케이스.

    박스 조회 → 전이 조회 → 전이별 훅 → 전이 실행 → 저장 → 이벤트 발행.

    Args:
        repository: 운송 박스 저장소.
        stock_up_gateway: 입고 작업 포트.
        event_publisher: 이벤트 발행자.
        clock: 현재 시각 공급자 (UTC).
    """

    def __init__(
        self,
        repository: TransportBoxRepository,
        stock_up_gateway: StockUpGateway,
        event_publisher: EventPublisher,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._repository = repository
        self._stock_up_gateway = stock_up_gateway
        self._event_publisher = event_publisher
        self._clock = clock

    def execute(
        self,
        box_id: int,
        new_state: TransportBoxState,
        user_name: str,
        box_code: str | None = None,
        location: str | None = None,
        description: str | None = None,
        system: bool = False,
    ) -> TransportBox:
        """박스를 목표 상태로 전이한다.

        Args:
            box_id: 대상 박스 ID.
            new_state: 목표 상태.
            user_name: 요청 사용자.
            box_code: New → Opened 시 부여할 코드.
            location: Opened → Reserve 시 보관 위치.
            description: 박스 설명 (주어지면 교체).
            system: 자동화 프로세스 요청 여부 (system_only 전이 허용).

        Returns:
            전이된 박스.

        Raises:
            TransportBoxNotFoundError: 박스가 없을 때.
            TransportBoxValidationError: 전이/입력 검증 실패 시.
        """
        box = self._repository.get_by_id(box_id)
        if box is None:
            raise TransportBoxNotFoundError(
                f'Transport box [{box_id}] not found'
            )

        previous_state = box.state
        now = self._clock()
        args = TransitionArgs(box_code=box_code, location=location)

        try:
            transition = box.transition_node.get_transition(new_state)
            if transition.system_only and not system:
                raise TransportBoxValidationError(
                    f'Transition {previous_state} -> {new_state} '
                    f'can only be triggered by the system'
                )

            hook = _HOOKS.get((previous_state, new_state))
            if hook is not None:
                hook(self, box, args, user_name, now)

            transition.execute(box, now, user_name, args)
        except TransportBoxValidationError as e:
            logger.warning(
                'State transition validation failed for box %d: %s',
                box_id, e,
            )
            raise

        if description:
            box.description = description
        box.last_modification_time = now
        box.last_modifier_id = user_name
        self._repository.save(box)
        self._publish(box, previous_state, user_name)

        logger.info(
            'Transport box %d state changed %s -> %s',
            box_id, previous_state, box.state,
        )
        return box

    def _handle_new_to_opened(
        self,
        box: TransportBox,
        args: TransitionArgs,
        user_name: str,
        now: datetime,
    ) -> None:
        """코드 필수 + 활성 중복 금지, 같은 코드의 Stocked 박스는 닫는다."""
        code = BoxCode.parse(args.box_code)

        if self._repository.is_box_code_active(code.value):
            raise DuplicateActiveBoxError(
                f"Transport box with code '{code}' is already active"
            )

        for stocked in self._repository.list_by_state(
            TransportBoxState.STOCKED, code.value
        ):
            stocked.close(now, user_name)
            self._repository.save(stocked)
            self._publish(stocked, TransportBoxState.STOCKED, user_name)
            logger.info(
                'Closed stocked box %d re-using code %s', stocked.id, code
            )

    def _handle_open_to_reserve(
        self,
        box: TransportBox,
        args: TransitionArgs,
        user_name: str,
        now: datetime,
    ) -> None:
        if not args.location:
            raise TransportBoxValidationError(
                'Location is required to move the box to Reserve'
            )

    def _handle_received(
        self,
        box: TransportBox,
        args: TransitionArgs,
        user_name: str,
        now: datetime,
    ) -> None:
        """박스 품목마다 입고 작업을 생성한다.

        작업을 하나라도 만들기 전에 모든 품목 수량을 먼저 검사한다.
        """
        invalid = [
            item.product_code for item in box.items if not item.amount > 0
        ]
        if invalid:
            raise TransportBoxValidationError(
                f'Box {box.code} cannot be received, items with '
                f'non-positive amount: {", ".join(invalid)}'
            )

        for item in box.items:
            document_number = make_document_number(box.id, item.product_code)
            self._stock_up_gateway.create_operation(
                document_number,
                item.product_code,
                item.amount,
                StockUpSourceType.TRANSPORT_BOX,
                box.id,
            )
            logger.debug(
                'Created StockUpOperation %s for product %s, amount %s',
                document_number, item.product_code, item.amount,
            )

        logger.info(
            'Created %d StockUpOperations for box %d (%s)',
            len(box.items), box.id, box.code,
        )

    def _publish(
        self,
        box: TransportBox,
        previous_state: TransportBoxState,
        user_name: str,
    ) -> None:
        last_log = box.state_log[-1] if box.state_log else None
        self._event_publisher.publish(
            TransportBoxStateChangedEvent(
                box_id=box.id,
                box_code=box.code,
                previous_state=previous_state,
                new_state=box.state,
                user_name=user_name,
                description=last_log.description if last_log else None,
            )
        )


_HOOKS: dict[tuple[TransportBoxState, TransportBoxState], _Hook] = {
    (TransportBoxState.NEW, TransportBoxState.OPENED):
        ChangeTransportBoxState._handle_new_to_opened,
    (TransportBoxState.OPENED, TransportBoxState.RESERVE):
        ChangeTransportBoxState._handle_open_to_reserve,
    (TransportBoxState.IN_TRANSIT, TransportBoxState.RECEIVED):
        ChangeTransportBoxState._handle_received,
    (TransportBoxState.RESERVE, TransportBoxState.RECEIVED):
        ChangeTransportBoxState._handle_received,
}
