"""수령 박스 완료 반복 작업 유스케이스.

Received 상태 박스의 입고 작업 결과를 확인하여
모두 완료되면 Stocked로, 실패가 있으면 Error로 전이한다.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
import logging

from heblo_warehouse.domain.entities.transport_box import TransportBox
from heblo_warehouse.domain.enums import (
    StockUpOperationState,
    StockUpSourceType,
    TransportBoxState,
)
from heblo_warehouse.domain.events.transport_events import (
    TransportBoxStateChangedEvent,
)
from heblo_warehouse.usecase.ports.event_publisher import EventPublisher
from heblo_warehouse.usecase.ports.merge_scheduler import MergeScheduler
from heblo_warehouse.usecase.ports.stock_up_gateway import StockUpGateway
from heblo_warehouse.usecase.ports.transport_box_repository import (
    TransportBoxRepository,
)

logger = logging.getLogger(__name__)

SYSTEM_USER = 'System'
TRANSPORT_DATA_SOURCE = 'TransportBoxes'


class _BoxOutcome(Enum):
    COMPLETED = 'completed'
    FAILED = 'failed'
    SKIPPED = 'skipped'


@dataclass
class CompleteReceivedBoxesResult:
    """작업 1회 실행 결과.

    Args:
        completed: Stocked로 전이된 박스 수.
        failed: Error로 전이되었거나 처리 중 실패한 박스 수.
        skipped: 입고 작업이 진행 중이라 건너뛴 박스 수.
        failed_box_codes: 실패한 박스 코드 (코드가 없으면 ID).
    """

    completed: int = 0
    failed: int = 0
    skipped: int = 0
    failed_box_codes: list[str] = field(default_factory=list)


def _utc_now() -> datetime:
    return datetime.now(UTC)


class CompleteReceivedBoxes:
    """수령 박스 완료 작업.

    Args:
        repository: 운송 박스 저장소.
        stock_up_gateway: 입고 작업 포트.
        event_publisher: 이벤트 발행자.
        merge_scheduler: 박스 변경 후 카탈로그 병합을 예약할 스케줄러.
        enabled: 작업 활성화 여부.
        clock: 현재 시각 공급자 (UTC).
    """

    def __init__(
        self,
        repository: TransportBoxRepository,
        stock_up_gateway: StockUpGateway,
        event_publisher: EventPublisher,
        merge_scheduler: MergeScheduler | None = None,
        enabled: bool = True,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._repository = repository
        self._stock_up_gateway = stock_up_gateway
        self._event_publisher = event_publisher
        self._merge_scheduler = merge_scheduler
        self._enabled = enabled
        self._clock = clock

    def execute(self) -> CompleteReceivedBoxesResult:
        """Received 상태 박스를 한 번 처리한다."""
        result = CompleteReceivedBoxesResult()
        if not self._enabled:
            logger.info('CompleteReceivedBoxes is disabled, skipping')
            return result

        boxes = self._repository.list_by_state(TransportBoxState.RECEIVED)
        logger.info('Found %d transport boxes in Received state', len(boxes))

        for box in boxes:
            try:
                outcome = self._process_box(box)
            except Exception:
                logger.exception(
                    'Unexpected error processing box %d (%s)',
                    box.id, box.code,
                )
                outcome = _BoxOutcome.FAILED

            if outcome is _BoxOutcome.COMPLETED:
                result.completed += 1
            elif outcome is _BoxOutcome.FAILED:
                result.failed += 1
                result.failed_box_codes.append(box.code or str(box.id))
            else:
                result.skipped += 1

        logger.info(
            'CompleteReceivedBoxes finished. '
            'Completed: %d, Failed: %d, Skipped: %d',
            result.completed, result.failed, result.skipped,
        )

        if (result.completed or result.failed) and self._merge_scheduler:
            self._merge_scheduler.schedule_merge(TRANSPORT_DATA_SOURCE)

        return result

    def _process_box(self, box: TransportBox) -> _BoxOutcome:
        operations = self._stock_up_gateway.get_operations_by_source(
            StockUpSourceType.TRANSPORT_BOX, box.id
        )

        if not operations:
            logger.warning(
                'Box %d (%s) has no StockUpOperations, marking as Error',
                box.id, box.code,
            )
            self._fail(box, 'No stock-up operations found for this box')
            return _BoxOutcome.FAILED

        failed = [
            op for op in operations
            if op.state == StockUpOperationState.FAILED
        ]
        if all(op.state == StockUpOperationState.COMPLETED
               for op in operations):
            logger.info(
                'All %d stock-up operations for box %d (%s) completed, '
                'marking as Stocked',
                len(operations), box.id, box.code,
            )
            box.to_pick(self._clock(), SYSTEM_USER)
            self._save(box, TransportBoxState.RECEIVED)
            return _BoxOutcome.COMPLETED

        if failed:
            documents = ', '.join(op.document_number for op in failed)
            logger.warning(
                'Box %d (%s) has %d failed stock-up operations, '
                'marking as Error',
                box.id, box.code, len(failed),
            )
            self._fail(
                box,
                f'{len(failed)} stock-up operation(s) failed. '
                f'Document numbers: {documents}',
            )
            return _BoxOutcome.FAILED

        logger.debug(
            'Box %d (%s) still has operations in progress, skipping',
            box.id, box.code,
        )
        return _BoxOutcome.SKIPPED

    def _fail(self, box: TransportBox, message: str) -> None:
        previous_state = box.state
        box.error(self._clock(), SYSTEM_USER, message)
        self._save(box, previous_state)

    def _save(
        self, box: TransportBox, previous_state: TransportBoxState
    ) -> None:
        self._repository.save(box)
        last_log = box.state_log[-1]
        self._event_publisher.publish(
            TransportBoxStateChangedEvent(
                box_id=box.id,
                box_code=box.code,
                previous_state=previous_state,
                new_state=box.state,
                user_name=SYSTEM_USER,
                description=last_log.description,
            )
        )
