"""운송 박스 생성/품목 편집 유스케이스."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
import logging

from heblo_warehouse.domain.entities.transport_box import TransportBox
from heblo_warehouse.domain.entities.transport_box_item import (
    TransportBoxItem,
)
from heblo_warehouse.domain.exceptions import (
    TransportBoxNotFoundError,
    TransportBoxValidationError,
)
from heblo_warehouse.usecase.ports.transport_box_repository import (
    TransportBoxRepository,
)

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(UTC)


class EditTransportBox:
    """새 박스 생성과 Opened 박스의 품목 추가/삭제.

    품목 수량은 0보다 커야 한다. 수량이 없는 품목은
    수령 시 입고 작업을 만들 수 없기 때문이다.

    Args:
        repository: 운송 박스 저장소.
        clock: 현재 시각 공급자 (UTC).
    """

    def __init__(
        self,
        repository: TransportBoxRepository,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._repository = repository
        self._clock = clock

    def create(
        self, user_name: str, description: str | None = None
    ) -> TransportBox:
        """New 상태의 빈 박스를 만들어 저장소에 추가한다."""
        box = TransportBox(creation_time=self._clock(), creator_id=user_name)
        box.description = description
        self._repository.add(box)
        logger.info('Transport box %d created by %s', box.id, user_name)
        return box

    def add_item(
        self,
        box_id: int,
        product_code: str,
        product_name: str,
        amount: float,
        user_name: str,
    ) -> TransportBoxItem:
        """박스에 품목을 추가한다.

        Raises:
            TransportBoxNotFoundError: 박스가 없을 때.
            TransportBoxValidationError: 제품 코드가 비었거나 수량이 0 이하일 때.
            InvalidStateTransitionError: 박스가 Opened가 아닐 때.
        """
        if not product_code or not product_code.strip():
            raise TransportBoxValidationError('Product code is required')
        if not amount > 0:
            raise TransportBoxValidationError(
                f'Amount of {product_code} must be positive, got {amount}'
            )

        box = self._get(box_id)
        now = self._clock()
        item = box.add_item(
            product_code.strip(), product_name, amount, now, user_name
        )
        self._touch(box, user_name, now)
        logger.info(
            'Added %s x%s to box %d', item.product_code, amount, box_id
        )
        return item

    def delete_item(
        self, box_id: int, item_id: int, user_name: str
    ) -> TransportBoxItem | None:
        """박스에서 품목을 삭제한다. 없는 품목 ID면 None."""
        box = self._get(box_id)
        removed = box.delete_item(item_id)
        if removed is None:
            logger.debug('Box %d has no item %d', box_id, item_id)
            return None

        self._touch(box, user_name, self._clock())
        logger.info(
            'Removed item %d (%s) from box %d',
            item_id, removed.product_code, box_id,
        )
        return removed

    def _get(self, box_id: int) -> TransportBox:
        box = self._repository.get_by_id(box_id)
        if box is None:
            raise TransportBoxNotFoundError(
                f'Transport box [{box_id}] not found'
            )
        return box

    def _touch(
        self, box: TransportBox, user_name: str, now: datetime
    ) -> None:
        box.last_modification_time = now
        box.last_modifier_id = user_name
        self._repository.save(box)
