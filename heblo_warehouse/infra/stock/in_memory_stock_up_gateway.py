"""인메모리 입고 작업 게이트웨이 구현체."""

import logging
import threading

from heblo_warehouse.domain.entities.stock_up_operation import (
    StockUpOperation,
)
from heblo_warehouse.domain.enums import StockUpSourceType
from heblo_warehouse.domain.exceptions import StockUpError
from heblo_warehouse.usecase.ports.stock_up_gateway import StockUpGateway

logger = logging.getLogger(__name__)


class InMemoryStockUpGateway(StockUpGateway):
    """StockUpGateway의 인메모리 구현체.

    문서 번호를 키로 작업을 보관하여 같은 품목의 중복 입고를 막는다.
    작업 상태는 반환된 StockUpOperation을 통해 외부 처리기가 진행시킨다.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._operations: dict[str, StockUpOperation] = {}

    def create_operation(
        self,
        document_number: str,
        product_code: str,
        amount: float,
        source_type: StockUpSourceType,
        source_id: int,
    ) -> StockUpOperation:
        if amount <= 0:
            raise StockUpError(
                f'StockUpOperation [{document_number}]: '
                f'amount must be positive, got {amount}'
            )

        with self._lock:
            existing = self._operations.get(document_number)
            if existing is not None:
                logger.debug(
                    'StockUpOperation %s already exists (%s)',
                    document_number, existing.state,
                )
                return existing

            operation = StockUpOperation(
                document_number=document_number,
                product_code=product_code,
                amount=amount,
                source_type=source_type,
                source_id=source_id,
            )
            self._operations[document_number] = operation
        return operation

    def get_operation(
        self, document_number: str
    ) -> StockUpOperation | None:
        with self._lock:
            return self._operations.get(document_number)

    def get_operations_by_source(
        self, source_type: StockUpSourceType, source_id: int
    ) -> list[StockUpOperation]:
        with self._lock:
            return [
                op for op in self._operations.values()
                if op.source_type == source_type
                and op.source_id == source_id
            ]

    def list_pending(self) -> list[StockUpOperation]:
        """아직 종결되지 않은 작업 목록."""
        with self._lock:
            return [
                op for op in self._operations.values()
                if not op.is_finished
            ]
