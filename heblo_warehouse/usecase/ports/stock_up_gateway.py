"""입고 처리 포트 인터페이스.

박스 품목의 창고 입고(stock-up) 작업 생성/조회를 추상화한다.
"""

from abc import ABC, abstractmethod

from heblo_warehouse.domain.entities.stock_up_operation import (
    StockUpOperation,
)
from heblo_warehouse.domain.enums import StockUpSourceType


class StockUpGateway(ABC):
    """입고 작업 관리 포트."""

    @abstractmethod
    def create_operation(
        self,
        document_number: str,
        product_code: str,
        amount: float,
        source_type: StockUpSourceType,
        source_id: int,
    ) -> StockUpOperation:
        """입고 작업을 Pending 상태로 생성한다.

        같은 문서 번호의 작업이 이미 있으면 기존 작업을 반환한다.

        Args:
            document_number: 입고 문서 번호.
            product_code: 제품 코드.
            amount: 수량.
            source_type: 작업 발생 원천.
            source_id: 원천 엔티티 ID.

        Raises:
            StockUpError: 작업 생성 실패 시.
        """

    @abstractmethod
    def get_operation(
        self, document_number: str
    ) -> StockUpOperation | None:
        """문서 번호로 입고 작업을 조회한다."""

    @abstractmethod
    def get_operations_by_source(
        self, source_type: StockUpSourceType, source_id: int
    ) -> list[StockUpOperation]:
        """원천별 입고 작업 목록을 조회한다.

        Args:
            source_type: 작업 발생 원천.
            source_id: 원천 엔티티 ID.
        """
