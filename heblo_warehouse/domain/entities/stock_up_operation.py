"""입고(stock-up) 작업 엔티티."""

from dataclasses import dataclass

from heblo_warehouse.domain.enums import (
    StockUpOperationState,
    StockUpSourceType,
)
from heblo_warehouse.domain.exceptions import StockUpError


def make_document_number(box_id: int, product_code: str) -> str:
    """박스 품목의 입고 문서 번호를 만든다 (BOX-000042-AKL001)."""
    return f'BOX-{box_id:06d}-{product_code}'


@dataclass
class StockUpOperation:
    """박스 품목 1건의 창고 입고 작업.

    Args:
        document_number: 입고 문서 번호 (중복 방지 키).
        product_code: 제품 코드.
        amount: 입고 수량.
        source_type: 작업 발생 원천.
        source_id: 원천 엔티티 ID (박스 ID 등).
        state: 현재 작업 상태.
        error_message: 실패 사유.
    """

    document_number: str
    product_code: str
    amount: float
    source_type: StockUpSourceType
    source_id: int
    state: StockUpOperationState = StockUpOperationState.PENDING
    error_message: str = ''

    @property
    def is_finished(self) -> bool:
        """완료 또는 실패로 종결되었는지 여부."""
        return self.state in (
            StockUpOperationState.COMPLETED,
            StockUpOperationState.FAILED,
        )

    def submit(self) -> None:
        """작업을 제출 상태로 전이한다."""
        self._transition_to(StockUpOperationState.SUBMITTED)

    def complete(self) -> None:
        """작업을 완료 상태로 전이한다."""
        self._transition_to(StockUpOperationState.COMPLETED)

    def fail(self, error_message: str) -> None:
        """작업을 실패 상태로 전이한다.

        Args:
            error_message: 실패 사유.
        """
        self._transition_to(StockUpOperationState.FAILED)
        self.error_message = error_message

    def _transition_to(self, new_state: StockUpOperationState) -> None:
        valid_transitions: dict[
            StockUpOperationState, set[StockUpOperationState]
        ] = {
            StockUpOperationState.PENDING: {
                StockUpOperationState.SUBMITTED,
                StockUpOperationState.FAILED,
            },
            StockUpOperationState.SUBMITTED: {
                StockUpOperationState.COMPLETED,
                StockUpOperationState.FAILED,
            },
            StockUpOperationState.COMPLETED: set(),
            StockUpOperationState.FAILED: set(),
        }

        if new_state not in valid_transitions[self.state]:
            raise StockUpError(
                f'StockUpOperation [{self.document_number}]: '
                f'{self.state} -> {new_state} 전이 불가'
            )
        self.state = new_state
