"""운송 박스 품목 엔티티."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class TransportBoxItem:
    """박스에 담긴 제품 한 줄.

    박스가 Opened 상태일 때만 추가/삭제되며 생성 후 수정되지 않는다.

    Args:
        item_id: 박스 내 품목 ID.
        product_code: 제품 코드.
        product_name: 제품명.
        amount: 수량.
        date_added: 추가 시각.
        user_added: 추가한 사용자.
    """

    item_id: int
    product_code: str
    product_name: str
    amount: float
    date_added: datetime
    user_added: str
