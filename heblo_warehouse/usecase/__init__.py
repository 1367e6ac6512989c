"""Heblo 창고 유스케이스 레이어.

도메인 로직을 포트를 통해 조율하는 애플리케이션 서비스를 정의한다.
domain 레이어만 의존하며, infra 레이어 의존성은 없다.
"""

from heblo_warehouse.usecase.change_transport_box_state import (
    ChangeTransportBoxState,
)
from heblo_warehouse.usecase.complete_received_boxes import (
    CompleteReceivedBoxes,
    CompleteReceivedBoxesResult,
)
from heblo_warehouse.usecase.edit_transport_box import EditTransportBox

__all__ = [
    'ChangeTransportBoxState',
    'CompleteReceivedBoxes',
    'CompleteReceivedBoxesResult',
    'EditTransportBox',
]
