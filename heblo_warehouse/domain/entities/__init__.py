"""Heblo 창고 도메인 엔티티."""

from heblo_warehouse.domain.entities.stock_up_operation import (
    StockUpOperation,
    make_document_number,
)
from heblo_warehouse.domain.entities.transport_box import TransportBox
from heblo_warehouse.domain.entities.transport_box_item import (
    TransportBoxItem,
)
from heblo_warehouse.domain.entities.transport_box_state_log import (
    TransportBoxStateLog,
)
from heblo_warehouse.domain.entities.transport_box_transitions import (
    TRANSITIONS,
    TransitionArgs,
    TransportBoxStateNode,
    TransportBoxTransition,
    allowed_sources,
)

__all__ = [
    'StockUpOperation',
    'TRANSITIONS',
    'TransitionArgs',
    'TransportBox',
    'TransportBoxItem',
    'TransportBoxStateLog',
    'TransportBoxStateNode',
    'TransportBoxTransition',
    'allowed_sources',
    'make_document_number',
]
