"""Heblo 창고 도메인 이벤트."""

from heblo_warehouse.domain.events.transport_events import (
    DomainEvent,
    TransportBoxStateChangedEvent,
)

__all__ = [
    'DomainEvent',
    'TransportBoxStateChangedEvent',
]
