"""박스 저장소 인프라 (TransportBoxRepository 구현)."""

from heblo_warehouse.infra.repository.in_memory_transport_box_repository import (  # noqa: E501
    InMemoryTransportBoxRepository,
)

__all__ = ['InMemoryTransportBoxRepository']
