"""공통 테스트 fixture."""

from datetime import datetime, timezone

import pytest

from heblo_warehouse.domain.entities.transport_box import TransportBox
from heblo_warehouse.domain.enums import TransportBoxState
from heblo_warehouse.infra.event.in_memory_event_publisher import (
    InMemoryEventPublisher,
)
from heblo_warehouse.infra.repository.in_memory_transport_box_repository import (  # noqa: E501
    InMemoryTransportBoxRepository,
)
from heblo_warehouse.infra.stock.in_memory_stock_up_gateway import (
    InMemoryStockUpGateway,
)
from heblo_warehouse.usecase.ports.config_port import (
    AppConfig,
    CatalogCacheConfig,
    JobConfig,
    MqttConfig,
)

NOW = datetime(2024, 5, 1, 8, 30, tzinfo=timezone.utc)
USER = 'tester'


def make_box(
    state: TransportBoxState = TransportBoxState.NEW,
    box_id: int = 1,
    code: str = 'B001',
    items: int = 1,
) -> TransportBox:
    """정상 전이 경로를 밟아 원하는 상태의 박스를 만든다."""
    box = TransportBox(box_id=box_id, creation_time=NOW, creator_id=USER)
    if state == TransportBoxState.NEW:
        return box

    box.open(code, NOW, USER)
    for i in range(items):
        box.add_item(f'AKL{i + 1:03d}', f'Product {i + 1}', 2, NOW, USER)

    if state == TransportBoxState.OPENED:
        return box
    if state == TransportBoxState.CLOSED:
        box.reset(NOW, USER)
        box.close(NOW, USER)
        return box
    if state == TransportBoxState.ERROR:
        box.error(NOW, USER, 'boom')
        return box
    if state == TransportBoxState.RESERVE:
        box.to_reserve(NOW, USER, 'Kumbal')
        return box

    box.to_transit(NOW, USER)
    if state == TransportBoxState.IN_TRANSIT:
        return box

    box.receive(NOW, USER)
    if state == TransportBoxState.RECEIVED:
        return box

    box.to_pick(NOW, USER)
    assert state == TransportBoxState.STOCKED
    return box


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def repository():
    return InMemoryTransportBoxRepository()


@pytest.fixture
def stock_up_gateway():
    return InMemoryStockUpGateway()


@pytest.fixture
def publisher():
    return InMemoryEventPublisher()


@pytest.fixture
def fast_cache_config():
    return CatalogCacheConfig(
        debounce_delay_sec=0.05,
        max_merge_interval_sec=60.0,
        cache_validity_period_sec=300.0,
    )


@pytest.fixture
def sample_config():
    return AppConfig(
        catalog_cache=CatalogCacheConfig(debounce_delay_sec=1.0),
        jobs=JobConfig(complete_received_boxes_interval_sec=30.0),
        mqtt=MqttConfig(enabled=True, broker_host='broker.local'),
    )


@pytest.fixture
def box_factory():
    return make_box
