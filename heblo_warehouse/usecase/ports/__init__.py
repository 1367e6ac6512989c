"""유스케이스 포트 인터페이스 (ABC).

infra 레이어에서 구현해야 하는 추상 인터페이스를 정의한다.
"""

from heblo_warehouse.usecase.ports.config_port import (
    AppConfig,
    CatalogCacheConfig,
    ConfigPort,
    JobConfig,
    MqttConfig,
)
from heblo_warehouse.usecase.ports.event_publisher import EventPublisher
from heblo_warehouse.usecase.ports.merge_scheduler import (
    MergeCallback,
    MergeScheduler,
)
from heblo_warehouse.usecase.ports.stock_up_gateway import StockUpGateway
from heblo_warehouse.usecase.ports.transport_box_repository import (
    ACTIVE_BOX_STATES,
    TransportBoxRepository,
)

__all__ = [
    'ACTIVE_BOX_STATES',
    'AppConfig',
    'CatalogCacheConfig',
    'ConfigPort',
    'EventPublisher',
    'JobConfig',
    'MergeCallback',
    'MergeScheduler',
    'MqttConfig',
    'StockUpGateway',
    'TransportBoxRepository',
]
