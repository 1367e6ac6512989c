"""Heblo 창고 워커 진입점.

실행: heblo_worker -c config.yaml
"""

from __future__ import annotations

import argparse
from collections import Counter
import logging
import sys
import threading

from heblo_warehouse.domain.enums import TransportBoxState
from heblo_warehouse.domain.events.transport_events import (
    TransportBoxStateChangedEvent,
)
from heblo_warehouse.infra.cache.catalog_cache import CatalogCache
from heblo_warehouse.infra.config.yaml_config_loader import YamlConfigLoader
from heblo_warehouse.infra.event.in_memory_event_publisher import (
    InMemoryEventPublisher,
)
from heblo_warehouse.infra.mqtt.mqtt_client import MqttClient
from heblo_warehouse.infra.mqtt.mqtt_command_listener import (
    MqttCommandListener,
)
from heblo_warehouse.infra.mqtt.mqtt_event_forwarder import (
    MqttEventForwarder,
)
from heblo_warehouse.infra.repository.in_memory_transport_box_repository import (  # noqa: E501
    InMemoryTransportBoxRepository,
)
from heblo_warehouse.infra.scheduler.catalog_merge_scheduler import (
    ThreadingCatalogMergeScheduler,
)
from heblo_warehouse.infra.stock.in_memory_stock_up_gateway import (
    InMemoryStockUpGateway,
)
from heblo_warehouse.presentation.transport_box_commands import (
    TransportBoxCommandHandler,
)
from heblo_warehouse.usecase.change_transport_box_state import (
    ChangeTransportBoxState,
)
from heblo_warehouse.usecase.complete_received_boxes import (
    CompleteReceivedBoxes,
    TRANSPORT_DATA_SOURCE,
)
from heblo_warehouse.usecase.edit_transport_box import EditTransportBox
from heblo_warehouse.usecase.ports.transport_box_repository import (
    TransportBoxRepository,
)

logger = logging.getLogger('heblo_worker')

# 창고 밖에서 이동/보관 중인 수량으로 집계하는 상태
_TRANSPORT_STATES = (
    TransportBoxState.OPENED,
    TransportBoxState.IN_TRANSIT,
    TransportBoxState.RESERVE,
    TransportBoxState.RECEIVED,
)


def _transport_catalog(repository: TransportBoxRepository) -> list[dict]:
    """운송 박스 품목을 제품 코드별 수량으로 합친다."""
    totals: Counter[str] = Counter()
    for state in _TRANSPORT_STATES:
        for box in repository.list_by_state(state):
            for item in box.items:
                totals[item.product_code] += item.amount
    return [
        {'product_code': code, 'transport_amount': amount}
        for code, amount in sorted(totals.items())
    ]


def _run_jobs(
    job: CompleteReceivedBoxes,
    cache: CatalogCache,
    box_lock: threading.Lock,
    interval: float,
    stop_event: threading.Event,
) -> None:
    """stop_event가 설정될 때까지 수령 박스 완료 작업을 반복한다."""
    while not stop_event.is_set():
        try:
            with box_lock:
                result = job.execute()
        except Exception:
            logger.exception('CompleteReceivedBoxes run failed')
        else:
            logger.info(
                'CompleteReceivedBoxes: completed=%d failed=%d skipped=%d',
                result.completed, result.failed, result.skipped,
            )
            logger.info(
                'Transport catalog: %d product(s) in transport',
                len(cache.get_all()),
            )
        stop_event.wait(interval)


def main(argv: list[str] | None = None) -> None:
    """워커를 시작한다.

    Args:
        argv: 커맨드 라인 인자.
    """
    if argv is None:
        argv = sys.argv

    logging.basicConfig(
        level=logging.INFO,
        format='[%(name)s] %(levelname)s: %(message)s',
    )

    parser = argparse.ArgumentParser(
        prog='heblo_worker',
        description='Heblo warehouse transport box worker',
    )
    parser.add_argument(
        '-c', '--config_file', type=str, default=None,
        help='Path to the config.yaml file',
    )
    args = parser.parse_args(argv[1:])

    # 1. 설정 로드
    config = YamlConfigLoader(args.config_file).load()

    # 2. 저장소/게이트웨이/이벤트 버스
    repository = InMemoryTransportBoxRepository()
    stock_up_gateway = InMemoryStockUpGateway()
    publisher = InMemoryEventPublisher()

    # 3. 병합 스케줄러 + 카탈로그 캐시
    scheduler = ThreadingCatalogMergeScheduler(config.catalog_cache)
    cache = CatalogCache(
        lambda: _transport_catalog(repository),
        scheduler,
        config.catalog_cache,
    )
    publisher.subscribe(
        TransportBoxStateChangedEvent,
        lambda event: cache.invalidate(TRANSPORT_DATA_SOURCE),
    )

    # 4. 유스케이스 + 명령 디스패처
    box_lock = threading.Lock()
    commands = TransportBoxCommandHandler(
        repository,
        ChangeTransportBoxState(repository, stock_up_gateway, publisher),
        EditTransportBox(repository),
        stock_up_gateway,
        cache,
        lock=box_lock,
    )

    # 5. MQTT 명령 수신 + 상태 변경 전달
    mqtt_client: MqttClient | None = None
    if config.mqtt.enabled:
        mqtt_client = MqttClient(config.mqtt, client_id='heblo_worker')
        MqttEventForwarder(
            mqtt_client, config.mqtt.topic_prefix
        ).attach(publisher)
        listener = MqttCommandListener(
            mqtt_client, config.mqtt.topic_prefix, commands.handle
        )
        listener.start()
        mqtt_client.connect()
        logger.info(
            'Accepting commands on %s (%s)',
            listener.command_topic, ', '.join(commands.command_names),
        )
    else:
        logger.warning(
            'MQTT is disabled, the worker accepts no commands and only '
            'runs the recurring jobs'
        )

    # 6. 수령 박스 완료 반복 작업
    job = CompleteReceivedBoxes(
        repository,
        stock_up_gateway,
        publisher,
        merge_scheduler=scheduler,
        enabled=config.jobs.complete_received_boxes_enabled,
    )
    interval = config.jobs.complete_received_boxes_interval_sec
    stop_event = threading.Event()

    logger.info(
        'Worker started (complete_received_boxes every %.0fs)', interval
    )
    try:
        _run_jobs(job, cache, box_lock, interval, stop_event)
    except KeyboardInterrupt:
        logger.info('Keyboard interrupt received')
    finally:
        scheduler.shutdown()
        if mqtt_client is not None:
            mqtt_client.disconnect()


if __name__ == '__main__':
    main(sys.argv)
