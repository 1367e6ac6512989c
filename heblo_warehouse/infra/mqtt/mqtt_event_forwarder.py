"""박스 상태 변경 이벤트를 MQTT로 전달하는 구독자."""

from __future__ import annotations

import logging

from heblo_warehouse.domain.events.transport_events import (
    TransportBoxStateChangedEvent,
)
from heblo_warehouse.infra.mqtt.event_serializer import serialize_event
from heblo_warehouse.infra.mqtt.mqtt_client import MqttClient
from heblo_warehouse.usecase.ports.event_publisher import EventPublisher

logger = logging.getLogger(__name__)


class MqttEventForwarder:
    """이벤트 버스의 상태 변경 이벤트를 MQTT 토픽으로 발행한다.

    토픽: {topic_prefix}/transport_boxes/{box_id}/state (QoS 1)
    발행 실패는 로깅만 하며 유스케이스로 전파하지 않는다.

    Args:
        mqtt_client: 발행에 쓸 MQTT 클라이언트.
        topic_prefix: 토픽 prefix.
    """

    def __init__(self, mqtt_client: MqttClient, topic_prefix: str) -> None:
        self._mqtt = mqtt_client
        self._prefix = topic_prefix.rstrip('/')

    def attach(self, event_publisher: EventPublisher) -> None:
        """이벤트 버스에 구독을 등록한다."""
        event_publisher.subscribe(
            TransportBoxStateChangedEvent, self._on_state_changed
        )
        logger.info(
            'Forwarding transport box state changes to %s/transport_boxes',
            self._prefix,
        )

    def topic_for(self, box_id: int) -> str:
        return f'{self._prefix}/transport_boxes/{box_id}/state'

    def _on_state_changed(self, event: TransportBoxStateChangedEvent) -> None:
        topic = self.topic_for(event.box_id)
        try:
            published = self._mqtt.publish(
                topic, serialize_event(event), qos=1
            )
        except Exception:
            logger.exception('Failed to forward state change to %s', topic)
            return
        if published:
            logger.debug(
                'Forwarded %s -> %s for box %d',
                event.previous_state, event.new_state, event.box_id,
            )
