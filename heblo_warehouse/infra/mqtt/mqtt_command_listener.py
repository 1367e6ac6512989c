"""MQTT 명령 토픽 구독자.

명령 토픽의 JSON 메시지를 디코딩해 핸들러에 넘기고
결과 또는 거부 사유를 응답 토픽으로 발행한다.
"""

from __future__ import annotations

from collections.abc import Callable
import json
import logging
from typing import Any

from heblo_warehouse.domain.exceptions import DomainError
from heblo_warehouse.infra.mqtt.event_serializer import serialize_message
from heblo_warehouse.infra.mqtt.mqtt_client import MqttClient

logger = logging.getLogger(__name__)

CommandHandler = Callable[[dict[str, Any]], dict[str, Any]]


class MqttCommandListener:
    """운송 박스 명령 토픽을 핸들러에 연결한다.

    - 명령 토픽: {topic_prefix}/transport_boxes/commands (QoS 1)
    - 응답 토픽: {topic_prefix}/transport_boxes/responses (QoS 1)

    도메인 검증 실패와 잘못된 페이로드는 ok=false 응답으로 돌려준다.
    요청의 requestId는 응답에 그대로 실린다.

    Args:
        mqtt_client: 구독/발행에 쓸 MQTT 클라이언트.
        topic_prefix: 토픽 prefix.
        handler: 명령 dict를 받아 응답 dict를 돌려주는 함수.
    """

    def __init__(
        self,
        mqtt_client: MqttClient,
        topic_prefix: str,
        handler: CommandHandler,
    ) -> None:
        self._mqtt = mqtt_client
        self._prefix = topic_prefix.rstrip('/')
        self._handler = handler

    @property
    def command_topic(self) -> str:
        return f'{self._prefix}/transport_boxes/commands'

    @property
    def response_topic(self) -> str:
        return f'{self._prefix}/transport_boxes/responses'

    def start(self) -> None:
        """명령 토픽을 구독한다."""
        self._mqtt.subscribe(self.command_topic, self._on_command, qos=1)

    def _on_command(self, topic: str, payload: bytes) -> None:
        try:
            command = json.loads(payload.decode('utf-8'))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning('Malformed command on %s: %s', topic, e)
            self._respond({
                'ok': False,
                'error': 'MalformedCommand',
                'message': str(e),
            })
            return

        if not isinstance(command, dict):
            logger.warning('Command on %s is not a JSON object', topic)
            self._respond({
                'ok': False,
                'error': 'MalformedCommand',
                'message': 'Command must be a JSON object',
            })
            return

        name = command.get('command')
        try:
            result = self._handler(command)
        except (DomainError, ValueError) as e:
            logger.warning('Command %s rejected: %s', name, e)
            response = {
                'ok': False,
                'error': type(e).__name__,
                'message': str(e),
            }
        else:
            response = {'ok': True, **result}

        response['command'] = name
        if 'requestId' in command:
            response['requestId'] = command['requestId']
        self._respond(response)

    def _respond(self, response: dict[str, Any]) -> None:
        self._mqtt.publish(
            self.response_topic, serialize_message(response), qos=1
        )
