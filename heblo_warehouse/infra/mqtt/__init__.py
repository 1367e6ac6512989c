"""MQTT 통신 인프라 (상태 변경 이벤트 전달, 명령 수신)."""

from heblo_warehouse.infra.mqtt.mqtt_client import MqttClient
from heblo_warehouse.infra.mqtt.mqtt_command_listener import (
    MqttCommandListener,
)
from heblo_warehouse.infra.mqtt.mqtt_event_forwarder import (
    MqttEventForwarder,
)

__all__ = ['MqttClient', 'MqttCommandListener', 'MqttEventForwarder']
