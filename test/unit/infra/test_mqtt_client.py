"""MqttClient 유닛 테스트."""

from unittest.mock import MagicMock, patch

import paho.mqtt.client as mqtt
import pytest

from heblo_warehouse.infra.mqtt.mqtt_client import MqttClient
from heblo_warehouse.usecase.ports.config_port import MqttConfig


@pytest.fixture
def config():
    """Create test MQTT configuration."""
    return MqttConfig(
        enabled=True,
        broker_host='localhost',
        broker_port=1883,
        keepalive_sec=60,
        reconnect_max_delay_sec=30,
    )


@pytest.fixture
def paho():
    with patch(
        'heblo_warehouse.infra.mqtt.mqtt_client.mqtt.Client'
    ) as MockPaho:
        mock_paho = MagicMock()
        MockPaho.return_value = mock_paho
        yield MockPaho, mock_paho


@pytest.fixture
def client(config, paho):
    return MqttClient(config, client_id='test')


class TestConstruction:
    """paho 클라이언트 생성 테스트."""

    def test_uses_callback_api_v2(self, client, paho):
        """VERSION2 콜백 API로 생성한다."""
        MockPaho, _ = paho
        kwargs = MockPaho.call_args.kwargs
        assert kwargs['callback_api_version'] == (
            mqtt.CallbackAPIVersion.VERSION2
        )
        assert kwargs['client_id'] == 'test'

    def test_reconnect_delay(self, client, paho):
        """재연결 최대 대기 시간을 설정한다."""
        _, mock_paho = paho
        mock_paho.reconnect_delay_set.assert_called_once_with(
            min_delay=1, max_delay=30,
        )


class TestConnection:
    """연결/해제 테스트."""

    def test_connect_starts_loop(self, client, paho):
        """connect가 브로커 연결 후 네트워크 루프를 시작한다."""
        _, mock_paho = paho
        client.connect()

        mock_paho.connect.assert_called_once_with(
            host='localhost', port=1883, keepalive=60,
        )
        mock_paho.loop_start.assert_called_once()

    def test_on_connect_success(self, client):
        """연결 성공 콜백이 연결 상태를 갱신한다."""
        client._on_connect(None, None, {}, MagicMock(is_failure=False), None)
        assert client.is_connected

    def test_on_connect_failure(self, client):
        """연결 실패 시 연결 상태가 False로 유지된다."""
        client._on_connect(None, None, {}, MagicMock(is_failure=True), None)
        assert not client.is_connected

    def test_on_disconnect(self, client):
        """연결 해제 콜백이 연결 상태를 갱신한다."""
        client._on_connect(None, None, {}, MagicMock(is_failure=False), None)
        client._on_disconnect(
            None, None, {}, MagicMock(is_failure=True), None
        )
        assert not client.is_connected

    def test_disconnect(self, client, paho):
        """disconnect가 루프를 멈추고 연결을 끊는다."""
        _, mock_paho = paho
        client.disconnect()

        mock_paho.loop_stop.assert_called_once()
        mock_paho.disconnect.assert_called_once()
        assert not client.is_connected


class TestPublish:
    """발행 테스트."""

    def test_publish_encodes_payload(self, client, paho):
        """페이로드를 UTF-8로 인코딩해 발행한다."""
        _, mock_paho = paho
        mock_paho.publish.return_value = MagicMock(rc=mqtt.MQTT_ERR_SUCCESS)

        assert client.publish('a/b', '{"x": 1}', qos=1) is True
        mock_paho.publish.assert_called_once_with(
            'a/b', b'{"x": 1}', qos=1, retain=False,
        )

    def test_publish_failure_returns_false(self, client, paho):
        """발행 요청 실패 시 False를 반환한다."""
        _, mock_paho = paho
        mock_paho.publish.return_value = MagicMock(
            rc=mqtt.MQTT_ERR_NO_CONN
        )

        assert client.publish('a/b', '{}') is False


class TestSubscribe:
    """구독/수신 테스트."""

    def test_subscribe_stores_callback_and_qos(self, client, paho):
        """subscribe가 callback과 QoS를 함께 저장한다."""
        _, mock_paho = paho
        cb = MagicMock()
        client.subscribe('heblo/cmd', cb, qos=1)

        assert client._subscriptions['heblo/cmd'] == (cb, 1)
        mock_paho.subscribe.assert_called_once_with('heblo/cmd', qos=1)

    def test_unsubscribe_removes_entry(self, client):
        """unsubscribe가 저장된 항목을 제거한다."""
        client.subscribe('heblo/cmd', MagicMock())
        client.unsubscribe('heblo/cmd')
        assert 'heblo/cmd' not in client._subscriptions

    def test_reconnect_restores_subscriptions(self, client, paho):
        """재연결 시 저장된 QoS로 재구독한다."""
        _, mock_paho = paho
        client.subscribe('topic/a', MagicMock(), qos=0)
        client.subscribe('topic/b', MagicMock(), qos=1)
        mock_paho.subscribe.reset_mock()

        client._on_connect(None, None, {}, MagicMock(is_failure=False), None)

        topics_qos = {
            c.args[0]: c.kwargs['qos']
            for c in mock_paho.subscribe.call_args_list
        }
        assert topics_qos == {'topic/a': 0, 'topic/b': 1}

    def test_message_dispatched_to_callback(self, client):
        """수신 메시지를 토픽의 callback으로 전달한다."""
        cb = MagicMock()
        client.subscribe('heblo/cmd', cb)

        client._on_message(
            None, None, MagicMock(topic='heblo/cmd', payload=b'{}')
        )
        cb.assert_called_once_with('heblo/cmd', b'{}')

    def test_handler_error_is_logged(self, client, caplog):
        """callback 예외는 로깅하고 전파하지 않는다."""
        client.subscribe('heblo/cmd', MagicMock(side_effect=ValueError('x')))

        client._on_message(
            None, None, MagicMock(topic='heblo/cmd', payload=b'{}')
        )
        assert 'Error in MQTT message handler' in caplog.text

    def test_unknown_topic_ignored(self, client):
        """구독하지 않은 토픽은 무시한다."""
        cb = MagicMock()
        client.subscribe('heblo/cmd', cb)
        client._on_message(
            None, None, MagicMock(topic='other', payload=b'{}')
        )
        cb.assert_not_called()
