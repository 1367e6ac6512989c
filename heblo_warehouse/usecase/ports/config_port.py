"""설정 포트 인터페이스.

애플리케이션 설정의 로딩을 추상화한다.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass(frozen=True)
class CatalogCacheConfig:
    """카탈로그 캐시/병합 스케줄러 설정.

    Args:
        enable_background_merge: 무효화를 디바운스 병합으로 처리할지 여부.
        debounce_delay_sec: 마지막 무효화 후 병합까지 대기 시간 (초).
        max_merge_interval_sec: 첫 미처리 무효화 후 강제 병합까지 최대 시간 (초).
        cache_validity_period_sec: 현재 스냅샷 유효 기간 (초).
        allow_stale_data_during_merge: 병합 중 이전 스냅샷 제공 여부.
        stale_data_retention_period_sec: 이전 스냅샷 보존 기간 (초).
    """

    enable_background_merge: bool = True
    debounce_delay_sec: float = 5.0
    max_merge_interval_sec: float = 1800.0
    cache_validity_period_sec: float = 300.0
    allow_stale_data_during_merge: bool = True
    stale_data_retention_period_sec: float = 3600.0


@dataclass(frozen=True)
class JobConfig:
    """반복 작업 설정.

    Args:
        complete_received_boxes_enabled: 수령 박스 완료 작업 활성화 여부.
        complete_received_boxes_interval_sec: 실행 주기 (초).
    """

    complete_received_boxes_enabled: bool = True
    complete_received_boxes_interval_sec: float = 120.0


@dataclass(frozen=True)
class MqttConfig:
    """MQTT 브로커 접속 설정.

    Args:
        enabled: 상태 변경 이벤트 전달 활성화 여부.
        broker_host: 브로커 호스트 주소.
        broker_port: 브로커 포트 번호.
        keepalive_sec: 연결 유지 간격 (초).
        reconnect_max_delay_sec: 재연결 최대 대기 시간 (초).
        topic_prefix: 발행 토픽 prefix.
    """

    enabled: bool = False
    broker_host: str = 'localhost'
    broker_port: int = 1883
    keepalive_sec: int = 60
    reconnect_max_delay_sec: int = 60
    topic_prefix: str = 'heblo/warehouse'


@dataclass(frozen=True)
class AppConfig:
    """애플리케이션 전체 설정."""

    catalog_cache: CatalogCacheConfig = field(
        default_factory=CatalogCacheConfig
    )
    jobs: JobConfig = field(default_factory=JobConfig)
    mqtt: MqttConfig = field(default_factory=MqttConfig)


class ConfigPort(ABC):
    """설정 로더 인터페이스."""

    @abstractmethod
    def load(self) -> AppConfig:
        """설정을 로드한다.

        Returns:
            AppConfig 인스턴스.
        """
