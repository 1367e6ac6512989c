"""YAML 파일 기반 설정 로더 구현체."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from heblo_warehouse.usecase.ports.config_port import (
    AppConfig,
    CatalogCacheConfig,
    ConfigPort,
    JobConfig,
    MqttConfig,
)

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG_PATH = (
    Path(__file__).resolve().parent.parent.parent
    / 'config'
    / 'config.yaml'
)


class YamlConfigLoader(ConfigPort):
    """ConfigPort의 YAML 파일 구현체.

    YAML 파일에서 설정을 읽어 AppConfig로 변환한다.
    파일이 없거나 형식이 잘못되면 기본값을 사용한다.

    Args:
        config_path: YAML 설정 파일 경로. None이면 기본 경로 사용.
    """

    def __init__(self, config_path: Path | str | None = None) -> None:
        self._path = (
            Path(config_path) if config_path else _DEFAULT_CONFIG_PATH
        )

    def load(self) -> AppConfig:
        """YAML 파일에서 설정을 로드한다."""
        params = self._extract_params(self._read_yaml())

        cache_data = params.get('catalog_cache') or {}
        jobs_data = params.get('jobs') or {}
        mqtt_data = params.get('mqtt') or {}

        cache_defaults = CatalogCacheConfig()
        job_defaults = JobConfig()
        mqtt_defaults = MqttConfig()

        config = AppConfig(
            catalog_cache=CatalogCacheConfig(
                enable_background_merge=bool(cache_data.get(
                    'enable_background_merge',
                    cache_defaults.enable_background_merge,
                )),
                debounce_delay_sec=float(cache_data.get(
                    'debounce_delay_sec', cache_defaults.debounce_delay_sec
                )),
                max_merge_interval_sec=float(cache_data.get(
                    'max_merge_interval_sec',
                    cache_defaults.max_merge_interval_sec,
                )),
                cache_validity_period_sec=float(cache_data.get(
                    'cache_validity_period_sec',
                    cache_defaults.cache_validity_period_sec,
                )),
                allow_stale_data_during_merge=bool(cache_data.get(
                    'allow_stale_data_during_merge',
                    cache_defaults.allow_stale_data_during_merge,
                )),
                stale_data_retention_period_sec=float(cache_data.get(
                    'stale_data_retention_period_sec',
                    cache_defaults.stale_data_retention_period_sec,
                )),
            ),
            jobs=JobConfig(
                complete_received_boxes_enabled=bool(jobs_data.get(
                    'complete_received_boxes_enabled',
                    job_defaults.complete_received_boxes_enabled,
                )),
                complete_received_boxes_interval_sec=float(jobs_data.get(
                    'complete_received_boxes_interval_sec',
                    job_defaults.complete_received_boxes_interval_sec,
                )),
            ),
            mqtt=MqttConfig(
                enabled=bool(mqtt_data.get('enabled', mqtt_defaults.enabled)),
                broker_host=mqtt_data.get(
                    'broker_host', mqtt_defaults.broker_host
                ),
                broker_port=int(mqtt_data.get(
                    'broker_port', mqtt_defaults.broker_port
                )),
                keepalive_sec=int(mqtt_data.get(
                    'keepalive_sec', mqtt_defaults.keepalive_sec
                )),
                reconnect_max_delay_sec=int(mqtt_data.get(
                    'reconnect_max_delay_sec',
                    mqtt_defaults.reconnect_max_delay_sec,
                )),
                topic_prefix=mqtt_data.get(
                    'topic_prefix', mqtt_defaults.topic_prefix
                ),
            ),
        )

        logger.info('Config loaded from %s', self._path)
        return config

    def _read_yaml(self) -> dict[str, Any]:
        """YAML 파일을 dict로 읽는다."""
        if not self._path.exists():
            logger.warning(
                'Config file not found: %s, using defaults', self._path
            )
            return {}

        with open(self._path, encoding='utf-8') as f:
            data = yaml.safe_load(f)

        if not isinstance(data, dict):
            logger.warning('Invalid YAML format, using defaults')
            return {}

        return data

    def _extract_params(self, raw: dict[str, Any]) -> dict[str, Any]:
        """heblo_warehouse 루트가 있으면 그 아래를, 없으면 전체를 쓴다."""
        params = raw.get('heblo_warehouse', raw)
        return params if isinstance(params, dict) else {}
