"""YamlConfigLoader 유닛 테스트."""

import pytest
import yaml

from heblo_warehouse.infra.config.yaml_config_loader import YamlConfigLoader
from heblo_warehouse.usecase.ports.config_port import (
    AppConfig,
    CatalogCacheConfig,
)


@pytest.fixture
def config_yaml(tmp_path):
    """임시 config.yaml 파일을 생성한다."""
    data = {
        'heblo_warehouse': {
            'catalog_cache': {
                'debounce_delay_sec': 2,
                'max_merge_interval_sec': 600,
                'allow_stale_data_during_merge': False,
            },
            'jobs': {
                'complete_received_boxes_enabled': False,
                'complete_received_boxes_interval_sec': 45,
            },
            'mqtt': {
                'enabled': True,
                'broker_host': '192.168.1.100',
                'broker_port': 1884,
                'topic_prefix': 'anela/heblo',
            },
        },
    }
    path = tmp_path / 'config.yaml'
    with open(path, 'w') as f:
        yaml.dump(data, f)
    return path


class TestYamlConfigLoader:
    """YamlConfigLoader 테스트."""

    def test_load_valid_config(self, config_yaml):
        """유효한 설정 파일을 로드한다."""
        config = YamlConfigLoader(config_yaml).load()

        assert config.catalog_cache.debounce_delay_sec == 2.0
        assert config.catalog_cache.max_merge_interval_sec == 600.0
        assert config.catalog_cache.allow_stale_data_during_merge is False
        assert config.jobs.complete_received_boxes_enabled is False
        assert config.jobs.complete_received_boxes_interval_sec == 45.0
        assert config.mqtt.enabled is True
        assert config.mqtt.broker_host == '192.168.1.100'
        assert config.mqtt.broker_port == 1884
        assert config.mqtt.topic_prefix == 'anela/heblo'

    def test_missing_keys_use_defaults(self, config_yaml):
        """지정하지 않은 값은 기본값을 사용한다."""
        config = YamlConfigLoader(config_yaml).load()

        defaults = CatalogCacheConfig()
        assert config.catalog_cache.cache_validity_period_sec == (
            defaults.cache_validity_period_sec
        )
        assert config.mqtt.keepalive_sec == 60

    def test_root_key_is_optional(self, tmp_path):
        """heblo_warehouse 루트 없이 바로 섹션을 둘 수 있다."""
        path = tmp_path / 'flat.yaml'
        path.write_text('catalog_cache:\n  debounce_delay_sec: 0.5\n')

        config = YamlConfigLoader(str(path)).load()

        assert config.catalog_cache.debounce_delay_sec == 0.5

    def test_missing_file_uses_defaults(self, tmp_path):
        """파일이 없으면 기본값을 사용한다."""
        config = YamlConfigLoader(tmp_path / 'nope.yaml').load()
        assert config == AppConfig()

    def test_non_mapping_yaml_uses_defaults(self, tmp_path):
        """매핑이 아닌 YAML은 기본값으로 대체한다."""
        path = tmp_path / 'list.yaml'
        path.write_text('- a\n- b\n')

        assert YamlConfigLoader(path).load() == AppConfig()

    def test_packaged_default_config(self):
        """패키지에 포함된 기본 설정 파일을 읽는다."""
        config = YamlConfigLoader().load()
        assert config.catalog_cache == CatalogCacheConfig()
        assert config.mqtt.enabled is True
