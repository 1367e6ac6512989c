"""설정 로더 인프라 (ConfigPort 구현)."""
