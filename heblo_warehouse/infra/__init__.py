"""인프라 레이어: 포트 인터페이스의 구현체."""
