"""프로세스 진입점."""
