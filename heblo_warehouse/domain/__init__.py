"""Heblo 창고 도메인 레이어."""
