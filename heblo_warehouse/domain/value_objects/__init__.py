"""Heblo 창고 값 객체 (불변, 동등성 기반 비교)."""

from heblo_warehouse.domain.value_objects.box_code import BoxCode

__all__ = [
    'BoxCode',
]
