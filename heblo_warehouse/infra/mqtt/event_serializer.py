"""도메인 이벤트 및 명령 응답 JSON 직렬화.

snake_case(도메인) → camelCase(외부 메시지) 변환은 이 모듈에서만 처리한다.
"""

from __future__ import annotations

from dataclasses import fields, is_dataclass
from datetime import datetime
from enum import Enum
import json
import re
from typing import Any

from heblo_warehouse.domain.events.transport_events import DomainEvent

_SNAKE_RE = re.compile(r'_([a-z])')


def snake_to_camel(name: str) -> str:
    """snake_case 이름을 camelCase로 바꾼다."""
    return _SNAKE_RE.sub(lambda m: m.group(1).upper(), name)


def _to_json_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if is_dataclass(value) and not isinstance(value, type):
        return {
            snake_to_camel(f.name): _to_json_value(getattr(value, f.name))
            for f in fields(value)
        }
    if isinstance(value, dict):
        return {
            snake_to_camel(str(k)): _to_json_value(v)
            for k, v in value.items()
        }
    if isinstance(value, (set, frozenset)):
        return sorted((_to_json_value(v) for v in value), key=str)
    if isinstance(value, (list, tuple)):
        return [_to_json_value(v) for v in value]
    return value


def event_to_dict(event: DomainEvent) -> dict[str, Any]:
    """이벤트를 camelCase 키의 dict로 변환한다.

    eventType 키에 이벤트 클래스 이름을 함께 담는다.
    """
    data = _to_json_value(event)
    data['eventType'] = type(event).__name__
    return data


def serialize_event(event: DomainEvent) -> str:
    """이벤트를 JSON 문자열로 직렬화한다."""
    return json.dumps(event_to_dict(event), ensure_ascii=False)


def serialize_message(data: dict[str, Any]) -> str:
    """명령 응답 등 임의의 dict를 camelCase 키의 JSON으로 직렬화한다."""
    return json.dumps(_to_json_value(data), ensure_ascii=False)
