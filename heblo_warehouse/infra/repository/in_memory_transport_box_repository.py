"""인메모리 운송 박스 저장소 구현체."""

import itertools
import threading

from heblo_warehouse.domain.entities.transport_box import TransportBox
from heblo_warehouse.domain.enums import TransportBoxState
from heblo_warehouse.usecase.ports.transport_box_repository import (
    ACTIVE_BOX_STATES,
    TransportBoxRepository,
)


class InMemoryTransportBoxRepository(TransportBoxRepository):
    """TransportBoxRepository의 인메모리 구현체.

    dict 기반으로 박스를 보관하며 모든 접근은 Lock으로 보호한다.
    박스 객체를 그대로 보관하므로 save는 존재 여부만 확인한다.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._boxes: dict[int, TransportBox] = {}
        self._ids = itertools.count(1)

    def add(self, box: TransportBox) -> TransportBox:
        with self._lock:
            if not box.id:
                box.id = next(self._ids)
                while box.id in self._boxes:
                    box.id = next(self._ids)
            self._boxes[box.id] = box
        return box

    def get_by_id(self, box_id: int) -> TransportBox | None:
        with self._lock:
            return self._boxes.get(box_id)

    def save(self, box: TransportBox) -> None:
        with self._lock:
            if box.id not in self._boxes:
                raise KeyError(f'Transport box [{box.id}] was never added')
            self._boxes[box.id] = box

    def list_by_state(
        self, state: TransportBoxState, code: str | None = None
    ) -> list[TransportBox]:
        wanted_code = code.strip().upper() if code else None
        with self._lock:
            return [
                box for box in self._boxes.values()
                if box.state == state
                and (wanted_code is None or box.code == wanted_code)
            ]

    def is_box_code_active(self, code: str) -> bool:
        wanted_code = code.strip().upper()
        with self._lock:
            return any(
                box.code == wanted_code and box.state in ACTIVE_BOX_STATES
                for box in self._boxes.values()
            )
