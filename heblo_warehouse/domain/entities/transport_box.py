"""운송 박스 애그리거트."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from heblo_warehouse.domain.entities.transport_box_item import (
    TransportBoxItem,
)
from heblo_warehouse.domain.entities.transport_box_state_log import (
    TransportBoxStateLog,
)
from heblo_warehouse.domain.entities.transport_box_transitions import (
    TRANSITIONS,
    TransportBoxStateNode,
    TransportBoxTransition,
    allowed_sources,
)
from heblo_warehouse.domain.enums import (
    TransportBoxLocation,
    TransportBoxState,
)
from heblo_warehouse.domain.exceptions import (
    InvalidStateTransitionError,
    TransportBoxValidationError,
)
from heblo_warehouse.domain.value_objects.box_code import BoxCode

_IN_TRANSPORT_STATES = frozenset({
    TransportBoxState.OPENED,
    TransportBoxState.IN_TRANSIT,
    TransportBoxState.RECEIVED,
})


class TransportBox:
    """창고 간 운송 박스 애그리거트 루트.

    상태는 mutator 메서드를 통해서만 바뀌며, 모든 전이는
    TransportBoxStateLog 1건을 남긴다. 실패한 전이는 아무것도 바꾸지 않는다.
    인스턴스 단위 단일 작성자를 가정한다 (내부 잠금 없음).

    Args:
        box_id: 박스 ID.
        creation_time: 생성 시각.
        creator_id: 생성자 ID.
    """

    def __init__(
        self,
        box_id: int = 0,
        creation_time: datetime | None = None,
        creator_id: str | None = None,
    ) -> None:
        self.id = box_id
        self.description: str | None = None
        self.creation_time = creation_time
        self.creator_id = creator_id
        self.last_modification_time: datetime | None = None
        self.last_modifier_id: str | None = None

        self._code: str | None = None
        self._state = TransportBoxState.NEW
        self._default_receive_state = TransportBoxState.STOCKED
        self._location: str | None = None
        self._last_state_changed: datetime | None = None
        self._items: list[TransportBoxItem] = []
        self._state_log: list[TransportBoxStateLog] = []
        self._last_item_id = 0

    # -- 조회 --

    @property
    def code(self) -> str | None:
        return self._code

    @property
    def state(self) -> TransportBoxState:
        return self._state

    @property
    def default_receive_state(self) -> TransportBoxState:
        return self._default_receive_state

    @property
    def location(self) -> str | None:
        return self._location

    @property
    def last_state_changed(self) -> datetime | None:
        return self._last_state_changed

    @property
    def items(self) -> tuple[TransportBoxItem, ...]:
        return tuple(self._items)

    @property
    def state_log(self) -> tuple[TransportBoxStateLog, ...]:
        return tuple(self._state_log)

    @property
    def is_in_transit(self) -> bool:
        """운송 흐름(Opened/InTransit/Received) 안에 있는지 여부."""
        return self._state in _IN_TRANSPORT_STATES

    @property
    def is_in_reserve(self) -> bool:
        return self._state == TransportBoxState.RESERVE

    @property
    def transition_node(self) -> TransportBoxStateNode:
        return TRANSITIONS[self._state]

    @property
    def next_state(self) -> TransportBoxState | None:
        return self.transition_node.next_state

    @property
    def previous_state(self) -> TransportBoxState | None:
        return self.transition_node.previous_state

    def available_transitions(
        self, include_system: bool = False
    ) -> list[TransportBoxTransition]:
        """지금 수행 가능한 전이 목록.

        Args:
            include_system: system_only 전이도 포함할지 여부.
        """
        return [
            t for t in self.transition_node.transitions
            if t.is_available(self) and (include_system or not t.system_only)
        ]

    # -- 상태 전이 --

    def open(
        self, box_code: str | None, date: datetime, user_name: str
    ) -> None:
        """박스 코드를 부여하고 Opened로 전이한다.

        Raises:
            InvalidStateTransitionError: New 상태가 아닐 때.
            TransportBoxValidationError: 코드가 비었거나 형식이 틀릴 때.
        """
        self._check_state(TransportBoxState.OPENED, allowed_sources('open'))
        code = BoxCode.parse(box_code)
        self._code = code.value
        self._apply_state(TransportBoxState.OPENED, date, user_name)

    def add_item(
        self,
        product_code: str,
        product_name: str,
        amount: float,
        date: datetime,
        user_name: str,
    ) -> TransportBoxItem:
        """품목을 추가한다 (Opened 상태에서만)."""
        self._check_state(
            TransportBoxState.OPENED, {TransportBoxState.OPENED}
        )
        self._last_item_id += 1
        item = TransportBoxItem(
            item_id=self._last_item_id,
            product_code=product_code,
            product_name=product_name,
            amount=amount,
            date_added=date,
            user_added=user_name,
        )
        self._items.append(item)
        return item

    def delete_item(self, item_id: int) -> TransportBoxItem | None:
        """품목을 삭제한다 (Opened 상태에서만).

        Returns:
            삭제된 품목, 없는 ID면 None.
        """
        self._check_state(
            TransportBoxState.OPENED, {TransportBoxState.OPENED}
        )
        for item in self._items:
            if item.item_id == item_id:
                self._items.remove(item)
                return item
        return None

    def to_transit(self, date: datetime, user_name: str) -> None:
        self._check_state(
            TransportBoxState.IN_TRANSIT, allowed_sources('to_transit')
        )
        if not self._items:
            raise TransportBoxValidationError(
                'Cannot transition to InTransit state: '
                'Box must contain at least one item'
            )
        self._apply_state(TransportBoxState.IN_TRANSIT, date, user_name)

    def confirm_transit(
        self, confirmed_box_code: str | None, date: datetime, user_name: str
    ) -> None:
        """물리적 이중 확인 후 운송을 시작한다.

        입력 코드가 저장된 코드와 (대소문자 무시) 같을 때만 to_transit을 호출한다.

        Raises:
            TransportBoxValidationError: 코드 미입력 또는 불일치 시.
        """
        if confirmed_box_code is None or not confirmed_box_code.strip():
            raise TransportBoxValidationError(
                'Box number confirmation is required'
            )
        if self._code is None or not BoxCode(self._code).matches(
            confirmed_box_code
        ):
            raise TransportBoxValidationError(
                f"Box number mismatch: entered '{confirmed_box_code}' "
                f"but expected '{self._code}'"
            )
        self.to_transit(date, user_name)

    def to_reserve(
        self,
        date: datetime,
        user_name: str,
        location: TransportBoxLocation | str | None,
    ) -> None:
        """박스를 예비 위치에 보관한다.

        위치는 TransportBoxLocation 값 중 하나여야 하며 (대소문자 무시)
        정규화된 이름으로 저장된다.
        """
        self._check_state(
            TransportBoxState.RESERVE, allowed_sources('to_reserve')
        )
        if location is None or not str(location).strip():
            raise TransportBoxValidationError(
                'Location is required to move the box to Reserve'
            )
        try:
            resolved = TransportBoxLocation(location)
        except ValueError:
            known = ', '.join(loc.value for loc in TransportBoxLocation)
            raise TransportBoxValidationError(
                f"Unknown reserve location '{location}' "
                f'(expected one of: {known})'
            ) from None
        self._location = resolved.value
        self._apply_state(TransportBoxState.RESERVE, date, user_name)

    def receive(
        self,
        date: datetime,
        user_name: str,
        receive_state: TransportBoxState = TransportBoxState.STOCKED,
    ) -> None:
        """박스를 수령한다.

        위치를 비우고 수령 후 목표 상태를 기록한다.
        이후 입고 처리가 Stocked 또는 Error로 이끈다.
        """
        self._check_state(
            TransportBoxState.RECEIVED, allowed_sources('receive')
        )
        self._default_receive_state = receive_state
        self._location = None
        self._apply_state(TransportBoxState.RECEIVED, date, user_name)

    def revert_to_opened(self, date: datetime, user_name: str) -> None:
        self._check_state(
            TransportBoxState.OPENED, allowed_sources('revert_to_opened')
        )
        if not self._code:
            raise TransportBoxValidationError(
                'Cannot revert to Opened: Box code is required'
            )
        self._location = None
        self._apply_state(TransportBoxState.OPENED, date, user_name)

    def reset(self, date: datetime, user_name: str) -> None:
        """품목과 코드를 비우고 New로 되돌린다 (Opened에서만)."""
        self._check_state(TransportBoxState.NEW, allowed_sources('reset'))
        self._items.clear()
        self._code = None
        self._apply_state(TransportBoxState.NEW, date, user_name)

    def to_pick(self, date: datetime, user_name: str) -> None:
        self._check_state(
            TransportBoxState.STOCKED, allowed_sources('to_pick')
        )
        self._apply_state(TransportBoxState.STOCKED, date, user_name)

    def close(self, date: datetime, user_name: str) -> None:
        self._check_state(TransportBoxState.CLOSED, allowed_sources('close'))
        self._apply_state(TransportBoxState.CLOSED, date, user_name)

    def error(self, date: datetime, user_name: str, message: str) -> None:
        """어느 상태에서든 Error로 전이하고 메시지를 기록한다."""
        if self.description:
            self.description = f'{self.description}\n{message}'
        else:
            self.description = message
        self._apply_state(
            TransportBoxState.ERROR, date, user_name, description=message
        )

    # -- 내부 --

    def _check_state(
        self,
        new_state: TransportBoxState,
        allowed: Iterable[TransportBoxState],
    ) -> None:
        allowed = frozenset(allowed)
        if self._state not in allowed:
            raise InvalidStateTransitionError(self._state, new_state, allowed)

    def _apply_state(
        self,
        new_state: TransportBoxState,
        date: datetime,
        user_name: str,
        description: str | None = None,
    ) -> None:
        self._state = new_state
        self._last_state_changed = date
        self._state_log.append(
            TransportBoxStateLog(
                state=new_state,
                timestamp=date,
                user_name=user_name,
                description=description,
            )
        )

    def __repr__(self) -> str:
        return (
            f'TransportBox(id={self.id}, code={self._code!r}, '
            f'state={self._state})'
        )
