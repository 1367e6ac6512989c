"""운송 박스 선언적 전이 테이블.

상태별로 허용되는 다음/이전/예외 전이를 정의한다.
TransportBox의 mutator는 이 테이블에서 허용 원천 상태를 도출하므로
메타데이터와 실제 검증이 항상 일치한다.
Error 전이는 어느 상태에서든 허용되는 탈출구이므로 테이블에 없다.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime
from types import MappingProxyType
from typing import TYPE_CHECKING

from heblo_warehouse.domain.enums import TransitionType, TransportBoxState
from heblo_warehouse.domain.exceptions import InvalidStateTransitionError

if TYPE_CHECKING:
    from heblo_warehouse.domain.entities.transport_box import TransportBox


@dataclass(frozen=True)
class TransitionArgs:
    """전이 실행에 필요한 부가 입력.

    Args:
        box_code: New → Opened 시 부여할 박스 코드.
        location: Opened → Reserve 시 보관 위치.
        receive_state: 수령 후 목표 상태.
    """

    box_code: str | None = None
    location: str | None = None
    receive_state: TransportBoxState = TransportBoxState.STOCKED


_Executor = Callable[['TransportBox', datetime, str, TransitionArgs], None]

_EXECUTORS: dict[str, _Executor] = {
    'open': lambda box, date, user, args: box.open(
        args.box_code, date, user
    ),
    'close': lambda box, date, user, args: box.close(date, user),
    'to_transit': lambda box, date, user, args: box.to_transit(date, user),
    'to_reserve': lambda box, date, user, args: box.to_reserve(
        date, user, args.location
    ),
    'reset': lambda box, date, user, args: box.reset(date, user),
    'receive': lambda box, date, user, args: box.receive(
        date, user, args.receive_state
    ),
    'revert_to_opened': lambda box, date, user, args: box.revert_to_opened(
        date, user
    ),
    'to_pick': lambda box, date, user, args: box.to_pick(date, user),
}


@dataclass(frozen=True)
class TransportBoxTransition:
    """상태 전이 1건의 선언.

    Args:
        from_state: 원천 상태.
        new_state: 목표 상태.
        transition_type: 전이 분류.
        method_name: 전이를 수행하는 TransportBox 메서드 이름.
        system_only: 자동화 프로세스만 수행 가능한지 여부.
        condition: UI에 노출할지 판단하는 선택적 조건.
    """

    from_state: TransportBoxState
    new_state: TransportBoxState
    transition_type: TransitionType
    method_name: str
    system_only: bool = False
    condition: Callable[[TransportBox], bool] | None = None

    def is_available(self, box: TransportBox) -> bool:
        """현재 박스에 대해 이 전이를 제안할 수 있는지 여부."""
        if box.state != self.from_state:
            return False
        return self.condition is None or self.condition(box)

    def execute(
        self,
        box: TransportBox,
        date: datetime,
        user_name: str,
        args: TransitionArgs | None = None,
    ) -> None:
        """대응하는 mutator를 호출하여 전이를 수행한다.

        Raises:
            TransportBoxValidationError: mutator 검증 실패 시.
        """
        _EXECUTORS[self.method_name](
            box, date, user_name, args or TransitionArgs()
        )


@dataclass(frozen=True)
class TransportBoxStateNode:
    """한 상태에서 나가는 전이 목록.

    Args:
        state: 노드 상태.
        transitions: 허용 전이 목록.
    """

    state: TransportBoxState
    transitions: tuple[TransportBoxTransition, ...] = ()

    @property
    def next_transitions(self) -> list[TransportBoxTransition]:
        return self._of_type(TransitionType.NEXT)

    @property
    def previous_transitions(self) -> list[TransportBoxTransition]:
        return self._of_type(TransitionType.PREVIOUS)

    @property
    def edge_case_transitions(self) -> list[TransportBoxTransition]:
        return self._of_type(TransitionType.EDGE_CASE)

    @property
    def next_state(self) -> TransportBoxState | None:
        """첫 번째 정방향 전이의 목표 상태."""
        nexts = self.next_transitions
        return nexts[0].new_state if nexts else None

    @property
    def previous_state(self) -> TransportBoxState | None:
        """첫 번째 역방향 전이의 목표 상태."""
        previous = self.previous_transitions
        return previous[0].new_state if previous else None

    @property
    def is_terminal(self) -> bool:
        return not self.transitions

    def get_transition(
        self, new_state: TransportBoxState
    ) -> TransportBoxTransition:
        """목표 상태로 가는 전이를 찾는다.

        Raises:
            InvalidStateTransitionError: 해당 전이가 없을 때.
        """
        for transition in self.transitions:
            if transition.new_state == new_state:
                return transition
        raise InvalidStateTransitionError(
            self.state, new_state, _sources_reaching(new_state)
        )

    def _of_type(
        self, transition_type: TransitionType
    ) -> list[TransportBoxTransition]:
        return [
            t for t in self.transitions
            if t.transition_type == transition_type
        ]


def _has_items(box: TransportBox) -> bool:
    return len(box.items) > 0


def _has_code(box: TransportBox) -> bool:
    return box.code is not None


def _node(
    state: TransportBoxState,
    *edges: tuple,
) -> TransportBoxStateNode:
    transitions = []
    for edge in edges:
        new_state, transition_type, method_name, *rest = edge
        options = rest[0] if rest else {}
        transitions.append(
            TransportBoxTransition(
                from_state=state,
                new_state=new_state,
                transition_type=transition_type,
                method_name=method_name,
                **options,
            )
        )
    return TransportBoxStateNode(state=state, transitions=tuple(transitions))


_S = TransportBoxState
_T = TransitionType

TRANSITIONS: Mapping[TransportBoxState, TransportBoxStateNode] = (
    MappingProxyType({
        _S.NEW: _node(
            _S.NEW,
            (_S.OPENED, _T.NEXT, 'open'),
            (_S.CLOSED, _T.PREVIOUS, 'close'),
        ),
        _S.OPENED: _node(
            _S.OPENED,
            (_S.IN_TRANSIT, _T.NEXT, 'to_transit',
             {'condition': _has_items}),
            (_S.RESERVE, _T.NEXT, 'to_reserve'),
            (_S.NEW, _T.PREVIOUS, 'reset'),
        ),
        _S.IN_TRANSIT: _node(
            _S.IN_TRANSIT,
            (_S.RECEIVED, _T.NEXT, 'receive'),
            (_S.OPENED, _T.PREVIOUS, 'revert_to_opened',
             {'condition': _has_code}),
        ),
        _S.RESERVE: _node(
            _S.RESERVE,
            (_S.RECEIVED, _T.NEXT, 'receive'),
            (_S.OPENED, _T.PREVIOUS, 'revert_to_opened',
             {'condition': _has_code}),
        ),
        _S.RECEIVED: _node(
            _S.RECEIVED,
            (_S.STOCKED, _T.NEXT, 'to_pick', {'system_only': True}),
            (_S.CLOSED, _T.EDGE_CASE, 'close'),
        ),
        _S.STOCKED: _node(
            _S.STOCKED,
            (_S.CLOSED, _T.NEXT, 'close'),
        ),
        _S.ERROR: _node(
            _S.ERROR,
            (_S.STOCKED, _T.EDGE_CASE, 'to_pick'),
        ),
        _S.CLOSED: _node(_S.CLOSED),
    })
)


def _build_allowed_sources() -> Mapping[str, frozenset[TransportBoxState]]:
    sources: dict[str, set[TransportBoxState]] = {}
    for node in TRANSITIONS.values():
        for transition in node.transitions:
            sources.setdefault(transition.method_name, set()).add(
                transition.from_state
            )
    return MappingProxyType({k: frozenset(v) for k, v in sources.items()})


_ALLOWED_SOURCES = _build_allowed_sources()


def allowed_sources(method_name: str) -> frozenset[TransportBoxState]:
    """mutator가 허용하는 원천 상태 집합을 반환한다."""
    return _ALLOWED_SOURCES[method_name]


def _sources_reaching(
    new_state: TransportBoxState,
) -> frozenset[TransportBoxState]:
    return frozenset(
        node.state
        for node in TRANSITIONS.values()
        for t in node.transitions
        if t.new_state == new_state
    )
