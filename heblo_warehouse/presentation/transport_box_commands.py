"""운송 박스 명령 디스패처.

외부 명령(dict)을 유스케이스 호출로 바꾸고, 응답 dict를 만든다.
키는 camelCase이며 command 키로 동작을 고른다.

지원 명령:
    create_box, add_item, delete_item, change_state,
    stock_up_result, describe_box, plan_transition, get_catalog
"""

from __future__ import annotations

from collections.abc import Callable
import logging
import threading
from typing import Any

from heblo_warehouse.domain.entities.transport_box import TransportBox
from heblo_warehouse.domain.enums import (
    StockUpOperationState,
    TransportBoxState,
)
from heblo_warehouse.domain.exceptions import (
    StockUpError,
    TransportBoxNotFoundError,
    TransportBoxValidationError,
)
from heblo_warehouse.infra.cache.catalog_cache import CatalogCache
from heblo_warehouse.infra.graph.transition_graph import (
    build_transition_graph,
    reachable_states,
    shortest_transition_path,
    terminal_states,
)
from heblo_warehouse.usecase.change_transport_box_state import (
    ChangeTransportBoxState,
)
from heblo_warehouse.usecase.complete_received_boxes import (
    TRANSPORT_DATA_SOURCE,
)
from heblo_warehouse.usecase.edit_transport_box import EditTransportBox
from heblo_warehouse.usecase.ports.stock_up_gateway import StockUpGateway
from heblo_warehouse.usecase.ports.transport_box_repository import (
    TransportBoxRepository,
)

logger = logging.getLogger(__name__)

Command = dict[str, Any]


def _required(command: Command, key: str) -> Any:
    value = command.get(key)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValueError(f"'{key}' is required")
    return value


def _int(command: Command, key: str) -> int:
    value = _required(command, key)
    try:
        return int(str(value))
    except ValueError:
        raise ValueError(f"'{key}' must be an integer") from None


def _float(command: Command, key: str) -> float:
    value = _required(command, key)
    if isinstance(value, bool):
        raise ValueError(f"'{key}' must be a number")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValueError(f"'{key}' must be a number") from None


def _state(command: Command, key: str) -> TransportBoxState:
    return TransportBoxState(_required(command, key))


def box_view(box: TransportBox) -> dict[str, Any]:
    """응답용 박스 요약."""
    return {
        'id': box.id,
        'code': box.code,
        'state': box.state,
        'location': box.location,
        'description': box.description,
        'items': box.items,
        'available_transitions': [
            t.new_state for t in box.available_transitions()
        ],
    }


class TransportBoxCommandHandler:
    """명령 dict를 유스케이스에 연결한다.

    모든 명령은 하나의 Lock 아래 실행된다. 같은 Lock을 반복 작업과
    공유하면 박스 애그리거트는 한 번에 하나의 작성자만 갖는다.

    전이 계획(plan_transition)과 도달 가능 상태 조회(describe_box)는
    시스템 전용 전이를 뺀 전이 그래프를 쓴다. 품목 유무 같은
    전이 조건은 고려하지 않는다.

    Args:
        repository: 운송 박스 저장소.
        change_state: 상태 변경 유스케이스.
        edit_box: 박스 생성/품목 편집 유스케이스.
        stock_up_gateway: 입고 작업 포트.
        catalog_cache: 카탈로그 캐시.
        lock: 박스 쓰기 직렬화용 Lock.
    """

    def __init__(
        self,
        repository: TransportBoxRepository,
        change_state: ChangeTransportBoxState,
        edit_box: EditTransportBox,
        stock_up_gateway: StockUpGateway,
        catalog_cache: CatalogCache,
        lock: threading.Lock | None = None,
    ) -> None:
        self._repository = repository
        self._change_state = change_state
        self._edit_box = edit_box
        self._stock_up_gateway = stock_up_gateway
        self._catalog_cache = catalog_cache
        self._lock = lock or threading.Lock()

        self._graph = build_transition_graph(include_system=False)
        self._terminal = terminal_states(self._graph)
        self._commands: dict[str, Callable[[Command], dict[str, Any]]] = {
            'create_box': self._create_box,
            'add_item': self._add_item,
            'delete_item': self._delete_item,
            'change_state': self._change_box_state,
            'stock_up_result': self._stock_up_result,
            'describe_box': self._describe_box,
            'plan_transition': self._plan_transition,
            'get_catalog': self._get_catalog,
        }

    @property
    def command_names(self) -> list[str]:
        return sorted(self._commands)

    def handle(self, command: Command) -> dict[str, Any]:
        """명령을 실행하고 응답 dict를 반환한다.

        Raises:
            ValueError: 알 수 없는 명령 또는 잘못된 필드.
            DomainError: 유스케이스 검증 실패.
        """
        name = command.get('command')
        action = self._commands.get(name)
        if action is None:
            raise ValueError(f'Unknown command: {name!r}')

        logger.debug('Handling command %s', name)
        with self._lock:
            return action(command)

    def _create_box(self, command: Command) -> dict[str, Any]:
        box = self._edit_box.create(
            _required(command, 'userName'), command.get('description')
        )
        return {'box': box_view(box)}

    def _add_item(self, command: Command) -> dict[str, Any]:
        box_id = _int(command, 'boxId')
        product_code = _required(command, 'productCode')
        item = self._edit_box.add_item(
            box_id,
            product_code,
            command.get('productName') or product_code,
            _float(command, 'amount'),
            _required(command, 'userName'),
        )
        self._catalog_cache.invalidate(TRANSPORT_DATA_SOURCE)
        return {'box_id': box_id, 'item': item}

    def _delete_item(self, command: Command) -> dict[str, Any]:
        box_id = _int(command, 'boxId')
        removed = self._edit_box.delete_item(
            box_id,
            _int(command, 'itemId'),
            _required(command, 'userName'),
        )
        if removed is not None:
            self._catalog_cache.invalidate(TRANSPORT_DATA_SOURCE)
        return {'box_id': box_id, 'removed': removed is not None}

    def _change_box_state(self, command: Command) -> dict[str, Any]:
        box = self._change_state.execute(
            _int(command, 'boxId'),
            _state(command, 'newState'),
            _required(command, 'userName'),
            box_code=command.get('boxCode'),
            location=command.get('location'),
            description=command.get('description'),
        )
        return {'box': box_view(box)}

    def _stock_up_result(self, command: Command) -> dict[str, Any]:
        document_number = _required(command, 'documentNumber')
        outcome = StockUpOperationState(_required(command, 'state'))

        operation = self._stock_up_gateway.get_operation(document_number)
        if operation is None:
            raise StockUpError(
                f'StockUpOperation [{document_number}] not found'
            )

        if outcome == StockUpOperationState.SUBMITTED:
            operation.submit()
        elif outcome == StockUpOperationState.COMPLETED:
            if operation.state == StockUpOperationState.PENDING:
                operation.submit()
            operation.complete()
        elif outcome == StockUpOperationState.FAILED:
            operation.fail(command.get('errorMessage') or 'Stock-up failed')
        else:
            raise ValueError(f'Cannot report stock-up state {outcome}')

        logger.info(
            'StockUpOperation %s reported %s', document_number, outcome
        )
        return {'operation': operation}

    def _describe_box(self, command: Command) -> dict[str, Any]:
        box = self._get_box(_int(command, 'boxId'))
        return {
            'box': box_view(box),
            'reachable_states': reachable_states(self._graph, box.state),
            'terminal': box.state in self._terminal,
        }

    def _plan_transition(self, command: Command) -> dict[str, Any]:
        box = self._get_box(_int(command, 'boxId'))
        target = _state(command, 'targetState')

        steps = shortest_transition_path(self._graph, box.state, target)
        if steps is None:
            raise TransportBoxValidationError(
                f'State {target} cannot be reached from {box.state}'
            )
        return {
            'box_id': box.id,
            'from_state': box.state,
            'target_state': target,
            'steps': steps,
        }

    def _get_catalog(self, command: Command) -> dict[str, Any]:
        return {'catalog': self._catalog_cache.get_all()}

    def _get_box(self, box_id: int) -> TransportBox:
        box = self._repository.get_by_id(box_id)
        if box is None:
            raise TransportBoxNotFoundError(
                f'Transport box [{box_id}] not found'
            )
        return box
