"""운송 박스 저장소 포트 인터페이스.

운송 박스의 저장/조회를 추상화한다.
인메모리 또는 외부 저장소로 구현 가능하다.
"""

from abc import ABC, abstractmethod

from heblo_warehouse.domain.entities.transport_box import TransportBox
from heblo_warehouse.domain.enums import TransportBoxState

ACTIVE_BOX_STATES = frozenset({
    TransportBoxState.OPENED,
    TransportBoxState.IN_TRANSIT,
    TransportBoxState.RESERVE,
    TransportBoxState.RECEIVED,
    TransportBoxState.ERROR,
})


class TransportBoxRepository(ABC):
    """운송 박스 저장소 인터페이스."""

    @abstractmethod
    def add(self, box: TransportBox) -> TransportBox:
        """새 박스를 저장하고 ID를 부여한다.

        Args:
            box: 저장할 박스 (id가 0이면 새 ID 부여).

        Returns:
            저장된 박스.
        """

    @abstractmethod
    def get_by_id(self, box_id: int) -> TransportBox | None:
        """ID로 박스를 조회한다.

        Args:
            box_id: 박스 ID.

        Returns:
            TransportBox 또는 없으면 None.
        """

    @abstractmethod
    def save(self, box: TransportBox) -> None:
        """변경된 박스를 저장한다.

        Args:
            box: 저장할 박스.
        """

    @abstractmethod
    def list_by_state(
        self, state: TransportBoxState, code: str | None = None
    ) -> list[TransportBox]:
        """상태(와 선택적으로 코드)로 박스를 조회한다.

        Args:
            state: 조회할 상태.
            code: 박스 코드 (대소문자 무시).
        """

    @abstractmethod
    def is_box_code_active(self, code: str) -> bool:
        """같은 코드의 활성 박스(ACTIVE_BOX_STATES)가 있는지 여부.

        Args:
            code: 정규화된 박스 코드.
        """
