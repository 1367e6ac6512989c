"""운송 박스 코드 값 객체."""

from __future__ import annotations

from dataclasses import dataclass
import re

from heblo_warehouse.domain.exceptions import TransportBoxValidationError

_BOX_CODE_RE = re.compile(r'^B\d{3}$', re.IGNORECASE)


@dataclass(frozen=True)
class BoxCode:
    """`B` + 숫자 3자리 형식의 박스 코드 (대문자 정규화).

    Args:
        value: 정규화된 코드 문자열 (e.g. "B001").
    """

    value: str

    @classmethod
    def parse(cls, raw: str | None) -> BoxCode:
        """입력 문자열을 검증하고 대문자로 정규화한다.

        Args:
            raw: 사용자가 입력한 박스 코드.

        Returns:
            정규화된 BoxCode.

        Raises:
            TransportBoxValidationError: 비어 있거나 형식이 틀린 경우.
        """
        if raw is None or not raw.strip():
            raise TransportBoxValidationError(
                'Box code cannot be null or empty'
            )
        candidate = raw.strip()
        if not _BOX_CODE_RE.match(candidate):
            raise TransportBoxValidationError(
                'Box code must follow format: B + 3 digits '
                '(e.g., B001, B123)'
            )
        return cls(candidate.upper())

    def matches(self, other: str | None) -> bool:
        """대소문자 구분 없이 같은 코드인지 비교한다."""
        if other is None:
            return False
        return self.value == other.strip().upper()

    def __str__(self) -> str:
        return self.value
