"""카탈로그 병합 스케줄러 포트 인터페이스.

데이터 원천 무효화 신호를 모아 하나의 병합으로 실행하는
디바운스 스케줄러를 추상화한다.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import datetime

MergeCallback = Callable[[], None]


class MergeScheduler(ABC):
    """카탈로그 병합 스케줄러 인터페이스."""

    @abstractmethod
    def set_merge_callback(self, callback: MergeCallback) -> None:
        """병합 시 호출할 콜백을 등록한다.

        Args:
            callback: 병합 본체.
        """

    @abstractmethod
    def schedule_merge(self, source_name: str) -> None:
        """데이터 원천 무효화를 기록하고 병합을 예약한다.

        Args:
            source_name: 무효화된 데이터 원천 이름.
        """

    @property
    @abstractmethod
    def is_merge_in_progress(self) -> bool:
        """병합 콜백이 실행 중인지 여부."""

    @abstractmethod
    def has_pending_merge(self) -> bool:
        """디바운스 타이머가 대기 중인지 여부."""

    @abstractmethod
    def get_last_merge_time(self) -> datetime | None:
        """마지막 성공 병합 완료 시각."""

    @abstractmethod
    def wait_for_current_merge(self, timeout: float | None = None) -> bool:
        """진행 중인 병합이 끝날 때까지 대기한다.

        Args:
            timeout: 최대 대기 시간 (초). None이면 무한 대기.

        Returns:
            시간 내에 병합이 없거나 끝났으면 True.
        """
