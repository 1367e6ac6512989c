"""스레드 기반 카탈로그 병합 스케줄러 구현체.

여러 데이터 원천의 무효화 신호를 디바운스하여 하나의 병합으로 합친다.
첫 미처리 무효화 이후 max_merge_interval이 지나면 디바운스 없이
즉시 병합하여 데이터 노후화 시간을 제한한다.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
import logging
import threading
import time

from heblo_warehouse.usecase.ports.config_port import CatalogCacheConfig
from heblo_warehouse.usecase.ports.merge_scheduler import (
    MergeCallback,
    MergeScheduler,
)

logger = logging.getLogger(__name__)


class ThreadingCatalogMergeScheduler(MergeScheduler):
    """MergeScheduler의 threading 구현체.

    - 무효화 맵, 타이머, 진행 플래그는 하나의 Lock으로 보호한다.
    - 병합 본체는 Semaphore(1)로 한 번에 하나만 실행한다.
      병합 중 타이머가 만료되면 그 시도는 건너뛴다 (큐잉하지 않음).
    - 무효화 기록은 병합이 성공했을 때만 지운다.

    Args:
        config: 디바운스/최대 간격 설정.
        merge_callback: 병합 콜백. 나중에 set_merge_callback으로 등록해도 된다.
        clock: 단조 시계 (초).
    """

    def __init__(
        self,
        config: CatalogCacheConfig | None = None,
        merge_callback: MergeCallback | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        config = config or CatalogCacheConfig()
        self._debounce_delay = config.debounce_delay_sec
        self._max_merge_interval = config.max_merge_interval_sec
        self._callback = merge_callback
        self._clock = clock

        self._lock = threading.Lock()
        self._idle = threading.Condition(self._lock)
        self._merge_semaphore = threading.Semaphore(1)
        self._shutdown_event = threading.Event()

        self._invalidations: dict[str, float] = {}
        # 원천별로 병합되지 않은 첫 무효화 시각
        self._first_invalidated: dict[str, float] = {}
        self._renewed_during_merge: dict[str, float] = {}
        self._first_pending: float | None = None
        self._timer: threading.Timer | None = None
        self._timer_generation = 0
        self._merge_in_progress = False
        self._last_merge_time: datetime | None = None

    # -- MergeScheduler --

    def set_merge_callback(self, callback: MergeCallback) -> None:
        with self._lock:
            self._callback = callback
        logger.debug('Merge callback registered')

    def schedule_merge(self, source_name: str) -> None:
        """무효화를 기록하고 디바운스 타이머를 다시 건다.

        버스트의 첫 무효화 이후 max_merge_interval을 넘기면
        백그라운드 스레드에서 즉시 병합한다.
        """
        if self._shutdown_event.is_set():
            logger.debug(
                'Scheduler is shut down, ignoring invalidation of %s',
                source_name,
            )
            return

        now = self._clock()
        with self._lock:
            self._invalidations[source_name] = now
            self._first_invalidated.setdefault(source_name, now)
            if self._merge_in_progress:
                self._renewed_during_merge.setdefault(source_name, now)
            if self._first_pending is None:
                self._first_pending = now
            overdue = now - self._first_pending > self._max_merge_interval

            self._cancel_timer_locked()
            if not overdue:
                self._arm_timer_locked()

        if overdue:
            logger.info(
                'Max merge interval (%.1fs) exceeded, merging immediately '
                '(source=%s)',
                self._max_merge_interval, source_name,
            )
            threading.Thread(
                target=self._execute_merge,
                name='catalog-merge',
                daemon=True,
            ).start()
        else:
            logger.debug(
                'Merge scheduled in %.2fs (source=%s)',
                self._debounce_delay, source_name,
            )

    @property
    def is_merge_in_progress(self) -> bool:
        with self._lock:
            return self._merge_in_progress

    def has_pending_merge(self) -> bool:
        with self._lock:
            return self._timer is not None

    def get_last_merge_time(self) -> datetime | None:
        with self._lock:
            return self._last_merge_time

    def wait_for_current_merge(self, timeout: float | None = None) -> bool:
        with self._idle:
            return self._idle.wait_for(
                lambda: not self._merge_in_progress, timeout=timeout
            )

    # -- 부가 기능 --

    def pending_sources(self) -> dict[str, float]:
        """아직 병합되지 않은 무효화 (원천 → 마지막 무효화 시각)."""
        with self._lock:
            return dict(self._invalidations)

    def shutdown(self) -> None:
        """새 병합 예약을 막고 대기 중인 타이머를 해제한다."""
        self._shutdown_event.set()
        with self._lock:
            self._cancel_timer_locked()
        logger.info('Catalog merge scheduler shut down')

    # -- 내부 --

    def _arm_timer_locked(self) -> None:
        self._timer_generation += 1
        timer = threading.Timer(
            self._debounce_delay,
            self._on_timer,
            args=(self._timer_generation,),
        )
        timer.daemon = True
        self._timer = timer
        timer.start()

    def _cancel_timer_locked(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._timer_generation += 1

    def _on_timer(self, generation: int) -> None:
        with self._lock:
            # 이미 취소/교체된 타이머
            if generation != self._timer_generation:
                return
            self._timer = None
        if self._shutdown_event.is_set():
            return
        self._execute_merge()

    def _execute_merge(self) -> None:
        if not self._merge_semaphore.acquire(blocking=False):
            logger.debug('Merge already in progress, skipping this attempt')
            return

        try:
            with self._lock:
                callback = self._callback
                sources = dict(self._invalidations)
                if callback is not None:
                    self._merge_in_progress = True
                    self._renewed_during_merge.clear()

            if callback is None:
                logger.warning(
                    'Merge fired but no merge callback is registered, '
                    '%d invalidated source(s) stay pending',
                    len(sources),
                )
                return

            started = self._clock()
            logger.info(
                'Starting catalog merge (sources=%s)',
                ', '.join(sorted(sources)),
            )
            try:
                callback()
            except Exception:
                logger.exception(
                    'Catalog merge failed, invalidations kept until '
                    'the next schedule_merge call'
                )
                return

            with self._lock:
                for source, invalidated_at in sources.items():
                    if self._invalidations.get(source) == invalidated_at:
                        del self._invalidations[source]
                        del self._first_invalidated[source]
                    else:
                        # 병합 도중 다시 무효화된 원천
                        self._first_invalidated[source] = (
                            self._renewed_during_merge.get(
                                source, self._invalidations[source]
                            )
                        )
                self._first_pending = min(
                    self._first_invalidated.values(), default=None
                )
                self._last_merge_time = datetime.now(UTC)
                # 병합 중 들어온 무효화는 타이머가 건너뛰어졌을 수 있다
                if (self._invalidations and self._timer is None
                        and not self._shutdown_event.is_set()):
                    self._arm_timer_locked()

            logger.info(
                'Catalog merge completed in %.3fs',
                self._clock() - started,
            )
        finally:
            with self._lock:
                self._merge_in_progress = False
                self._renewed_during_merge.clear()
                self._idle.notify_all()
            self._merge_semaphore.release()
