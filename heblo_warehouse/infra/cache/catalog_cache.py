"""병합 중 이전 데이터를 제공하는 카탈로그 캐시.

현재 스냅샷이 유효하면 그대로, 병합이 진행 중이면 보존 기간 안의
이전 스냅샷을, 쓸 데이터가 없으면 즉시(priority) 병합 결과를 반환한다.
"""

from __future__ import annotations

from collections.abc import Callable
import logging
import threading
import time
from typing import Any

from heblo_warehouse.usecase.ports.config_port import CatalogCacheConfig
from heblo_warehouse.usecase.ports.merge_scheduler import MergeScheduler

logger = logging.getLogger(__name__)

CatalogMergeFn = Callable[[], list[Any]]


class CatalogCache:
    """스케줄러와 연동되는 카탈로그 읽기 경로.

    생성 시 스케줄러의 병합 콜백으로 자신을 등록한다.
    백그라운드 병합은 현재 스냅샷을 원자적으로 교체하고,
    직전 스냅샷은 stale로 보존한다.

    Args:
        merge_fn: 원천 데이터를 합쳐 카탈로그 목록을 만드는 함수.
        scheduler: 병합 스케줄러.
        config: 캐시 설정.
        clock: 단조 시계 (초).
    """

    def __init__(
        self,
        merge_fn: CatalogMergeFn,
        scheduler: MergeScheduler,
        config: CatalogCacheConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._merge_fn = merge_fn
        self._scheduler = scheduler
        self._config = config or CatalogCacheConfig()
        self._clock = clock

        self._lock = threading.Lock()
        self._current: list[Any] | None = None
        self._last_update: float | None = None
        self._stale: list[Any] | None = None
        self._stale_since: float | None = None

        scheduler.set_merge_callback(self._background_merge)

    def invalidate(self, source_name: str) -> None:
        """데이터 원천 변경을 알린다.

        Args:
            source_name: 변경된 데이터 원천 이름.
        """
        if self._config.enable_background_merge:
            self._scheduler.schedule_merge(source_name)
            return

        with self._lock:
            if self._current is not None:
                self._stale = self._current
                self._stale_since = self._last_update
            self._current = None
            self._last_update = None
        logger.debug('Catalog snapshot dropped (source=%s)', source_name)

    def get_all(self) -> list[Any]:
        """카탈로그 전체 목록을 반환한다."""
        now = self._clock()
        with self._lock:
            if self._is_current_valid(now):
                return list(self._current)

        if self._scheduler.is_merge_in_progress:
            stale = self._usable_stale(now)
            if stale is not None:
                logger.debug('Merge in progress, serving stale catalog')
                return stale

            logger.debug('Merge in progress, waiting for it to finish')
            self._scheduler.wait_for_current_merge()
            with self._lock:
                if self._current is not None:
                    return list(self._current)

        return self._priority_merge()

    def _is_current_valid(self, now: float) -> bool:
        return (
            self._current is not None
            and self._last_update is not None
            and now - self._last_update
            < self._config.cache_validity_period_sec
        )

    def _usable_stale(self, now: float) -> list[Any] | None:
        if not self._config.allow_stale_data_during_merge:
            return None

        retention = self._config.stale_data_retention_period_sec
        with self._lock:
            candidates = [
                (produced_at, data)
                for data, produced_at in (
                    (self._current, self._last_update),
                    (self._stale, self._stale_since),
                )
                if data is not None and produced_at is not None
                and now - produced_at < retention
            ]
        if not candidates:
            return None
        _, freshest = max(candidates, key=lambda c: c[0])
        return list(freshest)

    def _priority_merge(self) -> list[Any]:
        logger.info('No usable catalog snapshot, running priority merge')
        data = self._merge_fn()
        self._replace(data)
        return list(data)

    def _background_merge(self) -> None:
        data = self._merge_fn()
        self._replace(data)
        logger.info('Catalog snapshot replaced (%d entries)', len(data))

    def _replace(self, data: list[Any]) -> None:
        with self._lock:
            if self._current is not None:
                self._stale = self._current
                self._stale_since = self._last_update
            self._current = list(data)
            self._last_update = self._clock()
