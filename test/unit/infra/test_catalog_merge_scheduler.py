"""ThreadingCatalogMergeScheduler 유닛 테스트.

짧은 실제 타이머를 사용한다.
"""

import logging
import threading
import time

import pytest

from heblo_warehouse.infra.scheduler import ThreadingCatalogMergeScheduler
from heblo_warehouse.usecase.ports.config_port import CatalogCacheConfig


def _wait_until(predicate, timeout=2.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return predicate()


class FakeClock:
    def __init__(self, start=0.0):
        self.now = start

    def __call__(self):
        return self.now


class CountingCallback:
    """호출 횟수와 동시 실행 최대치를 기록하는 병합 콜백."""

    def __init__(self, block=None, fail_times=0):
        self.calls = 0
        self.active = 0
        self.max_active = 0
        self.entered = threading.Event()
        self._block = block
        self._fail_times = fail_times
        self._lock = threading.Lock()

    def __call__(self):
        with self._lock:
            self.calls += 1
            self.active += 1
            self.max_active = max(self.max_active, self.active)
            call_number = self.calls
        self.entered.set()
        try:
            if self._block is not None:
                self._block.wait(2.0)
            if call_number <= self._fail_times:
                raise RuntimeError('merge failed')
        finally:
            with self._lock:
                self.active -= 1


@pytest.fixture
def scheduler_factory():
    created = []

    def factory(config, callback=None, clock=time.monotonic):
        scheduler = ThreadingCatalogMergeScheduler(
            config, merge_callback=callback, clock=clock,
        )
        created.append(scheduler)
        return scheduler

    yield factory
    for scheduler in created:
        scheduler.shutdown()


class TestDebounce:
    """디바운스 병합 테스트."""

    def test_burst_coalesces_into_one_merge(
        self, scheduler_factory, fast_cache_config
    ):
        """연속 무효화는 병합 1회로 합쳐진다."""
        callback = CountingCallback()
        scheduler = scheduler_factory(fast_cache_config, callback)

        scheduler.schedule_merge('TransportBoxes')
        scheduler.schedule_merge('ErpStock')
        scheduler.schedule_merge('TransportBoxes')

        assert _wait_until(lambda: scheduler.get_last_merge_time())
        time.sleep(0.15)
        assert callback.calls == 1
        assert scheduler.pending_sources() == {}
        assert not scheduler.has_pending_merge()

    def test_pending_until_timer_fires(self, scheduler_factory):
        """타이머가 만료되기 전에는 대기 중인 병합이 있다."""
        scheduler = scheduler_factory(
            CatalogCacheConfig(debounce_delay_sec=5.0), CountingCallback()
        )

        scheduler.schedule_merge('TransportBoxes')

        assert scheduler.has_pending_merge()
        assert not scheduler.is_merge_in_progress
        assert 'TransportBoxes' in scheduler.pending_sources()

    def test_callback_registered_later(
        self, scheduler_factory, fast_cache_config
    ):
        """set_merge_callback으로 등록한 콜백이 호출된다."""
        callback = CountingCallback()
        scheduler = scheduler_factory(fast_cache_config)
        scheduler.set_merge_callback(callback)

        scheduler.schedule_merge('TransportBoxes')

        assert _wait_until(lambda: callback.calls == 1)


class TestForcedMerge:
    """최대 간격 초과 시 즉시 병합 테스트."""

    def test_overdue_burst_merges_immediately(self, scheduler_factory):
        """첫 무효화 후 max_merge_interval이 지나면 디바운스 없이 병합한다."""
        clock = FakeClock()
        callback = CountingCallback()
        scheduler = scheduler_factory(
            CatalogCacheConfig(
                debounce_delay_sec=60.0, max_merge_interval_sec=10.0,
            ),
            callback,
            clock,
        )

        scheduler.schedule_merge('TransportBoxes')
        clock.now = 5.0
        scheduler.schedule_merge('TransportBoxes')
        assert callback.calls == 0

        clock.now = 11.0
        scheduler.schedule_merge('ErpStock')

        assert _wait_until(lambda: scheduler.get_last_merge_time())
        assert callback.calls == 1
        assert not scheduler.has_pending_merge()
        assert scheduler.pending_sources() == {}

    def test_interval_counts_from_first_unmerged_invalidation(
        self, scheduler_factory
    ):
        """병합 중 들어온 무효화는 원천별 첫 시각부터 간격을 잰다."""
        clock = FakeClock()
        release = threading.Event()
        callback = CountingCallback(block=release)
        scheduler = scheduler_factory(
            CatalogCacheConfig(
                debounce_delay_sec=60.0, max_merge_interval_sec=10.0,
            ),
            callback,
            clock,
        )
        scheduler.schedule_merge('TransportBoxes')

        merge = threading.Thread(target=scheduler._execute_merge)
        merge.start()
        assert callback.entered.wait(2.0)

        clock.now = 2.0
        scheduler.schedule_merge('ErpStock')
        clock.now = 4.0
        scheduler.schedule_merge('ErpStock')
        clock.now = 5.0
        scheduler.schedule_merge('TransportBoxes')

        release.set()
        merge.join(2.0)
        assert callback.calls == 1
        assert scheduler.pending_sources() == {
            'ErpStock': 4.0, 'TransportBoxes': 5.0,
        }

        # ErpStock은 2.0부터 미처리 상태다
        clock.now = 12.5
        scheduler.schedule_merge('Manufacture')

        assert _wait_until(lambda: callback.calls == 2)
        assert _wait_until(lambda: scheduler.pending_sources() == {})


class TestMutualExclusion:
    """병합 상호 배제 테스트."""

    def test_no_concurrent_merges(self, scheduler_factory):
        """병합 중 만료된 타이머는 건너뛰고, 남은 무효화는 다시 예약된다."""
        release = threading.Event()
        callback = CountingCallback(block=release)
        scheduler = scheduler_factory(
            CatalogCacheConfig(debounce_delay_sec=0.01), callback,
        )

        scheduler.schedule_merge('TransportBoxes')
        assert callback.entered.wait(2.0)
        assert scheduler.is_merge_in_progress

        scheduler.schedule_merge('ErpStock')
        time.sleep(0.1)
        assert callback.calls == 1

        release.set()
        assert scheduler.wait_for_current_merge(timeout=2.0)
        assert _wait_until(lambda: callback.calls == 2)
        assert _wait_until(lambda: scheduler.pending_sources() == {})
        assert callback.max_active == 1

    def test_wait_when_idle_returns_immediately(
        self, scheduler_factory, fast_cache_config
    ):
        """진행 중인 병합이 없으면 바로 True를 반환한다."""
        scheduler = scheduler_factory(fast_cache_config)
        assert scheduler.wait_for_current_merge(timeout=0.01)


class TestFailure:
    """병합 실패 처리 테스트."""

    def test_failed_merge_keeps_invalidations(
        self, scheduler_factory, fast_cache_config, caplog
    ):
        """실패한 병합은 무효화 기록을 유지하고 다음 예약 때 다시 시도한다."""
        callback = CountingCallback(fail_times=1)
        scheduler = scheduler_factory(fast_cache_config, callback)

        with caplog.at_level(logging.ERROR):
            scheduler.schedule_merge('TransportBoxes')
            assert callback.entered.wait(2.0)
            assert scheduler.wait_for_current_merge(timeout=2.0)

        assert 'TransportBoxes' in scheduler.pending_sources()
        assert scheduler.get_last_merge_time() is None
        assert not scheduler.has_pending_merge()
        assert any('merge failed' in r.getMessage()
                   or r.exc_info for r in caplog.records)

        scheduler.schedule_merge('ErpStock')
        assert _wait_until(lambda: scheduler.get_last_merge_time())
        assert callback.calls == 2
        assert scheduler.pending_sources() == {}

    def test_missing_callback_logs_warning(
        self, scheduler_factory, fast_cache_config, caplog
    ):
        """콜백이 없으면 경고를 남기고 무효화는 유지된다."""
        scheduler = scheduler_factory(fast_cache_config)

        with caplog.at_level(logging.WARNING):
            scheduler.schedule_merge('TransportBoxes')
            assert _wait_until(lambda: any(
                'no merge callback' in r.getMessage()
                for r in caplog.records
            ))

        assert 'TransportBoxes' in scheduler.pending_sources()
        assert scheduler.get_last_merge_time() is None


class TestShutdown:
    """종료 처리 테스트."""

    def test_shutdown_cancels_pending_timer(self, scheduler_factory):
        """종료하면 대기 중인 병합이 실행되지 않는다."""
        callback = CountingCallback()
        scheduler = scheduler_factory(
            CatalogCacheConfig(debounce_delay_sec=0.05), callback,
        )

        scheduler.schedule_merge('TransportBoxes')
        scheduler.shutdown()
        time.sleep(0.15)

        assert callback.calls == 0
        assert not scheduler.has_pending_merge()

    def test_schedule_after_shutdown_is_ignored(
        self, scheduler_factory, fast_cache_config
    ):
        """종료 후 들어온 무효화는 기록하지 않는다."""
        scheduler = scheduler_factory(fast_cache_config, CountingCallback())
        scheduler.shutdown()

        scheduler.schedule_merge('TransportBoxes')

        assert scheduler.pending_sources() == {}
        assert not scheduler.has_pending_merge()
