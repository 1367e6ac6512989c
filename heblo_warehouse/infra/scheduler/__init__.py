"""병합 스케줄러 인프라 (MergeScheduler 구현)."""

from heblo_warehouse.infra.scheduler.catalog_merge_scheduler import (
    ThreadingCatalogMergeScheduler,
)

__all__ = ['ThreadingCatalogMergeScheduler']
