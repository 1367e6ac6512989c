"""카탈로그 캐시 인프라."""

from heblo_warehouse.infra.cache.catalog_cache import CatalogCache

__all__ = ['CatalogCache']
