"""입고 작업 인프라 (StockUpGateway 구현)."""

from heblo_warehouse.infra.stock.in_memory_stock_up_gateway import (
    InMemoryStockUpGateway,
)

__all__ = ['InMemoryStockUpGateway']
