from dataclasses import asdict

from fastapi import APIRouter, Depends, Query

from ..data.base import ListingFilters, WarehouseClient
from ..data.warehouse_client import warehouse_client
from ..schemas import ListingsResponse

router = APIRouter()

# One client per process; the BigQuery client is expensive to build
_warehouse: WarehouseClient | None = None

def warehouse_dep() -> WarehouseClient:
    global _warehouse
    if _warehouse is None:
        _warehouse = warehouse_client()
    return _warehouse

@router.get("/health")
async def health(wh: WarehouseClient = Depends(warehouse_dep)):
    await wh.ping()
    return {"ok": True, "bigquery": True}

@router.get("/listings", response_model=ListingsResponse)
async def listings(
    city: str | None = None,
    min_price: int | None = Query(default=None, alias="minPrice"),
    max_price: int | None = Query(default=None, alias="maxPrice"),
    limit: int = Query(default=30, ge=0),
    id: str | None = None,
    wh: WarehouseClient = Depends(warehouse_dep),
):
    filters = ListingFilters(
        id=id or None, city=city or None, min_price=min_price, max_price=max_price, limit=limit
    )
    rows = await wh.query(filters)
    return {"ok": True, "count": len(rows), "listings": [asdict(r) for r in rows]}
