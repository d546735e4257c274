import json
import logging
import math
from typing import Any, List

from starlette.concurrency import run_in_threadpool

from .base import WarehouseClient, Listing, ListingFilters
from ..core.config import settings
from ..core.errors import WarehouseError
from ..core.utils import fnv1a_32, seeded_rand

log = logging.getLogger(__name__)

FIELDS = """
  listing_id, title, property_type, price,
  bedrooms, bathrooms, size_sqft, view, parking_spaces,
  city, community, building,
  latitude, longitude
"""

NUMERIC_FIELDS = ("price", "bedrooms", "bathrooms", "size_sqft", "parking_spaces", "latitude", "longitude")

def _num(v: Any) -> float | int | None:
    if v is None:
        return None
    try:
        n = float(v)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(n):
        return None
    return int(n) if n.is_integer() else n

def to_listing(row: dict) -> Listing:
    """Warehouse row → Listing with numeric columns coerced and no images."""
    data = {k: row.get(k) for k in Listing.__dataclass_fields__ if k != "images"}
    for k in NUMERIC_FIELDS:
        data[k] = _num(data[k])
    return Listing(**data)

def apply_filters(listings: List[Listing], f: ListingFilters) -> List[Listing]:
    """Same predicate the SQL applies, for in-memory sources."""
    out = [
        x for x in listings
        if (f.id is None or str(x.listing_id) == f.id)
        and (f.city is None or (x.city or "").lower() == f.city.lower())
        and (f.min_price is None or (x.price is not None and x.price >= f.min_price))
        and (f.max_price is None or (x.price is not None and x.price <= f.max_price))
    ]
    out.sort(key=lambda x: x.price if x.price is not None else float("-inf"), reverse=True)
    return out[: max(0, f.limit)]

class MockWarehouse(WarehouseClient):
    """
    Synthetic listings inventory. Deterministic so pages and tests are stable.
    """
    CITIES = [("Dubai", ["Dubai Marina", "Downtown Dubai", "JVC", "Business Bay"]),
              ("Abu Dhabi", ["Al Reem Island", "Yas Island", "Saadiyat Island"])]
    TYPES = ["Apartment", "Villa", "Townhouse", "Penthouse"]
    VIEWS = ["Sea", "City", "Park", "Community"]

    def __init__(self, size: int = 60):
        self.rows = [self._row(i) for i in range(size)]

    def _row(self, i: int) -> dict:
        seed = fnv1a_32(f"listing-{i}")
        r = seeded_rand(seed, 6)
        city, communities = self.CITIES[i % len(self.CITIES)]
        community = communities[int(r[0] * len(communities)) % len(communities)]
        ptype = self.TYPES[int(r[1] * len(self.TYPES)) % len(self.TYPES)]
        beds = 1 + int(r[2] * 5)
        size = 450 + int(r[3] * 4_500)
        return {
            "listing_id": 100_000 + i,
            "title": f"{beds} BR {ptype} in {community}",
            "property_type": ptype,
            "price": 600_000 + int(r[4] * 14_400_000),
            "bedrooms": beds,
            "bathrooms": max(1, beds - 1 + int(r[5] * 2)),
            "size_sqft": size,
            "view": self.VIEWS[i % len(self.VIEWS)],
            "parking_spaces": 1 + (i % 3),
            "city": city,
            "community": community,
            "building": f"Tower {1 + i % 9}",
            "latitude": round(25.0 + r[0] * 0.4, 6),
            "longitude": round(55.0 + r[1] * 0.4, 6),
        }

    async def ping(self) -> None:
        return None

    async def query(self, filters: ListingFilters) -> List[Listing]:
        return apply_filters([to_listing(r) for r in self.rows], filters)

class BigQueryWarehouse(WarehouseClient):
    """
    Listings straight from the BigQuery table, with parameterised SQL.
    """
    def __init__(self):
        self.table = f"`{settings.BQ_PROJECT}.{settings.BQ_DATASET}.{settings.BQ_TABLE}`"
        self._client = None

    def _bq(self):
        if self._client is not None:
            return self._client
        from google.auth.exceptions import GoogleAuthError
        from google.cloud import bigquery

        credentials = None
        if settings.GCP_SERVICE_ACCOUNT_JSON:
            from google.oauth2 import service_account
            try:
                info = json.loads(settings.GCP_SERVICE_ACCOUNT_JSON)
                credentials = service_account.Credentials.from_service_account_info(info)
            except (ValueError, GoogleAuthError):
                log.exception("Failed to parse GCP_SERVICE_ACCOUNT_JSON; using default credentials")
        try:
            self._client = bigquery.Client(
                project=settings.BQ_PROJECT, location=settings.BQ_LOCATION, credentials=credentials
            )
        except GoogleAuthError as exc:
            raise WarehouseError(str(exc)) from exc
        return self._client

    def _run(self, sql: str, params: list | None = None) -> list[dict]:
        from google.api_core.exceptions import GoogleAPIError
        from google.cloud import bigquery

        job_config = bigquery.QueryJobConfig(query_parameters=params or [])
        try:
            rows = self._bq().query(sql, job_config=job_config, location=settings.BQ_LOCATION).result()
        except GoogleAPIError as exc:
            raise WarehouseError(str(exc)) from exc
        return [dict(row.items()) for row in rows]

    async def ping(self) -> None:
        await run_in_threadpool(self._run, "SELECT 1 AS ok")

    async def query(self, filters: ListingFilters) -> List[Listing]:
        from google.cloud import bigquery

        sql = f"""
            SELECT {FIELDS}
            FROM {self.table}
            WHERE (@id IS NULL OR CAST(listing_id AS STRING) = @id)
              AND (@city IS NULL OR LOWER(city) = LOWER(@city))
              AND (@minPrice IS NULL OR price >= @minPrice)
              AND (@maxPrice IS NULL OR price <= @maxPrice)
            ORDER BY price DESC
            LIMIT @limit
        """
        params = [
            bigquery.ScalarQueryParameter("id", "STRING", filters.id),
            bigquery.ScalarQueryParameter("city", "STRING", filters.city),
            bigquery.ScalarQueryParameter("minPrice", "INT64", filters.min_price),
            bigquery.ScalarQueryParameter("maxPrice", "INT64", filters.max_price),
            bigquery.ScalarQueryParameter("limit", "INT64", filters.limit),
        ]
        rows = await run_in_threadpool(self._run, sql, params)
        return [to_listing(r) for r in rows]

def warehouse_client() -> WarehouseClient:
    """
    Factory picks mock or BigQuery based on env flags.
    """
    if settings.WAREHOUSE_PROVIDER == "bigquery":
        return BigQueryWarehouse()
    return MockWarehouse()
