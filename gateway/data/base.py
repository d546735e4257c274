from typing import Protocol, List, Optional, Any
from dataclasses import dataclass, field

# ----- Data shapes (thin & explicit) -----

@dataclass
class ListingFilters:
    id: Optional[str] = None
    city: Optional[str] = None
    min_price: Optional[int] = None
    max_price: Optional[int] = None
    limit: int = 30

@dataclass
class Listing:
    listing_id: Any
    title: Optional[str] = None
    property_type: Optional[str] = None
    price: Optional[float] = None
    bedrooms: Optional[float] = None
    bathrooms: Optional[float] = None
    size_sqft: Optional[float] = None
    view: Optional[str] = None
    parking_spaces: Optional[float] = None
    city: Optional[str] = None
    community: Optional[str] = None
    building: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    images: List[str] = field(default_factory=list)

@dataclass
class UpstreamResponse:
    status: int
    json: Any            # parsed body, or {"raw": text} when it isn't JSON
    parsed: bool = True  # False when the body could not be decoded

@dataclass
class ChatReply:
    ok: bool
    answer: str
    raw: str
    error: Optional[str] = None

# ----- Protocols (interfaces) -----

class WarehouseClient(Protocol):
    async def ping(self) -> None: ...
    async def query(self, filters: ListingFilters) -> List[Listing]: ...

class ChatClient(Protocol):
    async def ask(self, question: str, session_id: str, prefs: dict) -> ChatReply: ...
