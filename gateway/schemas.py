from typing import Any
from pydantic import BaseModel, ConfigDict, Field

class PredictResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    ok: bool = True
    predicted_price: float | None = Field(default=None, alias="predictedPrice")
    predicted_price_raw: float | None = Field(default=None, alias="predictedPriceRaw")
    used_rule: str | None = Field(default=None, alias="usedRule")
    raw_response: Any = Field(default=None, alias="rawResponse")

class ListingOut(BaseModel):
    listing_id: Any
    title: str | None = None
    property_type: str | None = None
    price: float | None = None
    bedrooms: float | None = None
    bathrooms: float | None = None
    size_sqft: float | None = None
    view: str | None = None
    parking_spaces: float | None = None
    city: str | None = None
    community: str | None = None
    building: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    images: list[str] = []

class ListingsResponse(BaseModel):
    ok: bool = True
    count: int
    listings: list[ListingOut]

class ChatResponse(BaseModel):
    ok: bool = True
    answer: str
    raw: str | None = None
