# =============================================================================
# core/hotels.py  —  Hotel Search Adapter (Expedia scraping actor → hotels)
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Runs the hotel actor for one or more location descriptors and normalizes
#   the listings.  A location descriptor can be any of:
#
#     "Paris"              free text city / region
#     "region:6047843"     provider region id
#     "48.8566,2.3522"     "lat,lon" pair
#     "1234567"            provider hotel id
#
#   The actor accepts them all as-is; classify_location() only labels them
#   for the log.
#
# OUTPUT SHAPE:
#   Every hotel has a non-empty `url` and `name`.  The optional details
#   (rating, reviews, stars, price, currency, roomType, persons, image) are
#   either the right type or null.  A rating that arrives as the string
#   "4.5" becomes null: strings are not parsed into numbers.
# =============================================================================

import logging
import re
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictFloat,
    StrictInt,
    StrictStr,
    field_validator,
)

from core.adapter import SearchAdapter
from core.config import Settings, load_settings
from core.models import CoercionRules, LocationKind, NonBlankStr, PassthroughRecord, TrimmedStr
from core.providers import run_actor

logger = logging.getLogger(__name__)


class Hotel(PassthroughRecord):
    url: NonBlankStr
    name: NonBlankStr
    address: Optional[StrictStr] = None
    rating: Optional[StrictFloat] = None
    reviews: Optional[StrictInt] = None
    stars: Optional[StrictInt] = None
    price: Optional[StrictFloat] = None
    currency: Optional[StrictStr] = None
    roomType: Optional[StrictStr] = None
    persons: Optional[StrictInt] = None
    image: Optional[StrictStr] = None


_NULLABLE_DETAILS = (
    "rating", "reviews", "stars", "price", "currency", "roomType", "persons", "image",
)

HOTEL_RULES = CoercionRules(
    fallbacks={"url": "", "name": "", **dict.fromkeys(_NULLABLE_DETAILS)},
    viable=lambda record: bool(record.get("url")) and bool(record.get("name")),
)

HOTELS = SearchAdapter("hotels", Hotel, HOTEL_RULES)

DEFAULT_HOTEL_LIMIT = 5


# -----------------------------------------------------------------------------
# Location descriptors
# -----------------------------------------------------------------------------
_REGION_ID = re.compile(r"^region:\d+$", re.IGNORECASE)
_COORDINATES = re.compile(r"^\s*(-?\d+(?:\.\d+)?)\s*,\s*(-?\d+(?:\.\d+)?)\s*$")


def classify_location(descriptor: str) -> LocationKind:
    if _REGION_ID.match(descriptor):
        return LocationKind.REGION_ID
    match = _COORDINATES.match(descriptor)
    if match:
        lat, lon = float(match.group(1)), float(match.group(2))
        if -90 <= lat <= 90 and -180 <= lon <= 180:
            return LocationKind.COORDINATES
    if descriptor.isdigit():
        return LocationKind.HOTEL_ID
    return LocationKind.FREE_TEXT


class HotelSearchRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    locations: list[TrimmedStr] = Field(min_length=1)
    limit: StrictInt = Field(default=DEFAULT_HOTEL_LIMIT, ge=1)

    @field_validator("limit", mode="before")
    @classmethod
    def _default_limit(cls, value):
        return DEFAULT_HOTEL_LIMIT if value is None else value

    def to_actor_input(self) -> dict:
        return {"location": list(self.locations), "limit": self.limit}


def search_hotels(request: HotelSearchRequest, settings: Optional[Settings] = None) -> list:
    """Run the hotel actor for `request` and return normalized hotels."""
    settings = settings or load_settings()
    logger.info(
        "hotel search for %s (limit %d)",
        ", ".join(f"{loc} [{classify_location(loc).value}]" for loc in request.locations),
        request.limit,
    )
    return HOTELS.run(
        lambda: run_actor(settings.hotel_actor_id, request.to_actor_input(), settings)
    )
