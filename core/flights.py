# =============================================================================
# core/flights.py  —  Flight Search Adapter (Kayak scraping actor → flights)
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   1. Validates a FlightSearchRequest (dates, sort key, counts).
#   2. Maps it onto the actor's dotted input keys ("origin.0", "depart.1",
#      "filters.non_stop", ...).  A return date adds a second, reversed leg.
#   3. Runs the actor and pushes its dataset items through the normalizer.
#
# OUTPUT SHAPE:
#   Each flight keeps every vendor field (passthrough) and is guaranteed to
#   have a non-empty `url`.  `displayAirline`, `legs`, `price` and `provider`
#   are present only when usable.
#
# WHERE THE PRICE LIVES:
#   Listings frequently carry no top-level price.  The bookable price and the
#   site selling it sit in the first fare option:
#       optionsByFare[0].options[0].displayPrice
#       optionsByFare[0].options[0].providerInfo.displayName
#   Tier 2 reads them from there.
# =============================================================================

import logging
from datetime import date
from typing import Optional

from pydantic import (
    AnyUrl,
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    model_validator,
)

from core.adapter import SearchAdapter
from core.coercion import dig
from core.config import Settings, load_settings
from core.models import CoercionRules, FlightSort, NonBlankStr, PassthroughRecord, TrimmedStr
from core.providers import run_actor

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Output schema (leaves first)
# -----------------------------------------------------------------------------
class Airline(PassthroughRecord):
    name: Optional[StrictStr] = None
    code: Optional[StrictStr] = None
    logoUrl: Optional[AnyUrl] = None


class Airport(PassthroughRecord):
    code: Optional[StrictStr] = None
    cityName: Optional[StrictStr] = None
    displayName: Optional[StrictStr] = None


class FlightEndpoint(PassthroughRecord):
    airport: Optional[Airport] = None
    isoDateTimeLocal: Optional[StrictStr] = None


class Segment(PassthroughRecord):
    airline: Optional[Airline] = None
    arrival: Optional[FlightEndpoint] = None
    departure: Optional[FlightEndpoint] = None
    durationMinutes: Optional[StrictFloat] = None
    flightNumber: Optional[StrictStr] = None


class Leg(PassthroughRecord):
    legDurationDisplay: Optional[StrictStr] = None
    legDurationMinutes: Optional[StrictFloat] = None
    segments: Optional[list[Segment]] = None


class Flight(PassthroughRecord):
    url: NonBlankStr
    displayAirline: Optional[Airline] = None
    legs: Optional[list[Leg]] = None
    price: Optional[StrictStr] = None        # display price, e.g. "$245"
    provider: Optional[StrictStr] = None     # e.g. "Kiwi.com"


def _first_fare_option(raw):
    return dig(raw, "optionsByFare", 0, "options", 0)


FLIGHT_RULES = CoercionRules(
    extractors={
        "price": lambda raw: dig(_first_fare_option(raw), "displayPrice"),
        "provider": lambda raw: dig(_first_fare_option(raw), "providerInfo", "displayName"),
    },
    fallbacks={"url": ""},
    viable=lambda record: bool(record.get("url")),
)

FLIGHTS = SearchAdapter("flights", Flight, FLIGHT_RULES)


# -----------------------------------------------------------------------------
# FlightSearchRequest — validated tool input
# -----------------------------------------------------------------------------
class FlightSearchRequest(BaseModel):
    """Search parameters for one- or two-leg flight searches."""

    model_config = ConfigDict(frozen=True)

    origin: TrimmedStr                      # airport code ("SFO") or city
    destination: TrimmedStr                 # airport code ("JFK") or city
    departure_date: date                    # "2025-07-15"
    return_date: Optional[date] = None      # round trip when set
    limit: StrictInt = Field(default=10, ge=1)
    currency: TrimmedStr = "USD"
    sort: FlightSort = "best"
    non_stop: Optional[StrictBool] = None
    one_stop: Optional[StrictBool] = None
    two_plus_stops: Optional[StrictBool] = None
    adults: StrictInt = Field(default=1, ge=1)

    @model_validator(mode="after")
    def _return_not_before_departure(self):
        if self.return_date is not None and self.return_date < self.departure_date:
            raise ValueError("return_date cannot be before departure_date")
        return self

    def to_actor_input(self) -> dict:
        """Translate to the actor's dotted-key input format."""
        actor_input = {
            "origin.0": self.origin,
            "target.0": self.destination,
            "depart.0": self.departure_date.isoformat(),
            "limit": self.limit,
            "currency": self.currency,
            "sort": self.sort,
            "filters.adults": self.adults,
        }
        # The return leg flies the route backwards.
        if self.return_date:
            actor_input["origin.1"] = self.destination
            actor_input["target.1"] = self.origin
            actor_input["depart.1"] = self.return_date.isoformat()

        # Unset filters are left out rather than sent as null.
        if self.non_stop is not None:
            actor_input["filters.non_stop"] = self.non_stop
        if self.one_stop is not None:
            actor_input["filters.one_stop"] = self.one_stop
        if self.two_plus_stops is not None:
            actor_input["filters.two_stop"] = self.two_plus_stops
        return actor_input


def search_flights(request: FlightSearchRequest, settings: Optional[Settings] = None) -> list:
    """Run the flight actor for `request` and return normalized flights."""
    settings = settings or load_settings()
    logger.info(
        "flight search %s -> %s on %s%s",
        request.origin, request.destination, request.departure_date,
        f" (return {request.return_date})" if request.return_date else "",
    )
    return FLIGHTS.run(
        lambda: run_actor(settings.flight_actor_id, request.to_actor_input(), settings)
    )
