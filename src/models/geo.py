"""Geographic primitives and route results."""

from decimal import Decimal, ROUND_HALF_UP
from pydantic import BaseModel, ConfigDict, Field


class Coordinates(BaseModel):
    """A WGS84 point. Map and routing APIs order it [lon, lat]."""
    model_config = ConfigDict(frozen=True)

    longitude: float = Field(..., ge=-180, le=180)
    latitude: float = Field(..., ge=-90, le=90)

    def as_lon_lat(self) -> list[float]:
        return [self.longitude, self.latitude]


# The device position read once per session
UserPosition = Coordinates


def _round_half_up(value: float, places: str) -> Decimal:
    # Rounds the exact binary value: 0.15 is stored below the tie and gives 0.1
    return Decimal(value).quantize(Decimal(places), rounding=ROUND_HALF_UP)


def format_distance(meters: float) -> str:
    """Meters to a one-decimal kilometre label, e.g. ``"10.2 km"``."""
    return f"{_round_half_up(meters / 1000, '0.1')} km"


def format_duration(seconds: float) -> str:
    """Seconds to a whole-minute label, e.g. ``"14 min"``."""
    return f"{int(_round_half_up(seconds / 60, '1'))} min"


class RouteLeg(BaseModel):
    """Raw answer from a route service."""
    polyline: list[list[float]] = Field(default_factory=list)
    distance_meters: float
    duration_seconds: float


class RouteResult(BaseModel):
    """The single live route between the user and one listing."""
    model_config = ConfigDict(frozen=True)

    associated_listing_id: str
    polyline: list[list[float]] = Field(default_factory=list)
    distance_meters: float
    duration_seconds: float
    distance_label: str
    duration_label: str

    @classmethod
    def from_leg(cls, listing_id: str, leg: RouteLeg) -> "RouteResult":
        return cls(
            associated_listing_id=listing_id,
            polyline=leg.polyline,
            distance_meters=leg.distance_meters,
            duration_seconds=leg.duration_seconds,
            distance_label=format_distance(leg.distance_meters),
            duration_label=format_duration(leg.duration_seconds),
        )

    @property
    def is_drawable(self) -> bool:
        return len(self.polyline) > 0
