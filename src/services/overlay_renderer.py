"""Marker/overlay renderer - map primitives derived from session state."""

from typing import Iterable, Literal, Optional, Union
from pydantic import BaseModel

from src.models.geo import Coordinates, RouteResult
from src.models.listing import Listing, ListingStatus

AVAILABLE_COLOR = "#16a34a"
BOOKED_COLOR = "#dc2626"
USER_COLOR = "#3b82f6"
ROUTE_COLOR = "#22c55e"
ROUTE_WIDTH = 4
ROUTE_OPACITY = 0.8
BADGE_OFFSET = (0, -50)

STATUS_LABELS = {
    ListingStatus.AVAILABLE: "Available",
    ListingStatus.BOOKED: "Booked",
}


class UserMarker(BaseModel):
    kind: Literal["user_marker"] = "user_marker"
    position: list[float]
    color: str = USER_COLOR


class ListingMarker(BaseModel):
    kind: Literal["listing_marker"] = "listing_marker"
    listing_id: str
    position: list[float]
    color: str
    status_label: str
    price_label: Optional[str] = None
    on_click: str = "select"
    # Marker clicks must not fall through to the map
    stop_propagation: bool = True


class RoutePolyline(BaseModel):
    kind: Literal["route_polyline"] = "route_polyline"
    coordinates: list[list[float]]
    color: str = ROUTE_COLOR
    width: int = ROUTE_WIDTH
    opacity: float = ROUTE_OPACITY


class RouteBadge(BaseModel):
    kind: Literal["route_badge"] = "route_badge"
    listing_id: str
    position: list[float]
    distance_label: str
    duration_label: str
    offset: tuple[int, int] = BADGE_OFFSET
    on_dismiss: str = "clear_route"
    stop_propagation: bool = True


Primitive = Union[UserMarker, ListingMarker, RoutePolyline, RouteBadge]


def _price_label(price: Optional[float]) -> Optional[str]:
    if price is None:
        return None
    return f"₱{price:,.0f}" if float(price).is_integer() else f"₱{price:,.2f}"


def listing_marker(listing: Listing) -> ListingMarker:
    status = listing.effective_status
    return ListingMarker(
        listing_id=listing.id,
        position=listing.coordinates.as_lon_lat(),
        color=BOOKED_COLOR if status is ListingStatus.BOOKED else AVAILABLE_COLOR,
        status_label=STATUS_LABELS[status],
        price_label=_price_label(listing.price),
    )


def render_overlays(
    user_position: Optional[Coordinates],
    visible: Iterable[Listing],
    route: Optional[RouteResult],
    routed_listing: Optional[Listing] = None,
) -> list[Primitive]:
    """
    Primitives in paint order: user, listings, route line, route badge.

    ``visible`` is the filtered set; non-plottable entries are skipped.
    ``routed_listing`` anchors the badge and may be filtered out of
    ``visible`` without hiding the route.
    """
    primitives: list[Primitive] = []

    if user_position is not None:
        primitives.append(UserMarker(position=user_position.as_lon_lat()))

    for listing in visible:
        if listing.is_plottable:
            primitives.append(listing_marker(listing))

    if route is not None and route.is_drawable:
        primitives.append(RoutePolyline(coordinates=route.polyline))

        if (
            routed_listing is not None
            and routed_listing.id == route.associated_listing_id
            and routed_listing.is_plottable
        ):
            primitives.append(RouteBadge(
                listing_id=routed_listing.id,
                position=routed_listing.coordinates.as_lon_lat(),
                distance_label=route.distance_label,
                duration_label=route.duration_label,
            ))

    return primitives
