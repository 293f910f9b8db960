"""Filter engine - reduce the listing set to what the map and sidebar show."""

from typing import Iterable, Optional

from src.models.filters import FilterState
from src.models.listing import ALL_PROPERTY_TYPES, Listing


def _matches_search(listing: Listing, search_text: str) -> bool:
    if not search_text:
        return True
    needle = search_text.lower()
    return needle in listing.title.lower() or needle in listing.address.lower()


def _matches_type(listing: Listing, property_type: str) -> bool:
    return property_type == ALL_PROPERTY_TYPES or listing.property_type == property_type


def _within_min(price: Optional[float], bound: Optional[float]) -> bool:
    # A listing without a price cannot satisfy an active bound
    if bound is None:
        return True
    return price is not None and price >= bound


def _within_max(price: Optional[float], bound: Optional[float]) -> bool:
    if bound is None:
        return True
    return price is not None and price <= bound


def matches(listing: Listing, filters: FilterState) -> bool:
    """True when every filter clause accepts the listing."""
    return (
        _matches_search(listing, filters.search_text)
        and _matches_type(listing, filters.property_type)
        and _within_min(listing.price, filters.min_price)
        and _within_max(listing.price, filters.max_price)
    )


def visible_listings(listings: Iterable[Listing], filters: FilterState) -> list[Listing]:
    """
    Listings that pass the filter, in their original order.

    Pure: the input is never mutated and the same input always yields the
    same subsequence.
    """
    return [listing for listing in listings if matches(listing, filters)]


def plottable_listings(listings: Iterable[Listing]) -> list[Listing]:
    """Listings with both coordinates set; only these get markers or routes."""
    return [listing for listing in listings if listing.is_plottable]
