"""Map session - the per-page store wiring discovery, selection and camera together."""

import asyncio
from typing import Awaitable, Callable, Optional

from src.models.filters import FilterState
from src.models.geo import UserPosition
from src.models.listing import Listing
from src.models.map_view import MapStyle
from src.services.filter_engine import visible_listings
from src.services.geolocation import GeolocationProvider, read_position
from src.services.overlay_renderer import Primitive, render_overlays
from src.services.route_service import RouteService
from src.services.selection_controller import SelectionController, SelectionSnapshot
from src.services.viewport_controller import ViewportController
from src.utils.app_config import AppConfig
from src.utils.errors import NotFoundError, StayKoError
from src.utils.logging import correlation_context, get_structured_logger

logger = get_structured_logger(__name__)

ListingSource = Callable[[], Awaitable[list[Listing]]]


class MapSession:
    """
    Everything one map page needs, created on mount and stopped on leave.

    Reads go through properties; every mutation goes through a method so
    renderers never touch controller state directly.
    """

    def __init__(
        self,
        listing_source: ListingSource,
        route_service: RouteService,
        geolocation: GeolocationProvider,
        config: Optional[AppConfig] = None,
    ):
        self.config = config or AppConfig.from_env()
        self.listing_source = listing_source
        self.geolocation = geolocation
        self.selection = SelectionController(route_service)
        self.viewport = ViewportController(self.config)
        self.listings: list[Listing] = []
        self.filters = FilterState()
        self.message: Optional[str] = None
        self._started = False

    async def __aenter__(self) -> "MapSession":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.stop()
        return False

    async def start(self) -> None:
        """Load listings and read the device position, independently and concurrently."""
        if self._started:
            return
        self._started = True
        with correlation_context():
            await asyncio.gather(self._load_listings(), self._locate_user())

    async def _load_listings(self) -> None:
        try:
            self.listings = list(await self.listing_source())
            logger.info("Listings loaded", listing_count=len(self.listings))
        except StayKoError as e:
            self.listings = []
            self.message = e.user_message
            logger.error("Failed to load listings", error=str(e))

    async def _locate_user(self) -> None:
        position = await read_position(self.geolocation, self.config.geolocation_timeout_seconds)
        if position is None:
            return
        self.set_user_position(position)

    def set_user_position(self, position: UserPosition) -> SelectionSnapshot:
        self.viewport.on_user_located(position)
        return self.selection.set_user_position(position)

    async def stop(self) -> None:
        self.selection.shutdown()
        self._started = False

    @property
    def visible_listings(self) -> list[Listing]:
        return visible_listings(self.listings, self.filters)

    @property
    def state(self) -> SelectionSnapshot:
        return self.selection.snapshot()

    def find_listing(self, listing_id: str) -> Listing:
        for listing in self.listings:
            if listing.id == listing_id:
                return listing
        raise NotFoundError(f"Listing not loaded: {listing_id}", user_message="Listing not found")

    def select(self, listing: Listing) -> SelectionSnapshot:
        """Marker or sidebar click: open the card, fly there, maybe fetch a route."""
        self.viewport.on_listing_focused(listing)
        return self.selection.select(listing)

    def select_by_id(self, listing_id: str) -> SelectionSnapshot:
        return self.select(self.find_listing(listing_id))

    def close(self) -> SelectionSnapshot:
        return self.selection.close()

    def clear_route(self) -> SelectionSnapshot:
        return self.selection.clear_route()

    def update_filters(self, **changes) -> FilterState:
        self.filters = self.filters.update(**changes)
        return self.filters

    def reset_filters(self) -> FilterState:
        self.filters = FilterState.reset()
        return self.filters

    def set_style(self, style: MapStyle) -> None:
        self.viewport.set_style(style)

    def next_image(self) -> int:
        return self.selection.panel.next(self._selected_images())

    def previous_image(self) -> int:
        return self.selection.panel.previous(self._selected_images())

    def maximize_image(self) -> None:
        self.selection.panel.maximize(self._selected_images())

    def minimize_image(self) -> None:
        self.selection.panel.minimize()

    def copy_owner_phone(self, clipboard: Callable[[str], None]) -> bool:
        listing = self.selection.selection
        if listing is None or listing.owner is None:
            return False
        return self.selection.panel.copy_phone(listing.owner.phone_number, clipboard)

    def _selected_images(self) -> list[str]:
        listing = self.selection.selection
        return listing.images if listing is not None else []

    def _routed_listing(self) -> Optional[Listing]:
        route = self.selection.route
        if route is None:
            return None
        try:
            return self.find_listing(route.associated_listing_id)
        except NotFoundError:
            return None

    def overlays(self) -> list[Primitive]:
        return render_overlays(
            self.selection.user_position,
            self.visible_listings,
            self.selection.route,
            self._routed_listing(),
        )
