"""Selection & route controller - owns the open listing and the live route."""

import asyncio
from typing import Optional
from pydantic import BaseModel, ConfigDict

from src.models.geo import Coordinates, RouteResult, UserPosition
from src.models.listing import Listing
from src.services.detail_panel import DetailPanel
from src.services.route_service import RouteService
from src.utils.errors import NetworkError
from src.utils.logging import get_structured_logger, log_timing, mask_coordinates

logger = get_structured_logger(__name__)


class SelectionSnapshot(BaseModel):
    """Read-only view of controller state handed to renderers."""
    model_config = ConfigDict(frozen=True)

    selection: Optional[Listing] = None
    route: Optional[RouteResult] = None
    route_loading: bool = False
    user_position: Optional[UserPosition] = None
    current_image_index: int = 0
    is_maximized: bool = False

    @property
    def route_active(self) -> bool:
        return self.route is not None and self.route.is_drawable


class SelectionController:
    """
    State machine behind marker clicks.

    Selection and route are independent: closing the detail card keeps
    the route on the map until ``clear_route()`` or until a route for a
    different plottable listing replaces it. Route fetches run as asyncio
    tasks; a response is applied only while it still matches the
    selection that asked for it.
    """

    def __init__(self, route_service: RouteService, panel: Optional[DetailPanel] = None):
        self.route_service = route_service
        self.panel = panel or DetailPanel()
        self.selection: Optional[Listing] = None
        self.route: Optional[RouteResult] = None
        self.user_position: Optional[UserPosition] = None
        self._pending: dict[str, asyncio.Task] = {}  # listing_id -> fetch task
        self._last_selected_id: Optional[str] = None

    @property
    def route_loading(self) -> bool:
        return bool(self._pending)

    def snapshot(self) -> SelectionSnapshot:
        return SelectionSnapshot(
            selection=self.selection,
            route=self.route,
            route_loading=self.route_loading,
            user_position=self.user_position,
            current_image_index=self.panel.current_image_index,
            is_maximized=self.panel.is_maximized,
        )

    def select(self, listing: Listing) -> SelectionSnapshot:
        """Open a listing and evaluate whether a route fetch is needed."""
        self.selection = listing
        self._last_selected_id = listing.id
        self.panel.reset()
        logger.debug("Listing selected", listing_id=listing.id, plottable=listing.is_plottable)
        self.evaluate_route()
        return self.snapshot()

    def close(self) -> SelectionSnapshot:
        """Dismiss the detail card. The route stays."""
        self.selection = None
        self.panel.minimize()
        return self.snapshot()

    def clear_route(self) -> SelectionSnapshot:
        """Remove the route line and its distance/duration badge."""
        if self.route is not None:
            logger.debug("Route cleared", listing_id=self.route.associated_listing_id)
        self.route = None
        return self.snapshot()

    def set_user_position(self, position: Optional[UserPosition]) -> SelectionSnapshot:
        self.user_position = position
        self.evaluate_route()
        return self.snapshot()

    def evaluate_route(self) -> Optional[asyncio.Task]:
        """
        Start a route fetch for the selection if one is warranted.

        Returns the fetch task (new or already in flight), or None when no
        fetch is needed or possible.
        """
        listing = self.selection
        if listing is None or self.user_position is None or not listing.is_plottable:
            return None

        # No TTL: a route already drawn for this listing is reused as-is
        if self.route is not None and self.route.associated_listing_id == listing.id:
            logger.debug("Route cache hit", listing_id=listing.id)
            return None

        if listing.id in self._pending:
            return self._pending[listing.id]

        task = asyncio.get_running_loop().create_task(
            self._fetch_route(listing, self.user_position)
        )
        self._pending[listing.id] = task
        return task

    async def _fetch_route(self, listing: Listing, origin: Coordinates) -> None:
        destination = listing.coordinates
        try:
            with log_timing(
                "fetch_route",
                logger=logger,
                listing_id=listing.id,
                origin=mask_coordinates(origin.longitude, origin.latitude)
            ):
                leg = await self.route_service.route(origin, destination)
        except NetworkError as e:
            logger.warning("Route unavailable", listing_id=listing.id, error=str(e))
            return
        except Exception as e:
            logger.error("Unexpected route service failure", listing_id=listing.id, error=str(e), exc_info=True)
            return
        finally:
            self._pending.pop(listing.id, None)

        if not self._is_current(listing.id):
            logger.info(
                "Discarding stale route response",
                listing_id=listing.id,
                selected_listing_id=self.selection.id if self.selection else None
            )
            return

        self.route = RouteResult.from_leg(listing.id, leg)
        logger.info(
            "Route updated",
            listing_id=listing.id,
            distance=self.route.distance_label,
            duration=self.route.duration_label,
            points=len(self.route.polyline)
        )

    def _is_current(self, listing_id: str) -> bool:
        if self.selection is not None:
            return self.selection.id == listing_id
        # Card closed while the request was out: only the listing opened last may land
        return self._last_selected_id == listing_id

    async def wait_for_pending(self) -> None:
        """Wait until every in-flight route fetch has settled."""
        while self._pending:
            await asyncio.gather(*list(self._pending.values()), return_exceptions=True)

    def shutdown(self) -> None:
        """Cancel in-flight fetches; used when the owning session is torn down."""
        for task in list(self._pending.values()):
            task.cancel()
        self._pending.clear()
        self.panel.dispose()
