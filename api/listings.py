"""Listing feed endpoint for the map and the owner pages."""

from http.server import BaseHTTPRequestHandler
from urllib.parse import urlparse, parse_qs
import asyncio
import json

from src.models.filters import FilterState
from src.services.filter_engine import visible_listings
from src.services.listing_repository import list_all_listings, list_owner_listings
from src.utils.errors import StayKoError, http_status_for
from src.utils.logging import correlation_context, get_structured_logger
from src.utils.logging_config import LoggingConfig

LoggingConfig.setup_logging()
logger = get_structured_logger(__name__)


def parse_filters(query: dict[str, list[str]]) -> FilterState:
    """Map ``q``, ``type``, ``min_price`` and ``max_price`` query params to a FilterState."""
    def first(name: str):
        values = query.get(name)
        return values[0] if values else None

    return FilterState(
        search_text=first("q"),
        property_type=first("type"),
        min_price=first("min_price"),
        max_price=first("max_price"),
    )


async def load_listings(query: dict[str, list[str]], filters: FilterState) -> list[dict]:
    owner = (query.get("owner") or [None])[0]
    listings = await list_owner_listings(owner) if owner else await list_all_listings()
    return [listing.model_dump(mode="json") for listing in visible_listings(listings, filters)]


class handler(BaseHTTPRequestHandler):
    """GET /api/listings?q=&type=&min_price=&max_price=&owner="""

    def _send_json(self, status: int, payload) -> None:
        self.send_response(status)
        self.send_header('Content-Type', 'application/json')
        self.end_headers()
        self.wfile.write(json.dumps(payload).encode('utf-8'))

    def do_GET(self):
        with correlation_context():
            query = parse_qs(urlparse(self.path).query)
            try:
                filters = parse_filters(query)
            except ValueError as e:
                self._send_json(400, {"error": "invalid filter", "detail": str(e)})
                return

            try:
                listings = asyncio.run(load_listings(query, filters))
            except StayKoError as e:
                self._send_json(http_status_for(e), {"error": e.user_message})
                return
            except Exception as e:
                logger.error("Error serving listings", error=str(e), exc_info=True)
                self._send_json(500, {"error": "internal server error"})
                return

            logger.info(
                "Listings served",
                listing_count=len(listings),
                property_type=filters.property_type,
                has_search=bool(filters.search_text)
            )
            self._send_json(200, {"listings": listings})
