"""Public owner profile endpoint."""

from http.server import BaseHTTPRequestHandler
from urllib.parse import urlparse, parse_qs
import asyncio
import json

from src.services.listing_repository import list_owner_listings
from src.services.profile_repository import get_public_profile
from src.utils.errors import StayKoError, http_status_for
from src.utils.logging import correlation_context, get_structured_logger, mask_user_id
from src.utils.logging_config import LoggingConfig

LoggingConfig.setup_logging()
logger = get_structured_logger(__name__)


async def load_public_page(user_id: str) -> dict:
    """Profile and listings are independent reads; fetch them together."""
    profile, listings = await asyncio.gather(
        get_public_profile(user_id),
        list_owner_listings(user_id),
    )
    return {
        "profile": profile.model_dump(mode="json"),
        "listings": [listing.model_dump(mode="json") for listing in listings],
    }


class handler(BaseHTTPRequestHandler):
    """GET /api/profiles?id=<uuid>"""

    def _send_json(self, status: int, payload) -> None:
        self.send_response(status)
        self.send_header('Content-Type', 'application/json')
        self.end_headers()
        self.wfile.write(json.dumps(payload).encode('utf-8'))

    def do_GET(self):
        with correlation_context():
            query = parse_qs(urlparse(self.path).query)
            user_id = (query.get("id") or [""])[0]

            try:
                page = asyncio.run(load_public_page(user_id))
            except StayKoError as e:
                logger.info("Public profile unavailable", user_id=mask_user_id(user_id), error=str(e))
                self._send_json(http_status_for(e), {"error": e.user_message})
                return
            except Exception as e:
                logger.error("Error serving public profile", error=str(e), exc_info=True)
                self._send_json(500, {"error": "internal server error"})
                return

            self._send_json(200, page)
