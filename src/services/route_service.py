"""Route service adapter - road routes from the public OSRM server."""

from typing import Optional, Protocol
import httpx

from src.models.geo import Coordinates, RouteLeg
from src.utils.app_config import AppConfig
from src.utils.errors import NetworkError
from src.utils.logging import get_structured_logger, mask_coordinates

logger = get_structured_logger(__name__)


class RouteService(Protocol):
    """Anything that can compute a driving route between two points."""

    async def route(self, origin: Coordinates, destination: Coordinates) -> RouteLeg:
        ...


class OsrmRouteService:
    """OSRM `route/v1/driving` client."""

    def __init__(self, config: Optional[AppConfig] = None, client: Optional[httpx.AsyncClient] = None):
        self.config = config or AppConfig.from_env()
        self._client = client

    def build_url(self, origin: Coordinates, destination: Coordinates) -> str:
        base = self.config.osrm_base_url.rstrip("/")
        return (
            f"{base}/route/v1/driving/"
            f"{origin.longitude},{origin.latitude};{destination.longitude},{destination.latitude}"
        )

    async def route(self, origin: Coordinates, destination: Coordinates) -> RouteLeg:
        """
        Fetch the fastest driving route.

        Raises NetworkError on transport failures, non-2xx answers and
        answers without a route.
        """
        url = self.build_url(origin, destination)
        params = {"overview": "full", "geometries": "geojson"}

        try:
            if self._client is not None:
                response = await self._client.get(url, params=params)
            else:
                async with httpx.AsyncClient(timeout=self.config.http_timeout_seconds) as client:
                    response = await client.get(url, params=params)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(
                "Route request failed",
                origin=mask_coordinates(origin.longitude, origin.latitude),
                error=str(e)
            )
            raise NetworkError(f"Route request failed: {e}")

        if not isinstance(data, dict):
            raise NetworkError("Route service returned a malformed payload")

        routes = data.get("routes") or []
        if not routes:
            logger.info("Route service returned no routes", code=data.get("code"))
            raise NetworkError(f"No route found: {data.get('code')}")

        best = routes[0]
        return RouteLeg(
            polyline=(best.get("geometry") or {}).get("coordinates") or [],
            distance_meters=best.get("distance", 0),
            duration_seconds=best.get("duration", 0),
        )
