"""Reverse geocoding for the listing form (Nominatim)."""

from typing import Optional
import httpx

from src.models.geo import Coordinates
from src.utils.app_config import AppConfig
from src.utils.errors import NetworkError
from src.utils.logging import get_structured_logger, timed

logger = get_structured_logger(__name__)


def coordinate_fallback(coords: Coordinates) -> str:
    """Editable ``"lat, lon"`` string used when no address is available."""
    return f"{coords.latitude:.6f}, {coords.longitude:.6f}"


@timed("reverse_geocode", logger=logger)
async def reverse_geocode(
    coords: Coordinates,
    config: Optional[AppConfig] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> str:
    """Look up a display address for a point. Raises NetworkError on failure."""
    config = config or AppConfig.from_env()
    url = f"{config.nominatim_url.rstrip('/')}/reverse"
    params = {
        "lat": coords.latitude,
        "lon": coords.longitude,
        "format": "jsonv2",
        "addressdetails": 0,
    }
    headers = {"User-Agent": config.geocoder_user_agent}

    try:
        if client is not None:
            response = await client.get(url, params=params, headers=headers)
        else:
            async with httpx.AsyncClient(timeout=config.http_timeout_seconds) as own_client:
                response = await own_client.get(url, params=params, headers=headers)
        response.raise_for_status()
        data = response.json()
    except (httpx.HTTPError, ValueError) as e:
        raise NetworkError(f"Reverse geocoding failed: {e}")

    address = data.get("display_name") if isinstance(data, dict) else None
    if not address:
        raise NetworkError(f"Reverse geocoding returned no address: {data.get('error') if isinstance(data, dict) else data}")
    return address


async def address_or_fallback(
    coords: Coordinates,
    config: Optional[AppConfig] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> str:
    """Best-effort address; degrades to the coordinate string."""
    try:
        return await reverse_geocode(coords, config=config, client=client)
    except NetworkError as e:
        logger.info("Reverse geocoding unavailable, using coordinates", error=str(e))
        return coordinate_fallback(coords)
