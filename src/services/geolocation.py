"""Geolocation provider - one-shot read of the user's position."""

import asyncio
from typing import Optional, Protocol

from src.models.geo import UserPosition
from src.utils.logging import get_structured_logger, mask_coordinates

logger = get_structured_logger(__name__)


class GeolocationProvider(Protocol):
    async def read(self) -> UserPosition:
        ...


class FixedPositionProvider:
    """Position supplied by the client (e.g. browser coordinates in a request)."""

    def __init__(self, position: Optional[UserPosition]):
        self.position = position

    async def read(self) -> UserPosition:
        if self.position is None:
            raise LookupError("position unavailable")
        return self.position


async def read_position(provider: GeolocationProvider, timeout_seconds: float) -> Optional[UserPosition]:
    """
    Read the position once.

    Denied permission, provider errors and timeouts all yield None; the
    caller treats that as "routing unavailable". No retry.
    """
    try:
        position = await asyncio.wait_for(provider.read(), timeout=timeout_seconds)
    except asyncio.TimeoutError:
        logger.info("Geolocation timed out", timeout_seconds=timeout_seconds)
        return None
    except Exception as e:
        logger.info("Geolocation unavailable", error=str(e))
        return None

    logger.debug(
        "Geolocation acquired",
        position=mask_coordinates(position.longitude, position.latitude)
    )
    return position
