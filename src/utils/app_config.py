"""Application configuration read from environment variables."""

import os
from typing import Optional
from pydantic import BaseModel, Field


def _parse_center(raw: str) -> tuple[float, float]:
    lon, lat = (float(part) for part in raw.split(","))
    return lon, lat


class AppConfig(BaseModel):
    """Runtime settings for adapters and the map discovery layer."""
    osrm_base_url: str = Field("https://router.project-osrm.org", description="OSRM routing server")
    nominatim_url: str = Field("https://nominatim.openstreetmap.org", description="Nominatim server")
    geocoder_user_agent: str = Field("stayko-backend/1.0", description="User-Agent sent to Nominatim")
    cloudinary_cloud_name: Optional[str] = None
    cloudinary_upload_preset: Optional[str] = None
    http_timeout_seconds: float = 10.0
    geolocation_timeout_seconds: float = 10.0

    # Map styles (default style is the map library's own)
    style_bright_url: str = "https://tiles.openfreemap.org/styles/bright"
    style_3d_url: str = "https://tiles.openfreemap.org/styles/liberty"

    # Camera
    default_center: tuple[float, float] = (126.224842, 6.952465)
    default_zoom: float = 14
    user_zoom: float = 15
    user_fly_duration_ms: int = 2000
    listing_zoom: float = 16
    listing_fly_duration_ms: int = 1500
    tilted_pitch: float = 60
    pitch_duration_ms: int = 500

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Build config from environment variables, falling back to defaults."""
        values = {}
        env_map = {
            "OSRM_BASE_URL": "osrm_base_url",
            "NOMINATIM_URL": "nominatim_url",
            "GEOCODER_USER_AGENT": "geocoder_user_agent",
            "CLOUDINARY_CLOUD_NAME": "cloudinary_cloud_name",
            "CLOUDINARY_UPLOAD_PRESET": "cloudinary_upload_preset",
            "HTTP_TIMEOUT_SECONDS": "http_timeout_seconds",
            "GEOLOCATION_TIMEOUT_SECONDS": "geolocation_timeout_seconds",
            "MAP_STYLE_BRIGHT_URL": "style_bright_url",
            "MAP_STYLE_3D_URL": "style_3d_url",
            "MAP_DEFAULT_ZOOM": "default_zoom",
        }
        for env_name, field_name in env_map.items():
            value = os.environ.get(env_name)
            if value:
                values[field_name] = value.strip()

        center = os.environ.get("MAP_DEFAULT_CENTER")
        if center:
            values["default_center"] = _parse_center(center)

        return cls(**values)
