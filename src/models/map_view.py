"""Map camera and style models."""

from enum import Enum
from typing import Literal, Optional
from pydantic import BaseModel, Field


class MapStyle(str, Enum):
    """Selectable basemaps."""
    DEFAULT = "default"
    BRIGHT = "bright"
    LIBERTY_3D = "liberty_3d"

    @property
    def is_3d(self) -> bool:
        return self is MapStyle.LIBERTY_3D


class Viewport(BaseModel):
    """Camera state."""
    center: list[float] = Field(..., description="[lon, lat]")
    zoom: float
    pitch: float = 0


class CameraCommand(BaseModel):
    """An imperative camera animation for the map renderer."""
    kind: Literal["fly_to", "ease_to"]
    duration_ms: int
    center: Optional[list[float]] = None
    zoom: Optional[float] = None
    pitch: Optional[float] = None
