"""Map viewport controller - camera state and fly/ease commands."""

from typing import Optional

from src.models.geo import Coordinates
from src.models.listing import Listing
from src.models.map_view import CameraCommand, MapStyle, Viewport
from src.utils.app_config import AppConfig


class ViewportController:
    """
    Tracks the camera and records the animations the map should run.

    Commands accumulate in ``commands`` until the renderer drains them with
    ``take_commands()``. Filter changes never reach this class.
    """

    def __init__(self, config: Optional[AppConfig] = None):
        self.config = config or AppConfig.from_env()
        self.viewport = Viewport(center=list(self.config.default_center), zoom=self.config.default_zoom, pitch=0)
        self.style = MapStyle.DEFAULT
        self.commands: list[CameraCommand] = []
        self._located = False

    def fly_to(self, center: list[float], zoom: float, duration_ms: int) -> CameraCommand:
        command = CameraCommand(kind="fly_to", center=list(center), zoom=zoom, duration_ms=duration_ms)
        self.viewport = self.viewport.model_copy(update={"center": list(center), "zoom": zoom})
        self.commands.append(command)
        return command

    def ease_to(self, pitch: float, duration_ms: int) -> CameraCommand:
        command = CameraCommand(kind="ease_to", pitch=pitch, duration_ms=duration_ms)
        self.viewport = self.viewport.model_copy(update={"pitch": pitch})
        self.commands.append(command)
        return command

    def on_user_located(self, position: Optional[Coordinates]) -> Optional[CameraCommand]:
        """Fly to the user on the first successful read only."""
        if position is None or self._located:
            return None
        self._located = True
        return self.fly_to(position.as_lon_lat(), self.config.user_zoom, self.config.user_fly_duration_ms)

    def on_listing_focused(self, listing: Listing) -> Optional[CameraCommand]:
        coords = listing.coordinates
        if coords is None:
            return None
        return self.fly_to(coords.as_lon_lat(), self.config.listing_zoom, self.config.listing_fly_duration_ms)

    def set_style(self, style: MapStyle) -> Optional[CameraCommand]:
        """Switch basemap; tilt into 3D and flatten out of it."""
        previous = self.style
        self.style = style
        if previous.is_3d == style.is_3d:
            return None
        pitch = self.config.tilted_pitch if style.is_3d else 0
        return self.ease_to(pitch, self.config.pitch_duration_ms)

    def style_url(self, style: Optional[MapStyle] = None) -> Optional[str]:
        style = style or self.style
        if style is MapStyle.BRIGHT:
            return self.config.style_bright_url
        if style is MapStyle.LIBERTY_3D:
            return self.config.style_3d_url
        return None

    def take_commands(self) -> list[CameraCommand]:
        commands, self.commands = self.commands, []
        return commands
