"""Map filter state."""

from typing import Optional, Union
from pydantic import BaseModel, ConfigDict, field_validator

from src.models.listing import ALL_PROPERTY_TYPES


class FilterState(BaseModel):
    """Search text, category and price bounds. Empty bounds are off."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    search_text: str = ""
    property_type: str = ALL_PROPERTY_TYPES
    min_price: Optional[float] = None
    max_price: Optional[float] = None

    @field_validator("min_price", "max_price", mode="before")
    @classmethod
    def _empty_bound(cls, value: Union[str, float, None]):
        # Price inputs arrive as raw form strings
        if value is None:
            return None
        if isinstance(value, str):
            value = value.strip()
            if value == "":
                return None
        return value

    @field_validator("search_text", mode="before")
    @classmethod
    def _none_search(cls, value):
        return value or ""

    @field_validator("property_type", mode="before")
    @classmethod
    def _none_type(cls, value):
        return value or ALL_PROPERTY_TYPES

    def update(self, **changes) -> "FilterState":
        """Return a copy with the given fields replaced."""
        return FilterState(**{**self.model_dump(), **changes})

    @classmethod
    def reset(cls) -> "FilterState":
        return cls()
