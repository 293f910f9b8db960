"""Listing models."""

from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.models.geo import Coordinates


ALL_PROPERTY_TYPES = "All"


class PropertyType(str, Enum):
    """Categories offered by the listing form and the map filter."""
    BOARDING_HOUSE = "Boarding House"
    HOUSE_FOR_RENT = "House for rent"
    HOUSE_AND_LOT_FOR_SALE = "House and lot for sale"
    LOT_FOR_SALE = "Lot for sale"


class ListingStatus(str, Enum):
    """Listing availability."""
    AVAILABLE = "available"
    BOOKED = "booked"


class SocialLinks(BaseModel):
    """Owner social media handles."""
    model_config = ConfigDict(frozen=True)

    facebook: Optional[str] = None
    instagram: Optional[str] = None
    tiktok: Optional[str] = None

    @classmethod
    def from_embed(cls, embed: Any) -> Optional["SocialLinks"]:
        """PostgREST returns the social_media embed as a list or a single object."""
        if isinstance(embed, list):
            embed = embed[0] if embed else None
        if not isinstance(embed, dict):
            return None
        return cls(
            facebook=embed.get("facebook") or None,
            instagram=embed.get("instagram") or None,
            tiktok=embed.get("tiktok") or None,
        )


class OwnerProfile(BaseModel):
    """Owner snapshot embedded in a listing."""
    model_config = ConfigDict(frozen=True)

    full_name: Optional[str] = None
    phone_number: Optional[str] = None
    avatar_url: Optional[str] = None
    social_links: Optional[SocialLinks] = None


class Listing(BaseModel):
    """Property listing as shown on the map."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Listing ID")
    user_id: Optional[str] = Field(None, description="Owner user ID")
    title: str = Field(..., description="Listing title")
    description: Optional[str] = None
    price: Optional[float] = Field(None, description="Price; None means not set")
    address: str = Field("", description="Free-text address")
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    status: Optional[ListingStatus] = None
    property_type: str = Field(..., description="One of PropertyType values")
    available_slots: Optional[int] = Field(None, ge=0)
    images: list[str] = Field(default_factory=list, description="Image URLs in display order")
    owner: Optional[OwnerProfile] = None
    created_at: Optional[str] = None

    @field_validator("status", mode="before")
    @classmethod
    def _blank_status(cls, value):
        if isinstance(value, ListingStatus):
            return value
        if value not in {status.value for status in ListingStatus}:
            return None
        return value

    @property
    def is_plottable(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    @property
    def coordinates(self) -> Optional[Coordinates]:
        if not self.is_plottable:
            return None
        return Coordinates(longitude=self.longitude, latitude=self.latitude)

    @property
    def effective_status(self) -> ListingStatus:
        return self.status or ListingStatus.AVAILABLE

    @classmethod
    def from_row(cls, row: dict) -> "Listing":
        """Build a listing from a `properties` row with embedded images and owner."""
        images = [
            image["image_url"]
            for image in (row.get("property_images") or [])
            if image.get("image_url")
        ]

        owner = None
        profile = row.get("profiles")
        if isinstance(profile, dict):
            owner = OwnerProfile(
                full_name=profile.get("full_name"),
                phone_number=profile.get("phone_number"),
                avatar_url=profile.get("avatar_url"),
                social_links=SocialLinks.from_embed(profile.get("social_media")),
            )

        return cls(
            id=str(row["id"]),
            user_id=row.get("user_id"),
            title=row.get("title") or "",
            description=row.get("description"),
            price=row.get("price"),
            address=row.get("address") or "",
            latitude=row.get("latitude"),
            longitude=row.get("longitude"),
            status=row.get("status"),
            property_type=row.get("property_type") or "",
            available_slots=row.get("available_slots"),
            images=images,
            owner=owner,
            created_at=row.get("created_at"),
        )


def _blank_to_none(value):
    if isinstance(value, str) and value.strip() == "":
        return None
    return value


class ListingFields(BaseModel):
    """Owner-editable listing fields as submitted by the listing form."""
    title: Optional[str] = None
    description: Optional[str] = None
    property_type: Optional[str] = None
    price: Optional[float] = None
    address: Optional[str] = None
    available_slots: Optional[int] = Field(None, ge=0)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)

    @field_validator("price", "available_slots", "latitude", "longitude", "description", mode="before")
    @classmethod
    def _blank_numbers(cls, value):
        return _blank_to_none(value)

    @field_validator("property_type", mode="before")
    @classmethod
    def _known_type(cls, value):
        value = _blank_to_none(value)
        if value is not None and value not in {member.value for member in PropertyType}:
            raise ValueError(f"Unknown property type: {value}")
        return value

    def missing_required(self) -> list[str]:
        """Names of required fields that are empty."""
        return [
            name for name in ("title", "property_type", "address")
            if not (getattr(self, name) or "").strip()
        ]

    def to_row(self) -> dict:
        return self.model_dump()
