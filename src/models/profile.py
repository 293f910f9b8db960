"""Profile models - listing owners and signed-in users."""

from typing import Optional
from pydantic import BaseModel, Field

from src.models.listing import SocialLinks


class Profile(BaseModel):
    """Row of the `profiles` table joined with `social_media`."""
    id: str = Field(..., description="Auth user ID")
    email: Optional[str] = None
    full_name: Optional[str] = None
    username: Optional[str] = Field(None, description="Set once onboarding completes")
    address: Optional[str] = None
    phone_number: Optional[str] = None
    avatar_url: Optional[str] = None
    social_links: Optional[SocialLinks] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def is_onboarded(self) -> bool:
        return bool(self.username)

    @classmethod
    def from_row(cls, row: dict) -> "Profile":
        data = {key: value for key, value in row.items() if key in cls.model_fields}
        data["social_links"] = SocialLinks.from_embed(row.get("social_media"))
        return cls(**data)


class PublicProfile(BaseModel):
    """What other users see on an owner page."""
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    phone_number: Optional[str] = None
    username: Optional[str] = None
    address: Optional[str] = None
    social_links: Optional[SocialLinks] = None

    @classmethod
    def from_row(cls, row: dict) -> "PublicProfile":
        return cls(
            full_name=row.get("full_name"),
            avatar_url=row.get("avatar_url"),
            phone_number=row.get("phone_number"),
            username=row.get("username"),
            address=row.get("address"),
            social_links=SocialLinks.from_embed(row.get("social_media")),
        )


class ProfileFields(BaseModel):
    """Editable profile fields from the profile form."""
    full_name: Optional[str] = None
    phone_number: Optional[str] = None
    address: Optional[str] = None
    avatar_url: Optional[str] = None
    facebook: Optional[str] = None
    instagram: Optional[str] = None
    tiktok: Optional[str] = None
