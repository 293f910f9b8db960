"""Test data factories using Faker."""

from faker import Faker
from typing import Optional

fake = Faker()

PROPERTY_TYPES = ["Boarding House", "House for rent", "House and lot for sale", "Lot for sale"]


def create_profile_embed(with_social: bool = True) -> dict:
    """Owner snapshot as embedded under `profiles:user_id`."""
    embed = {
        "full_name": fake.name(),
        "phone_number": fake.msisdn(),
        "avatar_url": fake.image_url(),
    }
    if with_social:
        embed["social_media"] = [{
            "facebook": f"https://facebook.com/{fake.user_name()}",
            "instagram": None,
            "tiktok": f"@{fake.user_name()}",
        }]
    return embed


def create_listing_row(
    listing_id: Optional[str] = None,
    user_id: Optional[str] = None,
    image_count: int = 2,
    plottable: bool = True,
    status: Optional[str] = "available",
) -> dict:
    """A `properties` row with embedded images and owner, as PostgREST returns it."""
    return {
        "id": listing_id or fake.uuid4(),
        "user_id": user_id or fake.uuid4(),
        "title": fake.sentence(nb_words=3).rstrip("."),
        "description": fake.text(max_nb_chars=120),
        "price": fake.random_int(min=500, max=20000),
        "address": fake.address().replace("\n", ", "),
        "latitude": float(fake.latitude()) if plottable else None,
        "longitude": float(fake.longitude()) if plottable else None,
        "status": status,
        "property_type": fake.random_element(PROPERTY_TYPES),
        "available_slots": fake.random_int(min=0, max=6),
        "created_at": fake.iso8601(),
        "property_images": [{"image_url": fake.image_url()} for _ in range(image_count)],
        "profiles": create_profile_embed(),
    }


def create_profile_row(user_id: Optional[str] = None, onboarded: bool = True) -> dict:
    """A `profiles` row."""
    return {
        "id": user_id or fake.uuid4(),
        "email": fake.email(),
        "full_name": fake.name(),
        "username": fake.user_name() if onboarded else None,
        "address": fake.city(),
        "phone_number": fake.msisdn(),
        "avatar_url": None,
        "created_at": fake.iso8601(),
        "updated_at": fake.iso8601(),
    }
