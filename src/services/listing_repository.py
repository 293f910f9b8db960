"""Listing repository - `properties` and `property_images` tables."""

from typing import Optional
from src.models.listing import Listing, ListingFields, ListingStatus
from src.models.session import Session
from src.services.auth import require_owner
from src.services.supabase_client import SupabaseClient
from src.utils.errors import NotFoundError, StayKoError, SupabaseError, ValidationError
from src.utils.logging import get_structured_logger, log_timing, mask_user_id

logger = get_structured_logger(__name__)

LISTING_SELECT = """
    *,
    property_images (image_url),
    profiles:user_id (
        full_name,
        phone_number,
        avatar_url,
        social_media (tiktok, facebook, instagram)
    )
"""

OWNER_LISTING_SELECT = """
    *,
    property_images (image_url)
"""


def _validate(fields: ListingFields) -> None:
    missing = fields.missing_required()
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")


def _image_rows(listing_id: str, image_urls: list[str]) -> list[dict]:
    return [{"property_id": listing_id, "image_url": url} for url in image_urls]


async def list_all_listings() -> list[Listing]:
    """Every listing with images and owner contact, for the map."""
    async with SupabaseClient() as client:
        try:
            with log_timing("list_all_listings", logger=logger):
                result = client.table("properties").select(LISTING_SELECT).execute()
            return [Listing.from_row(row) for row in (result.data or [])]
        except Exception as e:
            logger.error("Error fetching listings", error=str(e))
            raise SupabaseError(f"Failed to fetch listings: {e}", user_message="Failed to load properties.")


async def list_owner_listings(owner_id: str) -> list[Listing]:
    """One owner's listings, newest first."""
    async with SupabaseClient() as client:
        try:
            result = (
                client.table("properties")
                .select(OWNER_LISTING_SELECT)
                .eq("user_id", owner_id)
                .order("created_at", desc=True)
                .execute()
            )
            return [Listing.from_row(row) for row in (result.data or [])]
        except Exception as e:
            logger.error("Error fetching owner listings", owner_id=mask_user_id(owner_id), error=str(e))
            raise SupabaseError(f"Failed to fetch owner listings: {e}", user_message="Failed to load properties.")


async def _get_owner_id(client, listing_id: str) -> str:
    result = client.table("properties").select("user_id").eq("id", listing_id).execute()
    if not result.data:
        raise NotFoundError(f"Listing not found: {listing_id}", user_message="Property not found.")
    return result.data[0]["user_id"]


async def create_listing(session: Session, fields: ListingFields, image_urls: list[str]) -> Listing:
    """
    Create a listing owned by the session user, then attach its images.

    New listings start as available. If the image insert fails the listing
    is kept and UpstreamError reports the partial success.
    """
    _validate(fields)

    async with SupabaseClient(session.access_token) as client:
        try:
            row = {
                **fields.to_row(),
                "user_id": session.user_id,
                "status": ListingStatus.AVAILABLE.value,
            }
            result = client.table("properties").insert(row).execute()
            if not result.data:
                raise SupabaseError("Failed to create listing: no data returned")
            created = result.data[0]
        except StayKoError:
            raise
        except Exception as e:
            logger.error("Listing creation error", user_id=mask_user_id(session.user_id), error=str(e))
            raise SupabaseError(
                f"Failed to create listing: {e}",
                user_message="Failed to create property. Please try again."
            )

        listing_id = str(created["id"])
        if image_urls:
            try:
                client.table("property_images").insert(_image_rows(listing_id, image_urls)).execute()
            except Exception as e:
                logger.error("Image insertion error", listing_id=listing_id, error=str(e))
                raise SupabaseError(
                    f"Listing {listing_id} created but images failed: {e}",
                    user_message="Property created, but failed to save images."
                )

    logger.info(
        "Listing created",
        listing_id=listing_id,
        user_id=mask_user_id(session.user_id),
        image_count=len(image_urls)
    )
    return Listing.from_row({**created, "property_images": [{"image_url": url} for url in image_urls]})


async def update_listing(
    session: Session,
    listing_id: str,
    fields: ListingFields,
    image_urls: Optional[list[str]] = None,
) -> Listing:
    """
    Update an owned listing.

    ``image_urls`` is the complete desired image list: it replaces the
    stored set, an empty list removes every image, None leaves them alone.
    """
    _validate(fields)

    async with SupabaseClient(session.access_token) as client:
        try:
            require_owner(session, await _get_owner_id(client, listing_id))

            result = (
                client.table("properties")
                .update(fields.to_row())
                .eq("id", listing_id)
                .eq("user_id", session.user_id)
                .execute()
            )
            if not result.data:
                raise SupabaseError(f"Failed to update listing: {listing_id}")
            updated = result.data[0]
        except StayKoError:
            raise
        except Exception as e:
            logger.error("Update listing error", listing_id=listing_id, error=str(e))
            raise SupabaseError(f"Failed to update listing: {e}", user_message="Failed to update property")

        if image_urls is not None:
            try:
                client.table("property_images").delete().eq("property_id", listing_id).execute()
                if image_urls:
                    client.table("property_images").insert(_image_rows(listing_id, image_urls)).execute()
                images = [{"image_url": url} for url in image_urls]
            except Exception as e:
                logger.error("Image update error", listing_id=listing_id, error=str(e))
                raise SupabaseError(
                    f"Listing {listing_id} updated but images failed: {e}",
                    user_message="Property updated but failed to save images"
                )
        else:
            # update() returns bare `properties` columns; read the kept images back
            try:
                stored = (
                    client.table("property_images")
                    .select("image_url")
                    .eq("property_id", listing_id)
                    .execute()
                )
                images = stored.data or []
            except Exception as e:
                logger.error("Image read error", listing_id=listing_id, error=str(e))
                raise SupabaseError(f"Failed to read images for listing {listing_id}: {e}")

    logger.info("Listing updated", listing_id=listing_id, images_replaced=image_urls is not None)
    return Listing.from_row({**updated, "property_images": images})


async def delete_listing(session: Session, listing_id: str) -> None:
    """Delete an owned listing; images go with it via the FK cascade."""
    async with SupabaseClient(session.access_token) as client:
        try:
            require_owner(session, await _get_owner_id(client, listing_id))
            client.table("properties").delete().eq("id", listing_id).execute()
        except StayKoError:
            raise
        except Exception as e:
            logger.error("Error deleting listing", listing_id=listing_id, error=str(e))
            raise SupabaseError(f"Failed to delete listing: {e}", user_message="Failed to delete property")

    logger.info("Listing deleted", listing_id=listing_id, user_id=mask_user_id(session.user_id))


async def set_status(session: Session, listing_id: str, status: ListingStatus) -> ListingStatus:
    """Mark an owned listing available or booked."""
    async with SupabaseClient(session.access_token) as client:
        try:
            result = (
                client.table("properties")
                .update({"status": status.value})
                .eq("id", listing_id)
                .eq("user_id", session.user_id)
                .execute()
            )
            if not result.data:
                require_owner(session, await _get_owner_id(client, listing_id))
                raise SupabaseError(f"Failed to update status: {listing_id}")
        except StayKoError:
            raise
        except Exception as e:
            logger.error("Error updating status", listing_id=listing_id, error=str(e))
            raise SupabaseError(f"Failed to update status: {e}", user_message="Failed to update status")

    logger.info("Listing status updated", listing_id=listing_id, status=status.value)
    return status


async def toggle_status(session: Session, listing_id: str, current_status: Optional[str]) -> ListingStatus:
    """Flip available <-> booked; an unset status counts as available."""
    new_status = (
        ListingStatus.AVAILABLE
        if current_status == ListingStatus.BOOKED.value
        else ListingStatus.BOOKED
    )
    return await set_status(session, listing_id, new_status)
