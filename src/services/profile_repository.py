"""Profile repository - `profiles`, `social_media` and the `avatars` bucket."""

import re
import uuid
from datetime import datetime, timezone
from typing import Optional
from src.models.listing import SocialLinks
from src.models.profile import Profile, ProfileFields, PublicProfile
from src.models.session import Session
from src.services.supabase_client import SupabaseClient, is_no_rows_error
from src.utils.errors import NotFoundError, StayKoError, SupabaseError
from src.utils.logging import get_structured_logger, mask_sensitive_data, mask_user_id

logger = get_structured_logger(__name__)

AVATAR_BUCKET = "avatars"
UUID_PATTERN = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE)

PUBLIC_PROFILE_SELECT = """
    full_name,
    avatar_url,
    phone_number,
    username,
    address,
    social_media (tiktok, facebook, instagram)
"""


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    return value or None


def avatar_path(user_id: str, filename: str) -> str:
    """Storage key for a new avatar: ``<user_id>-<random>.<ext>``."""
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else "png"
    return f"{user_id}-{uuid.uuid4().hex}.{ext}"


async def get_own_profile(session: Session) -> Optional[Profile]:
    """The signed-in user's profile, or None before onboarding."""
    async with SupabaseClient(session.access_token) as client:
        try:
            result = (
                client.table("profiles")
                .select("*, social_media (tiktok, facebook, instagram)")
                .eq("id", session.user_id)
                .execute()
            )
        except Exception as e:
            logger.error("Error fetching profile", user_id=mask_user_id(session.user_id), error=mask_sensitive_data(str(e)))
            raise SupabaseError(f"Failed to fetch profile: {e}", user_message="Failed to load profile")

    return Profile.from_row(result.data[0]) if result.data else None


async def get_public_profile(user_id: str) -> PublicProfile:
    """Owner page data. Malformed or unknown IDs raise NotFoundError."""
    if not user_id or not UUID_PATTERN.match(user_id):
        raise NotFoundError(f"Invalid user id: {user_id!r}", user_message="User Not Found")

    async with SupabaseClient() as client:
        try:
            result = (
                client.table("profiles")
                .select(PUBLIC_PROFILE_SELECT)
                .eq("id", user_id)
                .single()
                .execute()
            )
        except Exception as e:
            if is_no_rows_error(e):
                raise NotFoundError(f"Profile not found: {user_id}", user_message="User Not Found")
            logger.error("Error fetching public profile", user_id=mask_user_id(user_id), error=mask_sensitive_data(str(e)))
            raise SupabaseError(f"Failed to fetch public profile: {e}", user_message="Failed to load profile")

    if not result.data:
        raise NotFoundError(f"Profile not found: {user_id}", user_message="User Not Found")
    return PublicProfile.from_row(result.data)


async def get_social_links(session: Session) -> Optional[SocialLinks]:
    async with SupabaseClient(session.access_token) as client:
        try:
            result = (
                client.table("social_media")
                .select("tiktok, facebook, instagram")
                .eq("user_id", session.user_id)
                .single()
                .execute()
            )
        except Exception as e:
            if is_no_rows_error(e):
                return None
            logger.error("Error fetching social media", user_id=mask_user_id(session.user_id), error=mask_sensitive_data(str(e)))
            raise SupabaseError(f"Failed to fetch social media: {e}")

    return SocialLinks.from_embed(result.data)


async def upload_avatar(session: Session, filename: str, content: bytes) -> str:
    """Store an avatar in the public bucket and return its URL."""
    path = avatar_path(session.user_id, filename)
    async with SupabaseClient(session.access_token) as client:
        try:
            bucket = client.storage.from_(AVATAR_BUCKET)
            bucket.upload(path, content)
            return bucket.get_public_url(path)
        except Exception as e:
            logger.error("Error uploading avatar", user_id=mask_user_id(session.user_id), error=mask_sensitive_data(str(e)))
            raise SupabaseError(f"Failed to upload avatar: {e}", user_message="Failed to upload profile picture")


async def update_profile(
    session: Session,
    fields: ProfileFields,
    avatar: Optional[tuple[str, bytes]] = None,
) -> Profile:
    """
    Save the profile form.

    A new avatar (filename, bytes) is uploaded first and replaces
    ``avatar_url``. Social links are upserted on ``user_id``; empty
    handles are stored as null.
    """
    avatar_url = fields.avatar_url
    if avatar is not None and avatar[1]:
        avatar_url = await upload_avatar(session, *avatar)

    async with SupabaseClient(session.access_token) as client:
        try:
            result = (
                client.table("profiles")
                .update({
                    "full_name": fields.full_name,
                    "phone_number": fields.phone_number,
                    "avatar_url": avatar_url,
                    "updated_at": _now(),
                })
                .eq("id", session.user_id)
                .execute()
            )
            if not result.data:
                raise NotFoundError(f"Profile not found: {session.user_id}", user_message="Profile not found")
            row = result.data[0]
        except StayKoError:
            raise
        except Exception as e:
            logger.error("Error updating profile", user_id=mask_user_id(session.user_id), error=mask_sensitive_data(str(e)))
            raise SupabaseError(f"Failed to update profile: {e}", user_message="Failed to update profile details")

        social = {
            "tiktok": _blank_to_none(fields.tiktok),
            "facebook": _blank_to_none(fields.facebook),
            "instagram": _blank_to_none(fields.instagram),
        }
        try:
            client.table("social_media").upsert(
                {"user_id": session.user_id, **social, "updated_at": _now()},
                on_conflict="user_id",
            ).execute()
        except Exception as e:
            logger.error("Error updating social media", user_id=mask_user_id(session.user_id), error=mask_sensitive_data(str(e)))
            raise SupabaseError(f"Failed to update social media: {e}", user_message="Failed to update social media links")

    logger.info("Profile updated", user_id=mask_user_id(session.user_id), avatar_changed=avatar_url != fields.avatar_url)
    return Profile.from_row({**row, "social_media": social})


async def complete_onboarding(session: Session, fields: ProfileFields) -> Profile:
    """Create or refresh the profile row; setting a username marks onboarding done."""
    row = {
        "id": session.user_id,
        "email": session.email,
        "full_name": fields.full_name,
        "username": session.default_username,
        "address": fields.address,
        "phone_number": fields.phone_number,
        "avatar_url": fields.avatar_url or None,
        "updated_at": _now(),
    }

    async with SupabaseClient(session.access_token) as client:
        try:
            result = client.table("profiles").upsert(row).execute()
        except Exception as e:
            logger.error("Error completing onboarding", user_id=mask_user_id(session.user_id), error=mask_sensitive_data(str(e)))
            raise SupabaseError(f"Failed to save profile: {e}", user_message=str(e))

    logger.info("Onboarding completed", user_id=mask_user_id(session.user_id))
    return Profile.from_row(result.data[0] if result.data else row)


async def list_profiles() -> list[Profile]:
    async with SupabaseClient() as client:
        try:
            result = client.table("profiles").select("*").order("created_at", desc=True).execute()
        except Exception as e:
            logger.error("Error fetching users", error=mask_sensitive_data(str(e)))
            raise SupabaseError(f"Failed to fetch profiles: {e}")

    return [Profile.from_row(row) for row in (result.data or [])]
