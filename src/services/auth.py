"""Auth service - resolve bearer tokens to sessions and decide landing pages."""

from typing import Optional
from src.models.profile import Profile
from src.models.session import Session
from src.services.supabase_client import SupabaseClient
from src.utils.errors import UnauthorizedError
from src.utils.logging import get_structured_logger, mask_sensitive_data, mask_user_id

logger = get_structured_logger(__name__)

LOGIN_PATH = "/login"
ONBOARDING_PATH = "/onboarding"
DASHBOARD_PATH = "/dashboard"


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def get_session(access_token: Optional[str]) -> Session:
    """Validate an access token with Supabase auth. Raises UnauthorizedError."""
    if not access_token:
        raise UnauthorizedError("No access token", user_message="You must be logged in.")

    async with SupabaseClient() as client:
        try:
            response = client.auth.get_user(access_token)
        except Exception as e:
            logger.info("Access token rejected", error=mask_sensitive_data(str(e)))
            raise UnauthorizedError(f"Invalid session: {e}", user_message="You must be logged in.")

    user = getattr(response, "user", None)
    if user is None:
        raise UnauthorizedError("Invalid session: no user", user_message="You must be logged in.")

    return Session(user_id=user.id, email=getattr(user, "email", None), access_token=access_token)


def require_owner(session: Session, owner_id: Optional[str]) -> None:
    """Reject actions on rows that belong to someone else."""
    if owner_id != session.user_id:
        logger.warning(
            "Ownership check failed",
            user_id=mask_user_id(session.user_id),
            owner_id=mask_user_id(owner_id)
        )
        raise UnauthorizedError("Not the owner")


async def sign_out(session: Session) -> None:
    """Revoke the session's refresh tokens. Best effort."""
    async with SupabaseClient(session.access_token) as client:
        try:
            client.auth.admin.sign_out(session.access_token)
            logger.info("User signed out", user_id=mask_user_id(session.user_id))
        except Exception as e:
            logger.warning("Sign-out request failed", user_id=mask_user_id(session.user_id), error=mask_sensitive_data(str(e)))


def resolve_landing(session: Optional[Session], profile: Optional[Profile]) -> str:
    """Where a visitor belongs: sign-in, onboarding, or the map dashboard."""
    if session is None:
        return LOGIN_PATH
    if profile is None or not profile.is_onboarded:
        return ONBOARDING_PATH
    return DASHBOARD_PATH
