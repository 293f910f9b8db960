"""Authenticated session context."""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class Session(BaseModel):
    """A signed-in user, passed explicitly to every owner-scoped operation."""
    model_config = ConfigDict(frozen=True)

    user_id: str = Field(..., description="Supabase auth user ID")
    email: Optional[str] = None
    access_token: str = Field(..., repr=False)

    @property
    def default_username(self) -> str:
        if self.email:
            return self.email.split("@")[0]
        return f"user_{self.user_id[:8]}"
