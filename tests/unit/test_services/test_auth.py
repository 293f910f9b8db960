"""Tests for the auth service."""

import logging
import pytest
from unittest.mock import MagicMock

from src.models.profile import Profile
from src.services.auth import (
    DASHBOARD_PATH,
    LOGIN_PATH,
    ONBOARDING_PATH,
    bearer_token,
    get_session,
    require_owner,
    resolve_landing,
    sign_out,
)
from src.utils.errors import UnauthorizedError
from tests.utils.helpers import patch_supabase

MODULE = "src.services.auth"


@pytest.mark.unit
@pytest.mark.parametrize("header, token", [
    ("Bearer abc.def.ghi", "abc.def.ghi"),
    ("bearer  abc ", "abc"),
    ("Basic dXNlcg==", None),
    ("Bearer ", None),
    ("", None),
    (None, None),
])
def test_bearer_token(header, token):
    assert bearer_token(header) == token


@pytest.mark.unit
@pytest.mark.asyncio
async def test_get_session_without_token():
    with pytest.raises(UnauthorizedError) as exc_info:
        await get_session(None)

    assert exc_info.value.user_message == "You must be logged in."


@pytest.mark.unit
@pytest.mark.asyncio
async def test_get_session_valid():
    client = MagicMock()
    client.auth.get_user.return_value = MagicMock(user=MagicMock(id="user-1", email="a@b.com"))

    with patch_supabase(MODULE, client):
        session = await get_session("token-1")

    assert session.user_id == "user-1"
    assert session.email == "a@b.com"
    assert session.access_token == "token-1"
    client.auth.get_user.assert_called_once_with("token-1")


@pytest.mark.unit
@pytest.mark.asyncio
async def test_get_session_rejected_token():
    client = MagicMock()
    client.auth.get_user.side_effect = Exception("JWT expired")

    with patch_supabase(MODULE, client):
        with pytest.raises(UnauthorizedError):
            await get_session("expired")


@pytest.mark.unit
@pytest.mark.asyncio
async def test_rejected_token_error_is_masked_in_logs(caplog):
    client = MagicMock()
    client.auth.get_user.side_effect = Exception("bad token eyJhbGc.eyJzdWI.c2ln for juan@example.com")

    with caplog.at_level(logging.INFO, logger=MODULE):
        with patch_supabase(MODULE, client):
            with pytest.raises(UnauthorizedError):
                await get_session("eyJhbGc.eyJzdWI.c2ln")

    record = next(r for r in caplog.records if r.getMessage() == "Access token rejected")
    assert "eyJhbGc" not in record.error
    assert "juan@example.com" not in record.error
    assert "[REDACTED_JWT]" in record.error


@pytest.mark.unit
@pytest.mark.asyncio
async def test_get_session_no_user():
    client = MagicMock()
    client.auth.get_user.return_value = MagicMock(user=None)

    with patch_supabase(MODULE, client):
        with pytest.raises(UnauthorizedError):
            await get_session("token-1")


@pytest.mark.unit
def test_require_owner(session):
    require_owner(session, session.user_id)

    with pytest.raises(UnauthorizedError):
        require_owner(session, "someone-else")
    with pytest.raises(UnauthorizedError):
        require_owner(session, None)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_sign_out_revokes_token(session):
    client = MagicMock()

    with patch_supabase(MODULE, client):
        await sign_out(session)

    client.auth.admin.sign_out.assert_called_once_with(session.access_token)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_sign_out_is_best_effort(session):
    client = MagicMock()
    client.auth.admin.sign_out.side_effect = Exception("network down")

    with patch_supabase(MODULE, client):
        await sign_out(session)


@pytest.mark.unit
def test_resolve_landing(session):
    onboarded = Profile(id=session.user_id, username="owner")
    fresh = Profile(id=session.user_id)

    assert resolve_landing(None, None) == LOGIN_PATH
    assert resolve_landing(session, None) == ONBOARDING_PATH
    assert resolve_landing(session, fresh) == ONBOARDING_PATH
    assert resolve_landing(session, onboarded) == DASHBOARD_PATH
