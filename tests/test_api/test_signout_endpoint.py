"""Tests for the sign-out endpoint."""

import pytest
from unittest.mock import AsyncMock, patch
import sys
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))
from api.auth.signout import end_session, handler
from src.models.session import Session
from src.utils.errors import UnauthorizedError
from tests.utils.helpers import build_handler

SESSION = Session(user_id="user-1", email="a@b.com", access_token="tok")


@pytest.mark.unit
@pytest.mark.asyncio
async def test_end_session_signs_out_valid_session():
    with patch("api.auth.signout.get_session", new=AsyncMock(return_value=SESSION)) as session_mock, \
         patch("api.auth.signout.sign_out", new=AsyncMock()) as sign_out_mock:
        assert await end_session("Bearer tok") is True

    session_mock.assert_awaited_once_with("tok")
    sign_out_mock.assert_awaited_once_with(SESSION)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_end_session_without_session():
    rejected = AsyncMock(side_effect=UnauthorizedError("no token"))
    with patch("api.auth.signout.get_session", new=rejected), \
         patch("api.auth.signout.sign_out", new=AsyncMock()) as sign_out_mock:
        assert await end_session(None) is False

    sign_out_mock.assert_not_awaited()


@pytest.mark.unit
@pytest.mark.parametrize("outcome", [AsyncMock(return_value=True), AsyncMock(side_effect=RuntimeError("boom"))])
def test_post_always_redirects_to_login(outcome):
    h = build_handler(handler, "POST", "/api/auth/signout", headers={"Authorization": "Bearer tok"})

    with patch("api.auth.signout.end_session", new=outcome):
        h.do_POST()

    h.send_response.assert_called_once_with(303)
    h.send_header.assert_called_once_with('Location', '/login')
