"""Tests for the Cloudinary image upload adapter."""

import httpx
import pytest

from src.services.image_upload import upload_image
from src.utils.app_config import AppConfig
from src.utils.errors import NetworkError

CONFIG = AppConfig(cloudinary_cloud_name="test-cloud", cloudinary_upload_preset="test-preset")


def client_with(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.unit
@pytest.mark.asyncio
async def test_upload_returns_secure_url():
    seen = {}

    def handler(request):
        seen["request"] = request
        return httpx.Response(200, json={"secure_url": "https://res.cloudinary.com/test-cloud/a.jpg"})

    url = await upload_image("room.jpg", b"\xff\xd8jpeg", config=CONFIG, client=client_with(handler))

    assert url == "https://res.cloudinary.com/test-cloud/a.jpg"
    request = seen["request"]
    assert request.method == "POST"
    assert str(request.url) == "https://api.cloudinary.com/v1_1/test-cloud/image/upload"
    assert b"test-preset" in request.content
    assert b'filename="room.jpg"' in request.content


@pytest.mark.unit
@pytest.mark.asyncio
async def test_upload_without_config():
    with pytest.raises(NetworkError) as exc_info:
        await upload_image("room.jpg", b"x", config=AppConfig())

    assert exc_info.value.user_message == "Failed to upload image. Please try again."


@pytest.mark.unit
@pytest.mark.asyncio
async def test_upload_rejected():
    def handler(request):
        return httpx.Response(400, json={"error": {"message": "Upload preset not found"}})

    with pytest.raises(NetworkError) as exc_info:
        await upload_image("room.jpg", b"x", config=CONFIG, client=client_with(handler))

    assert exc_info.value.user_message == "Failed to upload image. Please try again."


@pytest.mark.unit
@pytest.mark.asyncio
async def test_upload_without_secure_url():
    def handler(request):
        return httpx.Response(200, json={"public_id": "abc"})

    with pytest.raises(NetworkError):
        await upload_image("room.jpg", b"x", config=CONFIG, client=client_with(handler))
