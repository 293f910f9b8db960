"""Shared pytest fixtures and configuration."""

import os
import pytest
from freezegun import freeze_time

# Set test environment variables
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("OSRM_BASE_URL", "https://osrm.test")
os.environ.setdefault("NOMINATIM_URL", "https://nominatim.test")
os.environ.setdefault("GEOCODER_USER_AGENT", "stayko-tests/1.0")
os.environ.setdefault("CLOUDINARY_CLOUD_NAME", "test-cloud")
os.environ.setdefault("CLOUDINARY_UPLOAD_PRESET", "test-preset")

from src.models.session import Session
from tests.utils.doubles import USER_POSITION, ControlledRouteService
from tests.utils.helpers import make_listing


@pytest.fixture
def user_position():
    return USER_POSITION


@pytest.fixture
def controlled_route_service():
    return ControlledRouteService()


@pytest.fixture
def listing_a():
    return make_listing("listing-a", "Cozy Boarding House", longitude=126.23, latitude=6.96, price=1500)


@pytest.fixture
def listing_b():
    return make_listing("listing-b", "Beach House", longitude=126.30, latitude=7.01, price=2500)


@pytest.fixture
def unplottable_listing():
    return make_listing("listing-x", "Lot with no pin", longitude=None, latitude=None, price=900)


@pytest.fixture
def session():
    return Session(
        user_id="0b1c2d3e-4f50-6172-8394-a5b6c7d8e9f0",
        email="owner@example.com",
        access_token="test-access-token",
    )


@pytest.fixture
def freeze_time_fixture():
    """Fixture for freezing time in tests."""
    with freeze_time("2025-06-01 12:00:00") as frozen_time:
        yield frozen_time
