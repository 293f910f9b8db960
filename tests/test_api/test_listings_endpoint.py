"""Tests for the listings endpoint."""

import pytest
from unittest.mock import AsyncMock, patch
import sys
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))
from api.listings import handler, parse_filters
from src.utils.errors import SupabaseError
from tests.utils.assertions import assert_valid_listing_json, read_json_response
from tests.utils.helpers import build_handler, make_listing

LISTINGS = [
    make_listing("1", "Cozy Boarding House", price=1500, property_type="Boarding House"),
    make_listing("2", "Family Home", price=8000, property_type="House for rent"),
    make_listing("3", "Student Dorm", price=2500, property_type="Boarding House"),
]


@pytest.mark.unit
def test_parse_filters():
    filters = parse_filters({"q": ["dorm"], "type": ["Boarding House"], "min_price": [""], "max_price": ["3000"]})

    assert filters.search_text == "dorm"
    assert filters.property_type == "Boarding House"
    assert filters.min_price is None
    assert filters.max_price == 3000.0


@pytest.mark.unit
def test_parse_filters_defaults():
    filters = parse_filters({})

    assert filters.search_text == ""
    assert filters.property_type == "All"


@pytest.mark.unit
def test_get_filtered_listings():
    h = build_handler(handler, "GET", "/api/listings?type=Boarding+House&max_price=2000")

    with patch("api.listings.list_all_listings", new=AsyncMock(return_value=LISTINGS)):
        h.do_GET()

    assert h.send_response.call_args[0][0] == 200
    body = read_json_response(h)
    assert [listing["id"] for listing in body["listings"]] == ["1"]
    assert_valid_listing_json(body["listings"][0])


@pytest.mark.unit
def test_filters_parsed_once_per_request():
    h = build_handler(handler, "GET", "/api/listings?q=dorm")

    with patch("api.listings.list_all_listings", new=AsyncMock(return_value=LISTINGS)), \
         patch("api.listings.parse_filters", wraps=parse_filters) as parse_mock:
        h.do_GET()

    parse_mock.assert_called_once()
    assert [listing["id"] for listing in read_json_response(h)["listings"]] == ["3"]


@pytest.mark.unit
def test_get_owner_listings():
    h = build_handler(handler, "GET", "/api/listings?owner=owner-1")
    owner_mock = AsyncMock(return_value=LISTINGS[:1])

    with patch("api.listings.list_owner_listings", new=owner_mock), \
         patch("api.listings.list_all_listings", new=AsyncMock()) as all_mock:
        h.do_GET()

    owner_mock.assert_awaited_once_with("owner-1")
    all_mock.assert_not_awaited()
    assert len(read_json_response(h)["listings"]) == 1


@pytest.mark.unit
def test_bad_price_is_400():
    h = build_handler(handler, "GET", "/api/listings?min_price=cheap")

    h.do_GET()

    assert h.send_response.call_args[0][0] == 400
    assert read_json_response(h)["error"] == "invalid filter"


@pytest.mark.unit
def test_backend_failure_is_502():
    h = build_handler(handler, "GET", "/api/listings")
    failing = AsyncMock(side_effect=SupabaseError("down", user_message="Failed to load properties."))

    with patch("api.listings.list_all_listings", new=failing):
        h.do_GET()

    assert h.send_response.call_args[0][0] == 502
    assert read_json_response(h) == {"error": "Failed to load properties."}


@pytest.mark.unit
def test_unexpected_failure_is_500():
    h = build_handler(handler, "GET", "/api/listings")

    with patch("api.listings.list_all_listings", new=AsyncMock(side_effect=RuntimeError("bug"))):
        h.do_GET()

    assert h.send_response.call_args[0][0] == 500
