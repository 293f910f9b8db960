"""Custom assertion helpers."""

import json
from typing import Any, Sequence


def assert_subsequence(subset: Sequence[Any], full: Sequence[Any]) -> None:
    """Assert ``subset`` appears in ``full`` in the same relative order."""
    iterator = iter(full)
    for item in subset:
        assert any(candidate is item or candidate == item for candidate in iterator), (
            f"{item!r} missing or out of order"
        )


def assert_valid_listing_json(listing: dict) -> None:
    """Assert a serialized listing carries the fields the map client reads."""
    for key in ("id", "title", "address", "latitude", "longitude", "images", "property_type"):
        assert key in listing
    assert isinstance(listing["images"], list)


def read_json_response(handler) -> Any:
    """Decode the JSON body a mocked handler wrote."""
    handler.wfile.seek(0)
    return json.loads(handler.wfile.read().decode('utf-8'))
