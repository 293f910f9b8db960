"""Test helper functions."""

from io import BytesIO
from typing import Any, Optional
from unittest.mock import MagicMock, Mock

from src.models.listing import Listing, OwnerProfile


def make_listing(
    listing_id: str,
    title: str = "Listing",
    longitude: Optional[float] = 126.2,
    latitude: Optional[float] = 6.9,
    price: Optional[float] = 1000,
    address: str = "Mati City, Davao Oriental",
    property_type: str = "Boarding House",
    status: Optional[str] = "available",
    images: Optional[list[str]] = None,
    phone_number: Optional[str] = "09171234567",
) -> Listing:
    """Build a Listing directly, bypassing the row mapper."""
    return Listing(
        id=listing_id,
        user_id="owner-1",
        title=title,
        price=price,
        address=address,
        longitude=longitude,
        latitude=latitude,
        status=status,
        property_type=property_type,
        images=images if images is not None else [],
        owner=OwnerProfile(full_name="Owner", phone_number=phone_number),
    )


def mock_query(data: Any = None, error: Optional[Exception] = None) -> MagicMock:
    """
    A chainable PostgREST query mock.

    Every builder method returns the same mock; ``execute()`` returns an
    object with ``.data`` or raises ``error``.
    """
    query = MagicMock()
    for method in ("select", "insert", "update", "upsert", "delete", "eq", "order", "single", "limit"):
        getattr(query, method).return_value = query
    if error is not None:
        query.execute.side_effect = error
    else:
        query.execute.return_value = MagicMock(data=data)
    return query


def mock_client_with_tables(**tables: MagicMock) -> MagicMock:
    """Supabase client mock whose ``table(name)`` returns the query given for that name."""
    client = MagicMock()
    client.table.side_effect = lambda name: tables[name]
    return client


def patch_supabase(module_path: str, client: MagicMock):
    """Patch ``SupabaseClient`` in a module so ``async with`` yields ``client``."""
    from unittest.mock import patch

    patcher = patch(f"{module_path}.SupabaseClient")

    class _Ctx:
        def __enter__(self):
            mock_class = patcher.start()
            mock_class.return_value.__aenter__.return_value = client
            mock_class.return_value.__aexit__.return_value = False
            return mock_class

        def __exit__(self, *exc):
            patcher.stop()
            return False

    return _Ctx()


class MockSocket:
    """Minimal socket for instantiating BaseHTTPRequestHandler subclasses."""

    def __init__(self, request_line: bytes):
        self.request_line = request_line

    def makefile(self, *args, **kwargs):
        return BytesIO(self.request_line)

    def sendall(self, data):
        pass

    def close(self):
        pass


def build_handler(handler_class, method: str, path: str, headers: Optional[dict] = None):
    """
    Instantiate a handler without dispatching a request, with response methods mocked.

    An empty request line makes the constructor return before routing, so
    the test decides when ``do_GET``/``do_POST`` runs.
    """
    h = handler_class(MockSocket(b""), ("127.0.0.1", 8000), None)
    h.command = method
    h.path = path
    h.headers = headers or {}
    h.wfile = BytesIO()
    h.send_response = Mock()
    h.send_header = Mock()
    h.end_headers = Mock()
    return h
