"""Sign-out endpoint."""

from http.server import BaseHTTPRequestHandler
import asyncio

from src.services.auth import LOGIN_PATH, bearer_token, get_session, sign_out
from src.utils.errors import UnauthorizedError
from src.utils.logging import get_structured_logger
from src.utils.logging_config import LoggingConfig

LoggingConfig.setup_logging()
logger = get_structured_logger(__name__)


async def end_session(authorization) -> bool:
    """Sign out the bearer session if there is a valid one."""
    try:
        session = await get_session(bearer_token(authorization))
    except UnauthorizedError:
        return False
    await sign_out(session)
    return True


class handler(BaseHTTPRequestHandler):
    """POST /api/auth/signout - always lands on the sign-in page."""

    def do_POST(self):
        try:
            signed_out = asyncio.run(end_session(self.headers.get("Authorization")))
            logger.info("Sign-out requested", had_session=signed_out)
        except Exception as e:
            logger.error("Sign-out failed", error=str(e))

        self.send_response(303)
        self.send_header('Location', LOGIN_PATH)
        self.end_headers()
