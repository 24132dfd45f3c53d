"""OAuth 2.0 authorization-code redirect endpoint.

The authorization server sends the browser back here with ``code`` and
``userState`` query parameters. The handler acknowledges the redirect and
stops there: the code is never exchanged for a token.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum

from aiohttp import web

logger = logging.getLogger(__name__)

ACKNOWLEDGMENT = "You have authenticated"


class UserState(Enum):
    """Registration state reported by the authorization server."""

    AUTHENTICATED = "Authenticated"
    AUTHENTICATED_NOT_REGISTERED = "AuthenticatedNotRegistered"


@dataclass(frozen=True)
class OAuthCallbackParams:
    """Query parameters of an authorization redirect."""

    code: str | None
    user_state: UserState | None
    raw_user_state: str | None

    @classmethod
    def from_query(cls, query: Mapping[str, str]) -> "OAuthCallbackParams":
        """Read callback parameters without validating them.

        Unknown userState values are kept in raw_user_state and leave
        user_state unset.
        """
        raw_user_state = query.get("userState")
        try:
            user_state = UserState(raw_user_state) if raw_user_state is not None else None
        except ValueError:
            user_state = None
        return cls(
            code=query.get("code"),
            user_state=user_state,
            raw_user_state=raw_user_state,
        )


def create_oauth_routes(callback_path: str) -> list[web.RouteDef]:
    """Create the authorization redirect route.

    Args:
        callback_path: Path the authorization server redirects to

    Returns:
        List of route definitions
    """
    return [
        web.get(callback_path, oauth_redirect),
    ]


async def oauth_redirect(request: web.Request) -> web.Response:
    params = OAuthCallbackParams.from_query(request.query)

    logger.info(
        f"{request.path}: code={params.code} userState={params.raw_user_state}",
    )
    if params.raw_user_state is not None and params.user_state is None:
        logger.debug(f"Unrecognized userState: {params.raw_user_state!r}")

    return web.Response(text=ACKNOWLEDGMENT)
