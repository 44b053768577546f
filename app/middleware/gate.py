"""Per-request authentication gate.

Every request outside the public allowlist must carry a valid bearer token.
The verified identity is attached to ``request.state.identity``; the account
store is never consulted here.
"""
import logging

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from app.services.tokens import decode_token, extract_bearer
from app.utils.exceptions import AppException, auth_error_response

logger = logging.getLogger(__name__)

SIGN_UP_URL = "/person/sign-up"
LOGIN_URL = "/login"

PUBLIC_ROUTES: frozenset[tuple[str, str]] = frozenset({("POST", SIGN_UP_URL)})
# the issuing endpoint is how a caller obtains a token in the first place
ISSUER_ROUTES: frozenset[tuple[str, str]] = frozenset({("POST", LOGIN_URL)})


def is_open_route(method: str, path: str) -> bool:
    route = (method.upper(), path.rstrip("/") or "/")
    return route in PUBLIC_ROUTES or route in ISSUER_ROUTES


class RequestGate(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if is_open_route(request.method, request.url.path):
            return await call_next(request)

        try:
            token = extract_bearer(request.headers.get("Authorization"))
            identity = decode_token(token)
        except AppException as exc:
            logger.warning(
                "Rejected %s %s: %s", request.method, request.url.path, exc.message
            )
            return auth_error_response(exc)

        request.state.identity = identity
        logger.debug("Admitted %s %s for '%s'", request.method, request.url.path, identity.login)
        return await call_next(request)
