"""Token authentication middleware.

Every route under the API namespace requires the ``x-wpai-token`` header to
match the stored credential. Unauthorized requests are rejected here, before
any router or handler runs, so they cannot mutate anything.
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from wpai.api.v1 import API_PREFIX
from wpai.security.access_gate import TOKEN_HEADER, authorize, get_access_token

logger = logging.getLogger(__name__)

# Docs stay reachable without a token
EXEMPT_PATHS = (
    f"{API_PREFIX}/docs",
    f"{API_PREFIX}/redoc",
    f"{API_PREFIX}/openapi.json",
)


def unauthorized_response() -> JSONResponse:
    return JSONResponse(
        status_code=401,
        content={
            "code": "auth_error",
            "message": "Sorry, you are not allowed to do that.",
            "data": {"status": 401},
        },
    )


async def auth_middleware(request: Request, call_next):
    path = request.url.path

    if not path.startswith(API_PREFIX) or path.startswith(EXEMPT_PATHS):
        return await call_next(request)

    # CORS preflight; answered by CORSMiddleware, never reaches a handler
    if request.method == "OPTIONS":
        return await call_next(request)

    supplied = request.headers.get(TOKEN_HEADER)
    stored = get_access_token(request.app.state.settings_store)
    if not authorize(supplied, stored):
        client_ip = request.client.host if request.client else "unknown"
        logger.warning("Rejected unauthorized %s %s from %s", request.method, path, client_ip)
        return unauthorized_response()

    return await call_next(request)
