from jose import JWTError
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from app.dashtact.core.context import RequestContext
from app.dashtact.core.security import decode_token


def _bearer_claims(request: Request) -> dict:
    scheme, _, token = (request.headers.get("Authorization") or "").partition(" ")
    if scheme.lower() != "bearer" or not token:
        return {}
    try:
        return decode_token(token)
    except JWTError:
        return {}


class TenantContextMiddleware(BaseHTTPMiddleware):
    """Exposes token claims on ``request.state`` for logging.

    Authorization is still enforced by the route dependencies.
    """

    async def dispatch(self, request: Request, call_next):
        context = RequestContext.from_claims(_bearer_claims(request), getattr(request.state, "trace_id", ""))
        request.state.context = context
        request.state.tenant_id = context.tenant_id
        request.state.user_id = context.user_id
        request.state.role = context.role
        return await call_next(request)
