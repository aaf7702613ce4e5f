import uuid

from fastapi import Depends, Request

from app.dashtact.core.context import RequestContext
from app.dashtact.core.error_catalog import AppError, ErrorCatalog
from app.dashtact.core.metrics import metrics
from app.dashtact.core.security import TokenClaims, oauth2_scheme, read_token_claims
from app.dashtact.db.session import get_db
from app.dashtact.repos.users import UserRepository
from app.dashtact.services.access_control import AccessControlService, PermissionDecision
from app.dashtact.services.auth import is_user_active


def get_token_claims(token: str = Depends(oauth2_scheme)) -> TokenClaims:
    return read_token_claims(token)


def get_current_user(claims: TokenClaims = Depends(get_token_claims), db=Depends(get_db)):
    try:
        user_id = uuid.UUID(claims.sub)
    except ValueError as exc:
        raise AppError(ErrorCatalog.INVALID_TOKEN) from exc
    user = UserRepository(db).get_by_id(user_id)
    if user is None:
        raise AppError(ErrorCatalog.INVALID_TOKEN)
    return user


def require_active_user(user=Depends(get_current_user)):
    if not is_user_active(user):
        raise AppError(ErrorCatalog.USER_INACTIVE)
    return user


def require_request_context(request: Request, claims: TokenClaims = Depends(get_token_claims)) -> RequestContext:
    context = RequestContext.from_claims(claims.model_dump(), getattr(request.state, "trace_id", ""))
    request.state.context = context
    return context


def get_permission_cache(request: Request) -> dict:
    """Role permission lookups shared by every dependency of one request."""
    cache = getattr(request.state, "permission_cache", None)
    if cache is None:
        cache = request.state.permission_cache = {}
    return cache


def require_permission(permission_key: str):
    def dependency(
        request: Request,
        user=Depends(require_active_user),
        context: RequestContext = Depends(require_request_context),
        db=Depends(get_db),
    ) -> PermissionDecision:
        if not context.tenant_id:
            raise AppError(ErrorCatalog.TENANT_SCOPE_REQUIRED)
        access = AccessControlService(db, cache=get_permission_cache(request))
        decision = access.evaluate_permission(permission_key, user.role, str(user.tenant_id))
        if not decision.allowed:
            metrics.increment_rbac_denied(decision.key)
            raise AppError(ErrorCatalog.PERMISSION_DENIED, details={"permission": decision.key})
        return decision

    return dependency
