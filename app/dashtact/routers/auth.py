import logging
from urllib.parse import parse_qs

from fastapi import APIRouter, Depends, Request

from app.dashtact.core.error_catalog import AppError
from app.dashtact.core.logging import log_json
from app.dashtact.db.session import get_db
from app.dashtact.schemas.auth import LoginRequest, OAuth2TokenResponse, TokenResponse
from app.dashtact.services.auth import AuthService

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Login (JSON)",
    description="Login for dashboard clients using email or username_or_email.",
)
def login(request: Request, payload: LoginRequest, db=Depends(get_db)):
    identifier = payload.identifier
    trace_id = getattr(request.state, "trace_id", "")
    try:
        user, token = AuthService(db).login(identifier, payload.password)
    except AppError as exc:
        log_json(
            logger,
            {
                "event": "auth_login_failed",
                "identifier": identifier,
                "error_code": exc.error.code,
                "trace_id": trace_id,
            },
            logging.WARNING,
        )
        raise
    log_json(
        logger,
        {"event": "auth_login", "user_id": str(user.id), "tenant_id": str(user.tenant_id), "trace_id": trace_id},
    )
    return TokenResponse(access_token=token, trace_id=trace_id)


@router.post(
    "/token",
    response_model=OAuth2TokenResponse,
    summary="OAuth2 Token (Swagger/Auth)",
    description="OAuth2 password flow endpoint for Swagger Authorize using form-data username/password.",
)
async def oauth2_token(request: Request, db=Depends(get_db)):
    form_data = parse_qs((await request.body()).decode())
    username = (form_data.get("username") or [""])[0]
    password = (form_data.get("password") or [""])[0]
    _, token = AuthService(db).login(username, password)
    return OAuth2TokenResponse(access_token=token)
