from datetime import datetime, timedelta, timezone
from typing import Any

from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import BaseModel, ValidationError

from app.dashtact.core.config import settings
from app.dashtact.core.error_catalog import AppError, ErrorCatalog

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/dashtact/auth/token")


class TokenClaims(BaseModel):
    """Claims carried by a dashboard access token."""

    sub: str
    tenant_id: str
    role: str
    username: str
    email: str
    status: str = "active"


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def issue_access_token(user, expires_in: timedelta | None = None) -> str:
    claims = TokenClaims(
        sub=str(user.id),
        tenant_id=str(user.tenant_id),
        role=user.role,
        username=user.username,
        email=user.email,
        status=user.status,
    ).model_dump()
    claims["exp"] = datetime.now(timezone.utc) + (expires_in or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str) -> dict[str, Any]:
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])


def read_token_claims(token: str) -> TokenClaims:
    try:
        return TokenClaims(**decode_token(token))
    except (JWTError, ValidationError, TypeError) as exc:
        raise AppError(ErrorCatalog.INVALID_TOKEN) from exc
