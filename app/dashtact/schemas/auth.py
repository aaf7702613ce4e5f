from pydantic import BaseModel, EmailStr, model_validator


class LoginRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {"username_or_email": "superadmin", "password": "change-me"},
                {"email": "admin@example.com", "password": "Secret123"},
            ]
        }
    }

    email: EmailStr | None = None
    username_or_email: str | None = None
    password: str

    @model_validator(mode="after")
    def ensure_identifier(self):
        if not self.identifier:
            raise ValueError("email or username_or_email is required")
        return self

    @property
    def identifier(self) -> str:
        return str(self.email or self.username_or_email or "").strip()


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    trace_id: str


class OAuth2TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
