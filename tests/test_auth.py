from app.dashtact.core.config import settings
from app.dashtact.core.security import decode_token
from tests.menu_helpers import create_tenant, create_user


def test_login_returns_token_with_claims(client, seeded):
    response = client.post(
        "/dashtact/auth/login",
        json={"username_or_email": settings.SUPERADMIN_USERNAME, "password": settings.SUPERADMIN_PASSWORD},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["token_type"] == "bearer"
    claims = decode_token(body["access_token"])
    assert claims["role"] == "SUPERADMIN"
    assert claims["tenant_id"]


def test_login_by_email(client, seeded):
    tenant = create_tenant(seeded)
    create_user(seeded, tenant=tenant, role="ADMIN", username="jane")

    response = client.post("/dashtact/auth/login", json={"email": "jane@example.com", "password": "Pass1234!"})

    assert response.status_code == 200


def test_login_invalid_credentials(client, seeded):
    response = client.post(
        "/dashtact/auth/login",
        json={"username_or_email": settings.SUPERADMIN_USERNAME, "password": "wrong"},
    )

    assert response.status_code == 401
    assert response.json()["code"] == "INVALID_CREDENTIALS"


def test_login_inactive_user(client, seeded):
    tenant = create_tenant(seeded)
    create_user(seeded, tenant=tenant, role="ADMIN", username="suspended", status="suspended")

    response = client.post("/dashtact/auth/login", json={"username_or_email": "suspended", "password": "Pass1234!"})

    assert response.status_code == 403
    assert response.json()["code"] == "USER_INACTIVE"


def test_login_requires_identifier(client):
    response = client.post("/dashtact/auth/login", json={"password": "x"})

    assert response.status_code == 422


def test_oauth2_token_form(client, seeded):
    response = client.post(
        "/dashtact/auth/token",
        data={"username": settings.SUPERADMIN_USERNAME, "password": settings.SUPERADMIN_PASSWORD},
    )

    assert response.status_code == 200
    assert response.json()["token_type"] == "bearer"
