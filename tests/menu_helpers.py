import uuid

from app.dashtact.core.security import hash_password
from app.dashtact.db.models import Tenant, User


def create_tenant(db_session, name: str | None = None):
    tenant = Tenant(id=uuid.uuid4(), name=name or f"Tenant {uuid.uuid4().hex[:8]}")
    db_session.add(tenant)
    db_session.commit()
    return tenant


def create_user(db_session, *, tenant, role: str, username: str, password: str = "Pass1234!", status: str = "active"):
    user = User(
        id=uuid.uuid4(),
        tenant_id=tenant.id,
        username=username,
        email=f"{username}@example.com",
        hashed_password=hash_password(password),
        role=role,
        status=status,
        is_active=True,
    )
    db_session.add(user)
    db_session.commit()
    return user


def login(client, username: str, password: str = "Pass1234!") -> str:
    response = client.post(
        "/dashtact/auth/login",
        json={"username_or_email": username, "password": password},
    )
    assert response.status_code == 200, response.text
    return response.json()["access_token"]


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}
