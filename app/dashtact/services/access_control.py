from __future__ import annotations

from dataclasses import dataclass

from app.dashtact.repos.rbac import RoleTemplateRepository
from app.dashtact.services.menu_filter import WILDCARD_PERMISSION


@dataclass(frozen=True)
class PermissionDecision:
    key: str
    allowed: bool
    source: str


class AccessControlService:
    """Resolves a role's permission codes, tenant template first.

    ``cache`` is shared for the lifetime of one request.
    """

    def __init__(self, db, cache: dict | None = None):
        self.repo = RoleTemplateRepository(db)
        self.cache = cache if cache is not None else {}

    def permissions_for_role(self, role_name: str | None, tenant_id: str | None) -> set[str]:
        if not role_name:
            return set()
        cache_key = f"role_permissions:{tenant_id}:{role_name}"
        if cache_key in self.cache:
            return self.cache[cache_key]

        template = None
        if tenant_id is not None:
            template = self.repo.find_template(role_name, tenant_id)
        if template is None:
            template = self.repo.find_template(role_name)
        permissions = set(self.repo.permission_codes(template.id)) if template is not None else set()

        self.cache[cache_key] = permissions
        return permissions

    def evaluate_permission(
        self, permission_key: str, role_name: str | None, tenant_id: str | None
    ) -> PermissionDecision:
        normalized_key = permission_key.strip()
        if not role_name:
            return PermissionDecision(key=normalized_key, allowed=False, source="default_deny")
        permissions = self.permissions_for_role(role_name, tenant_id)
        if WILDCARD_PERMISSION in permissions:
            return PermissionDecision(key=normalized_key, allowed=True, source="wildcard")
        if normalized_key in permissions:
            return PermissionDecision(key=normalized_key, allowed=True, source="role_template")
        return PermissionDecision(key=normalized_key, allowed=False, source="default_deny")
