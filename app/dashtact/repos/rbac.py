from sqlalchemy import select

from app.dashtact.db.models import PermissionCatalog, RoleTemplate, RoleTemplatePermission


class RoleTemplateRepository:
    def __init__(self, db):
        self.db = db

    def find_template(self, role_name: str, tenant_id: str | None = None) -> RoleTemplate | None:
        """Tenant override when ``tenant_id`` is given, else the system template."""
        tenant_clause = RoleTemplate.tenant_id.is_(None) if tenant_id is None else RoleTemplate.tenant_id == tenant_id
        stmt = select(RoleTemplate).where(RoleTemplate.name == role_name, tenant_clause)
        return self.db.execute(stmt).scalars().first()

    def permission_codes(self, role_template_id) -> list[str]:
        stmt = (
            select(PermissionCatalog.code)
            .join(RoleTemplatePermission, RoleTemplatePermission.permission_id == PermissionCatalog.id)
            .where(RoleTemplatePermission.role_template_id == role_template_id)
        )
        return list(self.db.execute(stmt).scalars().all())
