from sqlalchemy import select

from app.dashtact.db.models import EcommerceSettings


class EcommerceSettingsRepository:
    def __init__(self, db):
        self.db = db

    def get_global(self, tenant_id: str):
        stmt = select(EcommerceSettings).where(
            EcommerceSettings.tenant_id == tenant_id,
            EcommerceSettings.scope == "global",
            EcommerceSettings.user_id.is_(None),
        )
        return self.db.execute(stmt).scalars().first()

    def get_for_user(self, tenant_id: str, user_id: str):
        stmt = select(EcommerceSettings).where(
            EcommerceSettings.tenant_id == tenant_id,
            EcommerceSettings.scope == "user",
            EcommerceSettings.user_id == user_id,
        )
        return self.db.execute(stmt).scalars().first()

    def get_effective(self, tenant_id: str, user_id: str | None):
        if user_id is not None:
            user_settings = self.get_for_user(tenant_id, user_id)
            if user_settings is not None:
                return user_settings
        return self.get_global(tenant_id)

    def save(self, settings: EcommerceSettings) -> EcommerceSettings:
        self.db.add(settings)
        self.db.commit()
        self.db.refresh(settings)
        return settings
