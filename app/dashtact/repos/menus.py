from sqlalchemy import func, select

from app.dashtact.db.models import DashboardMenu


class DashboardMenuRepository:
    def __init__(self, db):
        self.db = db

    def get_by_id(self, menu_id: str):
        return self.db.get(DashboardMenu, menu_id)

    def get_by_key(self, key: str):
        stmt = select(DashboardMenu).where(DashboardMenu.key == key)
        return self.db.execute(stmt).scalars().first()

    def get_active_by_route(self, route: str):
        stmt = (
            select(DashboardMenu)
            .where(DashboardMenu.route == route, DashboardMenu.is_active.is_(True))
            .order_by(DashboardMenu.order.asc())
        )
        return self.db.execute(stmt).scalars().first()

    def list_all(self, *, active_only: bool = False):
        stmt = select(DashboardMenu)
        if active_only:
            stmt = stmt.where(DashboardMenu.is_active.is_(True))
        stmt = stmt.order_by(DashboardMenu.order.asc(), DashboardMenu.created_at.asc())
        return self.db.execute(stmt).scalars().all()

    def list_by_ids(self, menu_ids: list[str]):
        if not menu_ids:
            return []
        stmt = select(DashboardMenu).where(DashboardMenu.id.in_(menu_ids))
        return self.db.execute(stmt).scalars().all()

    def count_children(self, menu_id) -> int:
        stmt = select(func.count()).select_from(DashboardMenu).where(DashboardMenu.parent_id == menu_id)
        return self.db.execute(stmt).scalar_one()

    def save(self, menu: DashboardMenu) -> DashboardMenu:
        self.db.add(menu)
        self.db.commit()
        self.db.refresh(menu)
        return menu

    def delete(self, menu: DashboardMenu) -> None:
        self.db.delete(menu)
        self.db.commit()
