from __future__ import annotations

import logging
import uuid

from app.dashtact.core.error_catalog import AppError, ErrorCatalog
from app.dashtact.core.metrics import metrics
from app.dashtact.db.models import DashboardMenu
from app.dashtact.repos.menus import DashboardMenuRepository
from app.dashtact.services.access_control import AccessControlService
from app.dashtact.services.feature_settings import EcommerceSettingsService
from app.dashtact.services.menu_filter import MenuItem, ResolvedMenuNode, count_nodes, resolve_menu

logger = logging.getLogger(__name__)

_MENU_FIELDS = (
    "key",
    "label",
    "icon",
    "route",
    "order",
    "parent_id",
    "page_type",
    "page_identifier",
    "component_path",
    "is_active",
    "required_permissions",
    "required_roles",
    "feature_flag",
    "description",
    "badge",
    "available_widgets",
)

_REQUIRED_FIELDS = {"key", "label", "icon", "route", "order", "page_type", "is_active"}


def _parse_id(value) -> uuid.UUID | None:
    if value is None or isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


def _validate_page_config(page_type: str, page_identifier: str | None, component_path: str | None) -> None:
    if page_type == "WIDGET_BASED" and not page_identifier:
        raise AppError(
            ErrorCatalog.MENU_PAGE_CONFIG_INVALID,
            details={"message": "pageIdentifier is required for WIDGET_BASED page type", "field": "page_identifier"},
        )
    if page_type == "HARDCODED" and not component_path:
        raise AppError(
            ErrorCatalog.MENU_PAGE_CONFIG_INVALID,
            details={"message": "componentPath is required for HARDCODED page type", "field": "component_path"},
        )


def menu_snapshot(menu: DashboardMenu) -> dict:
    return MenuItem.from_model(menu).to_dict()


class MenuService:
    def __init__(self, db, permission_cache: dict | None = None):
        self.db = db
        self.repo = DashboardMenuRepository(db)
        self.access_control = AccessControlService(db, cache=permission_cache)
        self.settings_service = EcommerceSettingsService(db)

    def find_user_menus(self, user) -> list[ResolvedMenuNode]:
        tenant_id = str(user.tenant_id)
        items = [MenuItem.from_model(row) for row in self.repo.list_all(active_only=True)]
        permissions = self.access_control.permissions_for_role(user.role, tenant_id)
        feature_settings = self.settings_service.get_feature_settings(tenant_id, str(user.id))
        tree = resolve_menu(
            items,
            user_roles=[user.role],
            user_permissions=sorted(permissions),
            settings=feature_settings,
        )
        metrics.observe_menu_items_resolved(count_nodes(tree))
        return tree

    def find_all(self) -> list[DashboardMenu]:
        return list(self.repo.list_all())

    def find_one(self, menu_id) -> DashboardMenu:
        parsed = _parse_id(menu_id)
        menu = self.repo.get_by_id(parsed) if parsed is not None else None
        if menu is None:
            raise AppError(ErrorCatalog.MENU_NOT_FOUND, details={"id": str(menu_id)})
        return menu

    def find_by_route(self, route: str) -> dict:
        menu = self.repo.get_active_by_route(route)
        if menu is None:
            raise AppError(ErrorCatalog.MENU_NOT_FOUND, details={"route": route})
        return {
            "page_type": menu.page_type,
            "page_identifier": menu.page_identifier or None,
            "component_path": menu.component_path or None,
            "required_permissions": list(menu.required_permissions or []),
            "required_roles": list(menu.required_roles or []),
        }

    def create(self, payload) -> DashboardMenu:
        data = payload.model_dump()
        if self.repo.get_by_key(data["key"]) is not None:
            raise AppError(ErrorCatalog.MENU_KEY_CONFLICT, details={"key": data["key"]})

        data["parent_id"] = self._existing_parent_id(data.get("parent_id"))
        _validate_page_config(data["page_type"], data.get("page_identifier"), data.get("component_path"))

        menu = DashboardMenu(
            **{
                **data,
                "is_active": True if data.get("is_active") is None else data["is_active"],
                "required_permissions": data.get("required_permissions") or [],
                "required_roles": data.get("required_roles") or [],
                "available_widgets": data.get("available_widgets") or [],
            }
        )
        menu = self.repo.save(menu)
        logger.info("Menu created", extra={"menu_id": str(menu.id), "key": menu.key})
        return menu

    def update(self, menu_id, payload) -> DashboardMenu:
        menu = self.find_one(menu_id)
        changes = payload.model_dump(exclude_unset=True)

        if "key" in changes and changes["key"] != menu.key:
            if self.repo.get_by_key(changes["key"]) is not None:
                raise AppError(ErrorCatalog.MENU_KEY_CONFLICT, details={"key": changes["key"]})

        if changes.get("parent_id") is not None:
            parent_id = self._existing_parent_id(changes["parent_id"])
            self._ensure_not_ancestor(menu.id, parent_id)
            changes["parent_id"] = parent_id

        page_type = changes.get("page_type") or menu.page_type
        page_identifier = changes["page_identifier"] if "page_identifier" in changes else menu.page_identifier
        component_path = changes["component_path"] if "component_path" in changes else menu.component_path
        _validate_page_config(page_type, page_identifier, component_path)

        for field_name in _MENU_FIELDS:
            if field_name not in changes:
                continue
            if changes[field_name] is None and field_name in _REQUIRED_FIELDS:
                continue
            setattr(menu, field_name, changes[field_name])
        return self.repo.save(menu)

    def delete(self, menu_id) -> DashboardMenu:
        menu = self.find_one(menu_id)
        if self.repo.count_children(menu.id) > 0:
            raise AppError(
                ErrorCatalog.MENU_HAS_CHILDREN,
                details={"message": "Delete children first or reassign them.", "id": str(menu.id)},
            )
        menu_key = str(menu.id)
        self.repo.delete(menu)
        logger.info("Menu deleted", extra={"menu_id": menu_key})
        return menu

    def reorder(self, entries) -> list[DashboardMenu]:
        requested = {}
        for entry in entries:
            parsed = _parse_id(entry.id)
            if parsed is None:
                raise AppError(ErrorCatalog.MENU_NOT_FOUND, details={"id": str(entry.id)})
            requested[parsed] = entry.order

        menus = self.repo.list_by_ids(list(requested))
        if len(menus) != len(requested):
            found = {menu.id for menu in menus}
            missing = sorted(str(menu_id) for menu_id in requested if menu_id not in found)
            raise AppError(ErrorCatalog.MENU_NOT_FOUND, details={"ids": missing})

        try:
            for menu in menus:
                menu.order = requested[menu.id]
                self.db.add(menu)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return self.find_all()

    def toggle_active(self, menu_id) -> DashboardMenu:
        menu = self.find_one(menu_id)
        menu.is_active = not menu.is_active
        return self.repo.save(menu)

    def _existing_parent_id(self, parent_id) -> uuid.UUID | None:
        if parent_id is None:
            return None
        parsed = _parse_id(parent_id)
        parent = self.repo.get_by_id(parsed) if parsed is not None else None
        if parent is None:
            raise AppError(ErrorCatalog.MENU_PARENT_NOT_FOUND, details={"parent_id": str(parent_id)})
        return parent.id

    def _ensure_not_ancestor(self, menu_id: uuid.UUID, parent_id: uuid.UUID) -> None:
        seen: set[uuid.UUID] = set()
        current = parent_id
        while current is not None and current not in seen:
            if current == menu_id:
                raise AppError(ErrorCatalog.MENU_PARENT_CYCLE, details={"parent_id": str(parent_id)})
            seen.add(current)
            parent = self.repo.get_by_id(current)
            current = parent.parent_id if parent is not None else None
