"""Menu visibility and hierarchy resolution.

Every function here is pure: it reads a snapshot of menu items and returns a
new list without touching its inputs. Nothing raises for missing optional
fields, dangling parent references or unknown feature flags.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Sequence

from app.dashtact.core.logging import log_json

logger = logging.getLogger(__name__)

WILDCARD_PERMISSION = "*:*"


class FeatureFlag(str, Enum):
    ECOMMERCE = "ecommerce"
    ECOMMERCE_ENABLED = "ecommerce_enabled"
    INVENTORY_ENABLED = "inventory_enabled"
    SHIPPING_ENABLED = "shipping_enabled"
    COD_ENABLED = "cod_enabled"
    PORTAL_ENABLED = "portal_enabled"
    BLOG = "blog"


@dataclass(frozen=True)
class FeatureSettings:
    track_inventory: bool = False
    shipping_enabled: bool = False
    cod_enabled: bool = False
    portal_enabled: bool = False

    @classmethod
    def from_model(cls, row) -> "FeatureSettings":
        return cls(
            track_inventory=bool(row.track_inventory),
            shipping_enabled=bool(row.shipping_enabled),
            cod_enabled=bool(row.cod_enabled),
            portal_enabled=bool(row.portal_enabled),
        )


def _as_tuple(values: Iterable[str] | None) -> tuple[str, ...]:
    if not values:
        return ()
    return tuple(values)


@dataclass(frozen=True)
class MenuItem:
    id: str
    key: str = ""
    label: str = ""
    route: str = ""
    icon: str = ""
    order: int = 0
    parent_id: str | None = None
    required_roles: tuple[str, ...] = ()
    required_permissions: tuple[str, ...] = ()
    feature_flag: str | None = None
    page_type: str = "HARDCODED"
    page_identifier: str | None = None
    component_path: str | None = None
    is_active: bool = True
    description: str | None = None
    badge: str | None = None
    available_widgets: tuple[str, ...] = ()

    def __post_init__(self):
        # Stored JSON columns come back as lists or None.
        object.__setattr__(self, "required_roles", _as_tuple(self.required_roles))
        object.__setattr__(self, "required_permissions", _as_tuple(self.required_permissions))
        object.__setattr__(self, "available_widgets", _as_tuple(self.available_widgets))

    @classmethod
    def from_model(cls, row) -> "MenuItem":
        return cls(
            id=str(row.id),
            key=row.key,
            label=row.label,
            route=row.route,
            icon=row.icon,
            order=row.order or 0,
            parent_id=str(row.parent_id) if row.parent_id else None,
            required_roles=row.required_roles,
            required_permissions=row.required_permissions,
            feature_flag=row.feature_flag or None,
            page_type=row.page_type,
            page_identifier=row.page_identifier,
            component_path=row.component_path,
            is_active=row.is_active,
            description=row.description,
            badge=row.badge,
            available_widgets=row.available_widgets,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "key": self.key,
            "label": self.label,
            "route": self.route,
            "icon": self.icon,
            "order": self.order,
            "parent_id": self.parent_id,
            "required_roles": list(self.required_roles),
            "required_permissions": list(self.required_permissions),
            "feature_flag": self.feature_flag,
            "page_type": self.page_type,
            "page_identifier": self.page_identifier,
            "component_path": self.component_path,
            "is_active": self.is_active,
            "description": self.description,
            "badge": self.badge,
            "available_widgets": list(self.available_widgets),
        }


@dataclass
class ResolvedMenuNode:
    item: MenuItem
    children: list["ResolvedMenuNode"] = field(default_factory=list)

    @property
    def id(self) -> str:
        return self.item.id

    @property
    def order(self) -> int:
        return self.item.order

    def to_dict(self) -> dict:
        root = {**self.item.to_dict(), "children": []}
        pending = [(self, root)]
        while pending:
            node, payload = pending.pop()
            for child in node.children:
                child_payload = {**child.item.to_dict(), "children": []}
                payload["children"].append(child_payload)
                pending.append((child, child_payload))
        return root


def filter_by_role(items: Sequence[MenuItem], user_roles: Iterable[str]) -> list[MenuItem]:
    """Keep items with no role restriction or sharing any role with the user."""
    roles = set(user_roles or ())
    return [item for item in items if not item.required_roles or roles.intersection(item.required_roles)]


def filter_by_permission(items: Sequence[MenuItem], user_permissions: Iterable[str]) -> list[MenuItem]:
    """Keep items whose every required permission is held by the user.

    Unlike roles this is all-of; the wildcard permission passes everything.
    """
    permissions = set(user_permissions or ())
    if WILDCARD_PERMISSION in permissions:
        return list(items)
    return [
        item
        for item in items
        if not item.required_permissions or permissions.issuperset(item.required_permissions)
    ]


_FLAG_SETTINGS = {
    FeatureFlag.INVENTORY_ENABLED: "track_inventory",
    FeatureFlag.SHIPPING_ENABLED: "shipping_enabled",
    FeatureFlag.COD_ENABLED: "cod_enabled",
    FeatureFlag.PORTAL_ENABLED: "portal_enabled",
}


def _feature_enabled(flag_key: str, settings: FeatureSettings) -> bool:
    try:
        flag = FeatureFlag(flag_key)
    except ValueError:
        # Unknown keys pass while settings exist, but a missing settings row hides them.
        log_json(logger, {"event": "menu_unknown_feature_flag", "feature_flag": flag_key}, logging.DEBUG)
        return True

    attribute = _FLAG_SETTINGS.get(flag)
    # ecommerce, ecommerce_enabled and blog are not gated by any setting.
    return attribute is None or bool(getattr(settings, attribute))


def filter_by_feature_flags(items: Sequence[MenuItem], settings: FeatureSettings | None) -> list[MenuItem]:
    visible: list[MenuItem] = []
    for item in items:
        if not item.feature_flag:
            visible.append(item)
            continue
        if settings is None:
            continue
        if _feature_enabled(item.feature_flag, settings):
            visible.append(item)
    return visible


def sort_by_order(items: Sequence[MenuItem]) -> list[MenuItem]:
    return sorted(items, key=lambda item: item.order)


def build_hierarchy(items: Sequence[MenuItem]) -> list[ResolvedMenuNode]:
    """Nest a flat list under each item's parent and sort siblings by order.

    Items whose parent is absent from ``items`` become roots, and so does an
    item naming itself as parent. Sorting is stable, so siblings with equal
    order keep their input order.
    """
    position_by_id: dict[str, int] = {}
    for position, item in enumerate(items):
        position_by_id.setdefault(item.id, position)

    root_positions: list[int] = []
    child_positions: list[list[int]] = [[] for _ in items]
    for position, item in enumerate(items):
        parent_position = position_by_id.get(item.parent_id) if item.parent_id is not None else None
        if parent_position is None or parent_position == position:
            root_positions.append(position)
        else:
            child_positions[parent_position].append(position)

    def by_order(position: int) -> int:
        return items[position].order

    # One node per position, linked by index, so nesting depth never hits the recursion limit.
    nodes = [ResolvedMenuNode(item=item) for item in items]
    for position, children in enumerate(child_positions):
        nodes[position].children = [nodes[child] for child in sorted(children, key=by_order)]
    roots = [nodes[position] for position in sorted(root_positions, key=by_order)]

    attached = count_nodes(roots)
    if attached != len(items):
        log_json(
            logger,
            {"event": "menu_parent_cycle_dropped", "dropped": len(items) - attached},
            logging.WARNING,
        )
    return roots


def count_nodes(nodes: Sequence[ResolvedMenuNode]) -> int:
    count = 0
    pending = list(nodes)
    while pending:
        node = pending.pop()
        count += 1
        pending.extend(node.children)
    return count


def cascade_visibility(items: Sequence[MenuItem], visible_ids: set[str]) -> list[MenuItem]:
    """Keep items that are visible themselves and whose every ancestor is visible.

    Ancestors are looked up in the full ``items`` list. A parent id that is not
    in ``items`` does not hide the child; a parent cycle hides every member.
    """
    by_id: dict[str, MenuItem] = {}
    for item in items:
        by_id.setdefault(item.id, item)

    resolved: dict[str, bool] = {}

    def is_visible(item: MenuItem) -> bool:
        chain: list[MenuItem] = []
        on_chain: set[str] = set()
        outcome = True
        current: MenuItem | None = item
        while current is not None:
            if current.id in resolved:
                outcome = resolved[current.id]
                break
            if current.id in on_chain:
                outcome = False
                break
            chain.append(current)
            on_chain.add(current.id)
            if current.id not in visible_ids:
                outcome = False
                break
            current = by_id.get(current.parent_id) if current.parent_id is not None else None
        for member in chain:
            resolved[member.id] = outcome
        return outcome

    return [item for item in items if is_visible(item)]


def resolve_menu(
    items: Sequence[MenuItem],
    *,
    user_roles: Iterable[str],
    user_permissions: Iterable[str],
    settings: FeatureSettings | None,
) -> list[ResolvedMenuNode]:
    by_role = filter_by_role(items, user_roles)
    by_permission = filter_by_permission(by_role, user_permissions)
    by_feature = filter_by_feature_flags(by_permission, settings)
    tree = build_hierarchy(sort_by_order(by_feature))
    log_json(
        logger,
        {
            "event": "menu_resolved",
            "input": len(items),
            "after_role": len(by_role),
            "after_permission": len(by_permission),
            "after_feature": len(by_feature),
            "roots": len(tree),
            "has_feature_settings": settings is not None,
        },
        logging.DEBUG,
    )
    return tree
