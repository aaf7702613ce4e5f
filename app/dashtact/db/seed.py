from sqlalchemy import select

from app.dashtact.core.config import settings
from app.dashtact.core.security import hash_password
from app.dashtact.db.models import (
    DashboardMenu,
    PermissionCatalog,
    RoleTemplate,
    RoleTemplatePermission,
    Tenant,
    User,
)


DEFAULT_PERMISSIONS = [
    ("*:*", "All permissions"),
    ("menus:read", "View dashboard menu configuration"),
    ("menus:write", "Manage dashboard menus"),
    ("settings:read", "View settings"),
    ("settings:write", "Manage settings"),
    ("activity-logs:read", "View activity logs"),
    ("blog:read", "View blog posts"),
    ("products:read", "View products"),
    ("orders:read", "View orders"),
    ("customers:read", "View customers"),
    ("inventory:read", "View inventory"),
    ("shipping:read", "View shipping methods"),
    ("payments:read", "View payment methods"),
]

DEFAULT_ROLE_TEMPLATES = {
    "SUPERADMIN": ["*:*"],
    "ADMIN": [
        "menus:read",
        "menus:write",
        "settings:read",
        "settings:write",
        "activity-logs:read",
        "blog:read",
        "products:read",
        "orders:read",
        "customers:read",
        "inventory:read",
        "shipping:read",
        "payments:read",
    ],
    "MANAGER": ["settings:read", "blog:read", "products:read", "orders:read", "customers:read", "inventory:read"],
    "USER": ["blog:read"],
}

# (key, label, icon, route, order, parent_key, permissions, roles, feature_flag)
DEFAULT_MENUS = [
    ("dashboard", "Dashboard", "LayoutDashboard", "/dashboard", 1, None, [], ["ADMIN", "SUPERADMIN"], None),
    ("activity", "Activity", "Activity", "/dashboard/activity", 10, None, ["activity-logs:read"], [], None),
    ("blog", "Blog", "BookOpen", "/dashboard/blog", 15, None, ["blog:read"], [], "blog"),
    ("ecommerce", "E-Commerce", "ShoppingCart", "/dashboard/ecommerce", 30, None, [], [], "ecommerce"),
    (
        "ecommerce-products",
        "Products",
        "Package",
        "/dashboard/ecommerce/products",
        1,
        "ecommerce",
        ["products:read"],
        [],
        "ecommerce",
    ),
    (
        "ecommerce-orders",
        "Orders",
        "ShoppingBag",
        "/dashboard/ecommerce/orders",
        2,
        "ecommerce",
        ["orders:read"],
        [],
        "ecommerce",
    ),
    (
        "ecommerce-customers",
        "Customers",
        "Users",
        "/dashboard/ecommerce/customers",
        3,
        "ecommerce",
        ["customers:read"],
        [],
        "ecommerce",
    ),
    (
        "ecommerce-inventory",
        "Inventory",
        "Warehouse",
        "/dashboard/ecommerce/inventory",
        4,
        "ecommerce",
        ["inventory:read"],
        [],
        "inventory_enabled",
    ),
    (
        "ecommerce-shipping",
        "Shipping",
        "Truck",
        "/dashboard/ecommerce/shipping",
        5,
        "ecommerce",
        ["shipping:read"],
        [],
        "shipping_enabled",
    ),
    (
        "ecommerce-payments",
        "Cash on Delivery",
        "Banknote",
        "/dashboard/ecommerce/payments",
        6,
        "ecommerce",
        ["payments:read"],
        [],
        "cod_enabled",
    ),
    ("settings", "Settings", "Settings", "/dashboard/settings", 100, None, ["settings:read"], [], None),
    (
        "settings-menus",
        "Menus",
        "Menu",
        "/dashboard/settings/menus",
        1,
        "settings",
        ["menus:write"],
        [],
        None,
    ),
    (
        "settings-ecommerce",
        "E-Commerce",
        "Store",
        "/dashboard/settings/ecommerce",
        2,
        "settings",
        ["settings:write"],
        [],
        "ecommerce",
    ),
]


def _get_or_create_tenant(db):
    tenant = db.execute(select(Tenant).where(Tenant.name == settings.DEFAULT_TENANT_NAME)).scalars().first()
    if tenant:
        return tenant
    tenant = Tenant(name=settings.DEFAULT_TENANT_NAME)
    db.add(tenant)
    db.flush()
    return tenant


def _get_or_create_permissions(db):
    existing = {perm.code for perm in db.execute(select(PermissionCatalog)).scalars().all()}
    for code, description in DEFAULT_PERMISSIONS:
        if code in existing:
            continue
        db.add(PermissionCatalog(code=code, description=description))


def _get_or_create_role_templates(db):
    existing = {
        role.name
        for role in db.execute(select(RoleTemplate).where(RoleTemplate.tenant_id.is_(None))).scalars().all()
    }
    for name in DEFAULT_ROLE_TEMPLATES:
        if name in existing:
            continue
        db.add(RoleTemplate(name=name, description=f"System role: {name}", is_system=True))


def _assign_role_permissions(db):
    permissions = {perm.code: perm for perm in db.execute(select(PermissionCatalog)).scalars().all()}
    roles = {
        role.name: role
        for role in db.execute(select(RoleTemplate).where(RoleTemplate.tenant_id.is_(None))).scalars().all()
    }
    existing_pairs = {
        (rtp.role_template_id, rtp.permission_id)
        for rtp in db.execute(select(RoleTemplatePermission)).scalars().all()
    }
    for role_name, permission_codes in DEFAULT_ROLE_TEMPLATES.items():
        role = roles.get(role_name)
        if not role:
            continue
        for code in permission_codes:
            permission = permissions.get(code)
            if not permission:
                continue
            if (role.id, permission.id) in existing_pairs:
                continue
            db.add(RoleTemplatePermission(role_template_id=role.id, permission_id=permission.id))


def _get_or_create_superadmin(db, tenant):
    user = db.execute(select(User).where(User.username == settings.SUPERADMIN_USERNAME)).scalars().first()
    if user:
        return user
    user = User(
        tenant_id=tenant.id,
        username=settings.SUPERADMIN_USERNAME,
        email=settings.SUPERADMIN_EMAIL,
        hashed_password=hash_password(settings.SUPERADMIN_PASSWORD),
        role="SUPERADMIN",
        status="active",
        is_active=True,
    )
    db.add(user)
    return user


def _get_or_create_menus(db):
    existing = {menu.key: menu for menu in db.execute(select(DashboardMenu)).scalars().all()}
    # Parents are listed before their children.
    for key, label, icon, route, order, parent_key, permissions, roles, feature_flag in DEFAULT_MENUS:
        if key in existing:
            continue
        parent = existing.get(parent_key) if parent_key else None
        menu = DashboardMenu(
            key=key,
            label=label,
            icon=icon,
            route=route,
            order=order,
            parent_id=parent.id if parent else None,
            page_type="HARDCODED",
            component_path=f"{route}/page",
            is_active=True,
            required_permissions=permissions,
            required_roles=roles,
            feature_flag=feature_flag,
            available_widgets=[],
        )
        db.add(menu)
        db.flush()
        existing[key] = menu


def run_seed(db):
    tenant = _get_or_create_tenant(db)
    _get_or_create_permissions(db)
    _get_or_create_role_templates(db)
    db.flush()
    _assign_role_permissions(db)
    _get_or_create_superadmin(db, tenant)
    _get_or_create_menus(db)
    db.commit()
