from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

MenuPageType = Literal["WIDGET_BASED", "HARDCODED", "EXTERNAL"]


class MenuCreateRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "example": {
                "key": "ecommerce-inventory",
                "label": "Inventory",
                "icon": "Warehouse",
                "route": "/dashboard/ecommerce/inventory",
                "order": 30,
                "page_type": "HARDCODED",
                "component_path": "/dashboard/ecommerce/inventory/page",
                "required_permissions": ["inventory:read"],
                "required_roles": [],
                "feature_flag": "inventory_enabled",
            }
        }
    }

    key: str = Field(..., min_length=1, max_length=100)
    label: str = Field(..., min_length=1, max_length=255)
    icon: str = Field(..., min_length=1, max_length=100)
    route: str = Field(..., min_length=1, max_length=255)
    order: int = 0
    parent_id: str | None = None
    page_type: MenuPageType = "HARDCODED"
    page_identifier: str | None = None
    component_path: str | None = None
    is_active: bool = True
    required_permissions: list[str] = Field(default_factory=list)
    required_roles: list[str] = Field(default_factory=list)
    feature_flag: str | None = None
    description: str | None = None
    badge: str | None = Field(default=None, max_length=50)
    available_widgets: list[str] = Field(default_factory=list)


class MenuUpdateRequest(BaseModel):
    key: str | None = Field(default=None, min_length=1, max_length=100)
    label: str | None = Field(default=None, min_length=1, max_length=255)
    icon: str | None = Field(default=None, min_length=1, max_length=100)
    route: str | None = Field(default=None, min_length=1, max_length=255)
    order: int | None = None
    parent_id: str | None = None
    page_type: MenuPageType | None = None
    page_identifier: str | None = None
    component_path: str | None = None
    is_active: bool | None = None
    required_permissions: list[str] | None = None
    required_roles: list[str] | None = None
    feature_flag: str | None = None
    description: str | None = None
    badge: str | None = Field(default=None, max_length=50)
    available_widgets: list[str] | None = None


class MenuReorderEntry(BaseModel):
    id: str
    order: int


class MenuReorderRequest(BaseModel):
    items: list[MenuReorderEntry] = Field(..., min_length=1)


class MenuItemResponse(BaseModel):
    id: str
    key: str
    label: str
    icon: str
    route: str
    order: int
    parent_id: str | None = None
    page_type: str
    page_identifier: str | None = None
    component_path: str | None = None
    is_active: bool
    required_permissions: list[str] = Field(default_factory=list)
    required_roles: list[str] = Field(default_factory=list)
    feature_flag: str | None = None
    description: str | None = None
    badge: str | None = None
    available_widgets: list[str] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None


class MenuTreeNode(MenuItemResponse):
    children: list[MenuTreeNode] = Field(default_factory=list)


MenuTreeNode.model_rebuild()


class MenuTreeResponse(BaseModel):
    menus: list[MenuTreeNode]
    trace_id: str


class MenuListResponse(BaseModel):
    menus: list[MenuItemResponse]
    trace_id: str


class MenuResponse(BaseModel):
    menu: MenuItemResponse
    trace_id: str


class MenuPageConfigResponse(BaseModel):
    page_type: str
    page_identifier: str | None = None
    component_path: str | None = None
    required_permissions: list[str]
    required_roles: list[str]
    trace_id: str
