import logging

from fastapi import APIRouter, Depends, Query, Request

from app.dashtact.core.context import RequestContext
from app.dashtact.core.deps import (
    get_permission_cache,
    require_active_user,
    require_permission,
    require_request_context,
)
from app.dashtact.db.models import DashboardMenu
from app.dashtact.db.session import get_db
from app.dashtact.schemas.menus import (
    MenuCreateRequest,
    MenuItemResponse,
    MenuListResponse,
    MenuPageConfigResponse,
    MenuReorderRequest,
    MenuResponse,
    MenuTreeNode,
    MenuTreeResponse,
    MenuUpdateRequest,
)
from app.dashtact.services.audit import AuditService
from app.dashtact.services.menu_filter import count_nodes
from app.dashtact.services.menus import MenuService, menu_snapshot

router = APIRouter()
logger = logging.getLogger(__name__)


def _menu_item(menu: DashboardMenu) -> MenuItemResponse:
    payload = menu_snapshot(menu)
    payload["created_at"] = menu.created_at
    payload["updated_at"] = menu.updated_at
    return MenuItemResponse(**payload)


def _audit(db, context: RequestContext, action: str, entity_id: str | None, before=None, after=None) -> None:
    AuditService(db, context).record(
        action=action,
        entity_type="dashboard_menu",
        entity_id=entity_id,
        before=before,
        after=after,
    )


@router.get("/user-menus", response_model=MenuTreeResponse, summary="Menus visible to the current user")
def get_user_menus(
    request: Request,
    current_user=Depends(require_active_user),
    db=Depends(get_db),
):
    service = MenuService(db, permission_cache=get_permission_cache(request))
    tree = service.find_user_menus(current_user)
    request.state.menu_items_resolved = count_nodes(tree)
    return MenuTreeResponse(
        menus=[MenuTreeNode(**node.to_dict()) for node in tree],
        trace_id=getattr(request.state, "trace_id", ""),
    )


@router.get("/by-route", response_model=MenuPageConfigResponse, summary="Page configuration for a route")
def get_menu_by_route(
    request: Request,
    route: str = Query(..., min_length=1),
    current_user=Depends(require_active_user),
    db=Depends(get_db),
):
    config = MenuService(db).find_by_route(route)
    return MenuPageConfigResponse(**config, trace_id=getattr(request.state, "trace_id", ""))


@router.get("", response_model=MenuListResponse, summary="List all menus")
def list_menus(
    request: Request,
    _decision=Depends(require_permission("menus:read")),
    db=Depends(get_db),
):
    menus = MenuService(db).find_all()
    return MenuListResponse(
        menus=[_menu_item(menu) for menu in menus],
        trace_id=getattr(request.state, "trace_id", ""),
    )


@router.post("", response_model=MenuResponse, status_code=201, summary="Create menu")
def create_menu(
    request: Request,
    payload: MenuCreateRequest,
    _decision=Depends(require_permission("menus:write")),
    context: RequestContext = Depends(require_request_context),
    db=Depends(get_db),
):
    menu = MenuService(db).create(payload)
    snapshot = menu_snapshot(menu)
    _audit(db, context, "menu.create", snapshot["id"], after=snapshot)
    return MenuResponse(menu=_menu_item(menu), trace_id=getattr(request.state, "trace_id", ""))


@router.patch("/reorder", response_model=MenuListResponse, summary="Reorder menus")
def reorder_menus(
    request: Request,
    payload: MenuReorderRequest,
    _decision=Depends(require_permission("menus:write")),
    context: RequestContext = Depends(require_request_context),
    db=Depends(get_db),
):
    menus = MenuService(db).reorder(payload.items)
    _audit(db, context, "menu.reorder", None, after={"items": [entry.model_dump() for entry in payload.items]})
    return MenuListResponse(
        menus=[_menu_item(menu) for menu in menus],
        trace_id=getattr(request.state, "trace_id", ""),
    )


@router.get("/{menu_id}", response_model=MenuResponse, summary="Get menu")
def get_menu(
    request: Request,
    menu_id: str,
    _decision=Depends(require_permission("menus:read")),
    db=Depends(get_db),
):
    menu = MenuService(db).find_one(menu_id)
    return MenuResponse(menu=_menu_item(menu), trace_id=getattr(request.state, "trace_id", ""))


@router.patch("/{menu_id}", response_model=MenuResponse, summary="Update menu")
def update_menu(
    request: Request,
    menu_id: str,
    payload: MenuUpdateRequest,
    _decision=Depends(require_permission("menus:write")),
    context: RequestContext = Depends(require_request_context),
    db=Depends(get_db),
):
    service = MenuService(db)
    before = menu_snapshot(service.find_one(menu_id))
    menu = service.update(menu_id, payload)
    after = menu_snapshot(menu)
    _audit(db, context, "menu.update", after["id"], before=before, after=after)
    return MenuResponse(menu=_menu_item(menu), trace_id=getattr(request.state, "trace_id", ""))


@router.patch("/{menu_id}/toggle", response_model=MenuResponse, summary="Toggle menu active status")
def toggle_menu(
    request: Request,
    menu_id: str,
    _decision=Depends(require_permission("menus:write")),
    context: RequestContext = Depends(require_request_context),
    db=Depends(get_db),
):
    menu = MenuService(db).toggle_active(menu_id)
    _audit(
        db,
        context,
        "menu.toggle",
        str(menu.id),
        before={"is_active": not menu.is_active},
        after={"is_active": menu.is_active},
    )
    return MenuResponse(menu=_menu_item(menu), trace_id=getattr(request.state, "trace_id", ""))


@router.delete("/{menu_id}", summary="Delete menu")
def delete_menu(
    request: Request,
    menu_id: str,
    _decision=Depends(require_permission("menus:write")),
    context: RequestContext = Depends(require_request_context),
    db=Depends(get_db),
):
    service = MenuService(db)
    before = menu_snapshot(service.find_one(menu_id))
    service.delete(menu_id)
    _audit(db, context, "menu.delete", before["id"], before=before)
    return {"deleted": True, "id": before["id"], "trace_id": getattr(request.state, "trace_id", "")}
