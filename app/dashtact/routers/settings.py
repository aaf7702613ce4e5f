from fastapi import APIRouter, Depends, Request

from app.dashtact.core.context import RequestContext
from app.dashtact.core.deps import require_permission, require_request_context
from app.dashtact.core.error_catalog import AppError, ErrorCatalog
from app.dashtact.db.models import EcommerceSettings
from app.dashtact.db.session import get_db
from app.dashtact.schemas.settings import EcommerceSettingsPatchRequest, EcommerceSettingsResponse
from app.dashtact.services.audit import AuditService
from app.dashtact.services.feature_settings import EcommerceSettingsService

router = APIRouter()


def _settings_item(row: EcommerceSettings) -> dict:
    return {
        "id": str(row.id),
        "tenant_id": str(row.tenant_id),
        "scope": row.scope,
        "user_id": str(row.user_id) if row.user_id else None,
        "store_name": row.store_name,
        "currency": row.currency,
        "track_inventory": row.track_inventory,
        "shipping_enabled": row.shipping_enabled,
        "cod_enabled": row.cod_enabled,
        "portal_enabled": row.portal_enabled,
        "updated_at": row.updated_at,
    }


@router.get("/ecommerce", response_model=EcommerceSettingsResponse, summary="Effective ecommerce settings")
def get_ecommerce_settings(
    request: Request,
    _decision=Depends(require_permission("settings:read")),
    context: RequestContext = Depends(require_request_context),
    db=Depends(get_db),
):
    row = EcommerceSettingsService(db).get_effective(context.tenant_id, context.user_id)
    if row is None:
        raise AppError(ErrorCatalog.SETTINGS_NOT_FOUND)
    return EcommerceSettingsResponse(**_settings_item(row), trace_id=getattr(request.state, "trace_id", ""))


@router.patch("/ecommerce", response_model=EcommerceSettingsResponse, summary="Update tenant ecommerce settings")
def patch_ecommerce_settings(
    request: Request,
    payload: EcommerceSettingsPatchRequest,
    _decision=Depends(require_permission("settings:write")),
    context: RequestContext = Depends(require_request_context),
    db=Depends(get_db),
):
    service = EcommerceSettingsService(db)
    row = service.update_global(context.tenant_id, payload.model_dump(exclude_unset=True))
    item = _settings_item(row)
    AuditService(db, context).record(
        action="settings.ecommerce.update",
        entity_type="ecommerce_settings",
        entity_id=item["id"],
        after=payload.model_dump(exclude_unset=True),
    )
    return EcommerceSettingsResponse(**item, trace_id=getattr(request.state, "trace_id", ""))
