from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class EcommerceSettingsPatchRequest(BaseModel):
    store_name: str | None = Field(default=None, min_length=1, max_length=255)
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    track_inventory: bool | None = None
    shipping_enabled: bool | None = None
    cod_enabled: bool | None = None
    portal_enabled: bool | None = None


class EcommerceSettingsResponse(BaseModel):
    id: str
    tenant_id: str
    scope: Literal["global", "user"]
    user_id: str | None = None
    store_name: str
    currency: str
    track_inventory: bool
    shipping_enabled: bool
    cod_enabled: bool
    portal_enabled: bool
    updated_at: datetime
    trace_id: str
