from fastapi import APIRouter

from app.dashtact.routers import auth, menus, ops, settings

API_PREFIX = "/dashtact"

api_router = APIRouter()
api_router.include_router(ops.router, tags=["ops"])
api_router.include_router(auth.router, prefix=f"{API_PREFIX}/auth", tags=["auth"])
api_router.include_router(menus.router, prefix=f"{API_PREFIX}/dashboard-menus", tags=["dashboard-menus"])
api_router.include_router(settings.router, prefix=f"{API_PREFIX}/settings", tags=["settings"])
