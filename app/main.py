from fastapi import FastAPI

from app.dashtact.api import api_router
from app.dashtact.core.config import settings
from app.dashtact.core.errors import setup_exception_handlers
from app.dashtact.core.logging import configure_logging
from app.dashtact.middleware.observability import ObservabilityMiddleware
from app.dashtact.middleware.tenant import TenantContextMiddleware
from app.dashtact.middleware.trace import TraceIdMiddleware


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(title=settings.APP_NAME)
    app.add_middleware(TenantContextMiddleware)
    app.add_middleware(TraceIdMiddleware)
    app.add_middleware(ObservabilityMiddleware)
    setup_exception_handlers(app)
    app.include_router(api_router)
    return app


app = create_app()
