from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.dashtact.core.error_catalog import ErrorCatalog
from app.dashtact.core.errors import error_response
from app.dashtact.core.metrics import metrics
from app.dashtact.db.session import get_db

router = APIRouter()


@router.get("/health", summary="Liveness probe")
async def health(request: Request):
    return {"status": "ok", "trace_id": getattr(request.state, "trace_id", "")}


@router.get("/ready", summary="Readiness probe (database reachable)")
def ready(request: Request, db=Depends(get_db)):
    trace_id = getattr(request.state, "trace_id", "")
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        definition = ErrorCatalog.DB_UNAVAILABLE
        return error_response(
            definition.code,
            definition.message,
            {"error": str(exc)},
            trace_id,
            definition.status_code,
        )
    return {"status": "ready", "database": db.get_bind().dialect.name, "trace_id": trace_id}


@router.get("/dashtact/ops/metrics", include_in_schema=False)
def prometheus_metrics():
    if not metrics.enabled:
        return Response(status_code=404)
    snapshot = metrics.render()
    return Response(content=snapshot.content, media_type=snapshot.content_type)
