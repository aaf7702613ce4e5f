from __future__ import annotations

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from app.dashtact.core.logging import log_json
from app.dashtact.core.metrics import metrics
from app.dashtact.db.session import QueryStats, begin_query_stats, current_query_stats, end_query_stats

logger = logging.getLogger("dashtact.request")


def _route_template(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


def build_request_log_payload(
    *,
    request: Request,
    response: Response | None,
    latency_ms: float,
    query_stats: QueryStats | None,
) -> dict:
    """One ``http_request`` event; a missing response means the app raised."""
    state = request.state
    payload = {
        "event": "http_request",
        "trace_id": getattr(state, "trace_id", ""),
        "tenant_id": getattr(state, "tenant_id", None),
        "user_id": getattr(state, "user_id", None),
        "role": getattr(state, "role", None),
        "method": request.method,
        "route": _route_template(request),
        "status_code": response.status_code if response is not None else 500,
        "latency_ms": round(latency_ms, 2),
        "db_queries": query_stats.count if query_stats is not None else 0,
        "db_time_ms": round(query_stats.elapsed_ms, 2) if query_stats is not None else None,
    }
    menu_items = getattr(state, "menu_items_resolved", None)
    if menu_items is not None:
        payload["menu_items_resolved"] = menu_items
    error_code = getattr(state, "error_code", None)
    if error_code:
        payload["error_code"] = error_code
        payload["error_class"] = getattr(state, "error_class", None)
    return payload


class ObservabilityMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        started_at = time.perf_counter()
        token = begin_query_stats()
        response: Response | None = None
        try:
            response = await call_next(request)
            return response
        finally:
            latency_ms = (time.perf_counter() - started_at) * 1000
            payload = build_request_log_payload(
                request=request,
                response=response,
                latency_ms=latency_ms,
                query_stats=current_query_stats(),
            )
            end_query_stats(token)
            log_json(logger, payload, logging.WARNING if payload["status_code"] >= 500 else logging.INFO)
            metrics.record_http_request(
                route=payload["route"],
                method=payload["method"],
                status_code=payload["status_code"],
                latency_ms=latency_ms,
            )
