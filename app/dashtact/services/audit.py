import logging
from datetime import datetime

from app.dashtact.core.context import RequestContext
from app.dashtact.db.models import AuditEvent
from app.dashtact.repos.audit import AuditRepository

logger = logging.getLogger(__name__)


class AuditService:
    """Writes one audit row per admin change, attributed to the caller.

    A failed write is rolled back and logged; the change it describes has
    already been committed.
    """

    def __init__(self, db, context: RequestContext):
        self.db = db
        self.context = context
        self.repo = AuditRepository(db)

    def record(
        self,
        *,
        action: str,
        entity_type: str,
        entity_id: str | None,
        before: dict | None = None,
        after: dict | None = None,
        result: str = "success",
    ) -> AuditEvent | None:
        event = AuditEvent(
            tenant_id=self.context.tenant_id,
            user_id=self.context.user_id,
            trace_id=self.context.trace_id or None,
            actor=self.context.actor,
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            before_payload=before,
            after_payload=after,
            result=result,
            created_at=datetime.utcnow(),
        )
        try:
            return self.repo.create(event)
        except Exception:
            self.db.rollback()
            logger.exception(
                "Failed to write audit event",
                extra={"action": action, "entity_id": entity_id, "trace_id": self.context.trace_id},
            )
            return None
