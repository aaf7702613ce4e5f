from dataclasses import dataclass


@dataclass(frozen=True)
class RequestContext:
    """Who is calling, taken from the bearer token, plus the trace id."""

    user_id: str | None
    tenant_id: str | None
    role: str | None
    trace_id: str

    @classmethod
    def from_claims(cls, claims: dict, trace_id: str) -> "RequestContext":
        return cls(
            user_id=claims.get("sub"),
            tenant_id=claims.get("tenant_id"),
            role=claims.get("role"),
            trace_id=trace_id,
        )

    @property
    def actor(self) -> str:
        return self.user_id or "unknown"
