# freight_core/audit/services.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from django.db import transaction

from freight_core.audit.models import AuditLog

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequestOrigin:
    ip_address: str | None = None
    user_agent: str = ""

    @classmethod
    def from_request(cls, request) -> "RequestOrigin":
        if request is None:
            return cls()

        meta = getattr(request, "META", {}) or {}
        forwarded = meta.get("HTTP_X_FORWARDED_FOR")
        if forwarded:
            # Proxies append; the client is the first hop
            ip = forwarded.split(",")[0].strip()
        else:
            ip = meta.get("REMOTE_ADDR")

        return cls(ip_address=ip or None, user_agent=(meta.get("HTTP_USER_AGENT") or "")[:512])


def _role_name(actor) -> str:
    if actor is None:
        return ""
    role = getattr(actor, "role", None)
    if role is not None:
        return role.name
    if getattr(actor, "is_superuser", False):
        return "Admin"
    return ""


class AuditService:
    """
    Central audit writer. Fire-and-forget: a failed write is logged and
    swallowed so it can never fail or roll back the business operation.
    """

    @staticmethod
    def record(
        *,
        action: str,
        actor=None,
        entity_type: str = "",
        entity_id: Any = None,
        description: str = "",
        metadata: Optional[Dict[str, Any]] = None,
        origin: RequestOrigin | None = None,
    ) -> AuditLog | None:
        origin = origin or RequestOrigin()
        actor_id = getattr(actor, "pk", None)

        try:
            # Own savepoint: a failed insert must not poison the caller's transaction
            with transaction.atomic():
                entry = AuditLog.objects.create(
                    actor_id=actor_id,
                    role=_role_name(actor),
                    action=action,
                    entity_type=entity_type or "",
                    entity_id="" if entity_id is None else str(entity_id),
                    description=description or "",
                    metadata=metadata or {},
                    ip_address=origin.ip_address,
                    user_agent=origin.user_agent or "",
                )
        except Exception:
            logger.error(
                "Failed to write audit log: action=%s entity=%s#%s actor=%s",
                action,
                entity_type,
                entity_id,
                actor_id,
                exc_info=True,
            )
            return None

        logger.info("Audit: %s %s #%s by %s", action, entity_type, entity_id, actor_id or "system")
        return entry
