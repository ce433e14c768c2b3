# freight_core/audit/export.py
from __future__ import annotations

import csv
from typing import Iterable

from django.http import HttpResponse
from django.utils import timezone

from freight_core.audit.models import AuditLog

CSV_HEADER = [
    "Timestamp",
    "User Name",
    "User Email",
    "Role",
    "Action",
    "Resource",
    "Details",
    "IP Address",
    "User Agent",
]


def export_filename(now=None) -> str:
    now = timezone.localtime(now or timezone.now())
    return f"audit-logs-{now.strftime('%Y%m%d-%H%M%S')}.csv"


def resource_label(log: AuditLog) -> str:
    """
    "Quotation #12 (Q-2026-004)"; the bracket only when a quote id was recorded.
    """
    label = f"{log.entity_type} #{log.entity_id}".strip() if (log.entity_type or log.entity_id) else ""
    quote_id = (log.metadata or {}).get("quote_id")
    if quote_id:
        label = f"{label} ({quote_id})".strip()
    return label


def audit_row(log: AuditLog) -> list[str]:
    actor = log.actor
    return [
        timezone.localtime(log.created_at).strftime("%Y-%m-%d %H:%M:%S"),
        actor.name if actor else "System",
        actor.email if actor else "",
        log.role or (actor.role_name if actor else ""),
        log.action,
        resource_label(log),
        log.description,
        log.ip_address or "",
        log.user_agent,
    ]


def write_audit_csv(logs: Iterable[AuditLog]) -> HttpResponse:
    resp = HttpResponse(content_type="text/csv")
    resp["Content-Disposition"] = f'attachment; filename="{export_filename()}"'

    w = csv.writer(resp)
    w.writerow(CSV_HEADER)
    for log in logs:
        w.writerow(audit_row(log))
    return resp
