from typing import Optional
from ..models import AuditLog, Company


def log_action(
    *,
    action: str,
    instance,
    user=None,
    company: Optional[Company] = None,
    changes: dict | None = None,
):
    """
    Central audit logger.
    Called by every mutating ledger operation inside its transaction,
    so a rolled-back operation leaves no audit row behind.
    """

    if not company:
        company = getattr(instance, "company", None)

    return AuditLog.objects.create(
        company=company,
        user=user,
        action=action,
        object_type=instance.__class__.__name__,
        object_id=str(instance.pk),
        changes=changes,
    )


def get_audit_log(
    company,
    *,
    object_type=None,
    object_id=None,
    action=None,
    user=None,
    start=None,
    end=None,
):
    """Audit trail of a company, newest first."""
    qs = AuditLog.objects.for_company(company).select_related("user")
    if object_type:
        qs = qs.filter(object_type=object_type)
    if object_id is not None:
        qs = qs.filter(object_id=str(object_id))
    if action:
        qs = qs.filter(action=action)
    if user is not None:
        qs = qs.filter(user=user)
    if start:
        qs = qs.filter(created_at__gte=start)
    if end:
        qs = qs.filter(created_at__lte=end)
    return qs.order_by("-created_at", "-id")
