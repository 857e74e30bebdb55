from django.conf import settings  # To access global project settings
from django.core.exceptions import ValidationError
from django.core.serializers.json import DjangoJSONEncoder
from django.db import models
from ..managers import TenantManager
from .company import Company


class AuditAction(models.TextChoices):
    CREATED = "created", "Created"
    UPDATED = "updated", "Updated"
    POSTED = "posted", "Posted"
    VOIDED = "voided", "Voided"
    REVERSED = "reversed", "Reversed"
    PERIOD_CLOSED = "period_closed", "Period closed"
    PERIOD_REOPENED = "period_reopened", "Period reopened"
    COA_SEEDED = "coa_seeded", "Chart of accounts seeded"
    ACCOUNT_UPDATED = "account_updated", "Account updated"
    ACCOUNT_DEACTIVATED = "account_deactivated", "Account deactivated"
    CONFIG_UPDATED = "config_updated", "Configuration updated"


# ---------- Audit / Event log ----------
class AuditLog(
    models.Model
):  # Gives accountability and traceability across whole system
    # Associate log entry with a tenant
    company = models.ForeignKey(
        Company,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
    )
    # Which user performed the action
    # (Nullable in case the action was automated
    # (e.g., background job, import script))
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True, blank=True, on_delete=models.SET_NULL
    )
    action = models.CharField(max_length=32, choices=AuditAction.choices)
    # What kind of object was affected
    object_type = models.CharField(
        max_length=100
    )  # (e.g., "JournalEntry", "Period", "Account")
    # The primary key (or identifier) of the object
    object_id = models.CharField(max_length=100)
    # Details of what changed; Decimals and dates serialised as strings
    changes = models.JSONField(null=True, blank=True, encoder=DjangoJSONEncoder)
    # Timestamp when the event was logged
    created_at = models.DateTimeField(auto_now_add=True)

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        # Filter logs quickly
        indexes = [
            models.Index(fields=["company", "created_at"], name="audit_company_created_idx"),
            models.Index(fields=["company", "object_type", "object_id"],
                         name="audit_company_object_idx"),
        ]
        ordering = ("-created_at", "-id")

    # Show created_at, user, action, object_type, and
    # object_id in admin dropdowns and debug logs
    def __str__(self):
        time = self.created_at
        usr = self.user
        action = self.action
        objType = self.object_type
        objId = self.object_id
        return f"[{time:%Y-%m-%d %H:%M}] {usr} {action} {objType}({objId})"

    def save(self, *args, **kwargs):
        # Append-only: existing rows are never rewritten
        if self.pk and AuditLog.objects.filter(pk=self.pk).exists():
            raise ValidationError("AuditLog entries are immutable.")
        self.full_clean()  # run validations before saving
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("AuditLog entries cannot be deleted.")
