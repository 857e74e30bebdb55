from django.core.exceptions import ValidationError
from django.db.models.signals import pre_delete
from django.dispatch import receiver

from .models import AuditLog, JournalEntry, Period

# Accounts need no receiver here: JournalLine.account and Account.parent
# are PROTECT, so a used or parent account already refuses deletion.

"""
    Model.delete() overrides refuse single-row deletes before any SQL runs.
    These receivers cover queryset deletes, which skip Model.delete().
"""


@receiver(pre_delete, sender=JournalEntry)
def prevent_delete_journal_entry(sender, instance, **kwargs):
    raise ValidationError(
        f"Journal entry {instance.number} cannot be deleted. Void it instead.")


"""Block deletion of a closed period, reopen it first."""


@receiver(pre_delete, sender=Period)
def prevent_delete_closed_period(sender, instance, **kwargs):
    if instance.is_closed:
        raise ValidationError(
            f"Cannot delete closed period {instance.name}.")


"""Audit rows are append-only."""


@receiver(pre_delete, sender=AuditLog)
def prevent_delete_audit_log(sender, instance, **kwargs):
    raise ValidationError("Audit log entries cannot be deleted.")
