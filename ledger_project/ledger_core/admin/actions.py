from django.contrib import admin, messages
from django.core.exceptions import ValidationError
from django.utils.translation import gettext_lazy as _

from ledger_core.exceptions import LedgerError
from ledger_core.models import EntryStatus
from ledger_core.services import approve_entry

# ---------- Admin actions ----------


@admin.action(description=_("Approve selected journal entries"))
# Bulk-approve drafts from Django admin list view
def approve_journal_entries(
    modeladmin,  # `ModelAdmin` class for JournalEntry
    request,  # HTTP request object
    queryset,  # record what admin selected from list view
):
    """
    Approve each selected draft through the journal service, one
    transaction per entry, reporting per-entry failures via admin messages.
    """
    candidates = queryset.filter(status=EntryStatus.DRAFT)
    total = candidates.count()
    success = 0
    failures = 0

    for je in candidates:
        try:
            approve_entry(je.company, request.user, je.pk)
            success += 1
        except (LedgerError, ValidationError) as exc:
            failures += 1
            modeladmin.message_user(
                request,
                _("Could not approve journal entry %(number)s: %(err)s") % {
                    "number": je.number, "err": exc},
                level=messages.ERROR,
            )

    # Final summary message
    modeladmin.message_user(
        request,
        _("Approved %(success)d of %(total)d journal entries. %(failures)d failed.") % {
            "success": success,
            "total": total,
            "failures": failures,
        },
        level=messages.SUCCESS if failures == 0 else messages.WARNING,
    )
