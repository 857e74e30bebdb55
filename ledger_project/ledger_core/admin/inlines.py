from django.contrib import admin

from ledger_core.models import JournalLine

# ---------- Helpful inline admin classes ----------


class JournalLineInline(
    admin.TabularInline
    # shows related objects in table format (rows under parent form)
):
    """Show JournalLine rows on JournalEntry page (lines are written by the journal service)"""

    model = JournalLine
    extra = 0  # don’t show “empty” rows by default (prevents clutter)
    fields = (
        "account",
        "description",
        "debit",
        "credit",
        "third_party_id",
        "third_party_name",
    )
    readonly_fields = fields
    ordering = ("id",)  # lines appear in creation order

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related("account")

    def has_add_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
