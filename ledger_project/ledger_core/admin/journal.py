from django.contrib import admin
from django.utils.html import format_html
from .actions import approve_journal_entries
from .inlines import JournalLineInline
from .mixins import TenantAdminMixin
from ledger_core.models import JournalEntry


# Register `JournalEntry` model
@admin.register(JournalEntry)
class JournalEntryAdmin(TenantAdminMixin, admin.ModelAdmin):
    """Browse entries; every write goes through the journal service"""

    list_display = (
        "number",
        "company",
        "date",
        "entry_type",
        "reference",
        "status",
        "approved_at",
        "created_by",
        "balanced",
    )
    list_filter = ("company", "status", "entry_type", "period")
    search_fields = ("number", "reference", "description")
    readonly_fields = (
        "company", "number", "date", "period", "entry_type", "status",
        "description", "reference",
        "total_debit", "total_credit", "created_by", "created_at",
        "approved_by", "approved_at", "voided_at", "void_reason", "reverses",
    )  # users can see but not edit these
    inlines = [JournalLineInline]
    actions = [approve_journal_entries]
    ordering = ("company", "-date", "-number")

    # Fetch everything in one SQL join
    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related("company", "created_by", "approved_by")

    """ Computed column for balance check """
    def balanced(self, obj):
        colour = "green" if obj.total_debit == obj.total_credit else "red"
        return format_html(
            '<span style="color:{}"><b>{}</b> / <small>{}</small></span>',
            colour, obj.total_debit, obj.total_credit,
        )

    # set column header in admin
    balanced.short_description = "Debits / Credits"

    # Numbers are allocated by the journal service only
    def has_add_permission(self, request):
        return False

    # Entries are voided, never deleted
    def has_delete_permission(self, request, obj=None):
        return False
