from django.contrib import admin

from ledger_core.models import Period

from .ReadOnly import ReadOnlyAdmin
from .mixins import TenantAdminMixin


# Register `Period` model
# Closing and reopening go through the period service (see close_period command)
@admin.register(Period)
class PeriodAdmin(TenantAdminMixin, ReadOnlyAdmin):
    list_display = (
        "id", "company", "name", "is_closed", "closed_at", "closed_by")
    list_filter = ("company", "is_closed", "year")
    ordering = ("company", "-year", "-month")

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related("company", "closed_by")
