from django.contrib import admin
from ledger_core.models import AccountingConfig, Company
from .mixins import TenantAdminMixin


# Register `Company` model in admin with this custom config
@admin.register(Company)
class CompanyAdmin(admin.ModelAdmin):
    """a clean admin table for browsing companies"""

    # columns shown in company list view
    list_display = ("id", "name", "slug", "created_at")
    search_fields = ("name", "slug")  # enable search by name and slug
    prepopulated_fields = {"slug": ("name",)}
    ordering = ("name",)  # sort companies alphabetically by default


@admin.register(AccountingConfig)
class AccountingConfigAdmin(TenantAdminMixin, admin.ModelAdmin):
    list_display = ("company", "updated_at")

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related("company")
