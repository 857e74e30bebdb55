from django.contrib import admin
from ledger_core.models import Account, parent_code_for
from .mixins import TenantAdminMixin


# Register `Account` model
@admin.register(Account)
class AccountAdmin(TenantAdminMixin, admin.ModelAdmin):
    # show key accounting fields
    list_display = (
        "id",
        "company",
        "code",
        "name",
        "ac_type",
        "nature",
        "level",
        "parent",
        "is_active",
    )
    list_filter = ("company", "ac_type", "level", "is_active")
    search_fields = ("code", "name")
    # accounts grouped by company, then sorted by code
    ordering = ("company", "code")
    fields = (
        "company", "code", "name", "ac_type", "nature",
        "level", "parent", "tags", "is_active",
    )
    # parent and level always follow from the code
    readonly_fields = ("level", "parent")

    def get_readonly_fields(self, request, obj=None):
        r = list(self.readonly_fields)
        # identity is frozen once the account exists
        if obj is not None:
            r += ["company", "code", "ac_type", "nature"]
        return r

    def save_model(self, request, obj, form, change):
        if not change:
            parent_code = parent_code_for(obj.code)
            if parent_code is not None:
                obj.parent = Account.objects.filter(
                    company=obj.company, code=parent_code).first()
        super().save_model(request, obj, form, change)

    # Fetch everything in one SQL join
    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related("company", "parent")

    # History must stay; deactivate instead
    def has_delete_permission(self, request, obj=None):
        return False
