from django.db import models

# -----------------------------------------
# Enforce tenant scoping across all models
# that belong to a company
# -----------------------------------------
# Define subclass of Django’s QuerySet
class TenantQuerySet(models.QuerySet):
    def for_company(self, company):         # Add queryset helper
        return self.filter(company=company) # Apply filter

    def active(self, company):
        return self.filter(
                            company=company, # enforce tenant scoping
                            is_active=True   # only fetch active records
                        )
    # Enables query:
    # Account.objects.active(company)


# Attach TenantQuerySet to .objects
class TenantManager(models.Manager):

    def get_queryset(self): # ensure every model gets TenantQuerySet(so .for_company() is always available)
        return TenantQuerySet(self.model, using=self._db)

    def for_company(self, company): # can call for_company() directly on objects
        return self.get_queryset().for_company(company)

    def active(self, company):
        return self.get_queryset().active(company)


# Journal lines are only ever reported when their entry is approved
class JournalLineQuerySet(TenantQuerySet):
    def approved(self, company):
        return self.filter(company=company, journal__status="approved")

    def in_range(self, start_date=None, end_date=None):
        qs = self
        if start_date:
            qs = qs.filter(journal__date__gte=start_date)
        if end_date:
            qs = qs.filter(journal__date__lte=end_date)
        return qs


class JournalLineManager(TenantManager):
    def get_queryset(self):
        return JournalLineQuerySet(self.model, using=self._db)

    def approved(self, company):
        return self.get_queryset().approved(company)
