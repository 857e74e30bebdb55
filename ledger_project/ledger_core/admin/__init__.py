from .account import AccountAdmin
from .actions import approve_journal_entries
from .auditlog import AuditLogAdmin
from .company import AccountingConfigAdmin, CompanyAdmin
from .inlines import JournalLineInline
from .journal import JournalEntryAdmin
from .mixins import TenantAdminMixin
from .period import PeriodAdmin
from .ReadOnly import ReadOnlyAdmin
