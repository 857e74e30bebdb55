from .account import (Account, AccountType, Nature, default_nature,
                      level_for_code, parent_code_for)
from .auditlog import AuditAction, AuditLog
from .company import Company
from .config import AccountingConfig
from .journal import EntryStatus, EntryType, JournalEntry, JournalLine
from .period import Period, period_label
