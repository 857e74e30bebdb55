
class LedgerError(Exception):
    """Base class for deterministic ledger validation failures.

    None of these are transient: they are surfaced to the caller as-is
    and never retried.
    """
    pass


class UnbalancedEntryError(LedgerError):
    """Raised when a JournalEntry fails double-entry balance check."""

    def __init__(self, total_debit, total_credit):
        self.total_debit = total_debit
        self.total_credit = total_credit
        self.difference = abs(total_debit - total_credit)
        super().__init__(
            f"Journal not balanced: debits={total_debit}, "
            f"credits={total_credit}, diff={self.difference}"
        )


class PeriodClosedError(LedgerError):
    """Raised when writing into a locked (closed) accounting period."""

    def __init__(self, period):
        self.period = period
        super().__init__(
            f"Period {period} is closed and does not allow modifications")


class PeriodAlreadyClosedError(LedgerError):
    def __init__(self, period):
        self.period = period
        super().__init__(f"Period {period} is already closed")


class PeriodNotClosedError(LedgerError):
    def __init__(self, period):
        self.period = period
        super().__init__(f"Period {period} is not closed")


class OpenDraftsExistError(LedgerError):
    """Raised when closing a period that still has DRAFT entries."""

    def __init__(self, period, count):
        self.period = period
        self.count = count
        super().__init__(
            f"Cannot close period {period}: {count} draft entr"
            f"{'y' if count == 1 else 'ies'} still open"
        )


class OrphanAccountError(LedgerError):
    """Raised when an account's derived parent code is missing."""

    def __init__(self, code, parent_code):
        self.code = code
        self.parent_code = parent_code
        super().__init__(
            f"Account {code} has no parent account {parent_code}")


class EntryNotFoundError(LedgerError):
    def __init__(self, entry_id):
        self.entry_id = entry_id
        super().__init__(f"Journal entry {entry_id} not found")


class AccountNotFoundError(LedgerError):
    def __init__(self, account):
        self.account = account
        super().__init__(f"Account {account} not found or inactive")


class InvalidEntryStateError(LedgerError):
    """Raised when a lifecycle action is not allowed from the entry's status."""

    def __init__(self, entry, action):
        self.entry_id = entry.pk
        self.status = entry.status
        self.action = action
        super().__init__(
            f"Cannot {action} journal entry {entry.number or entry.pk} "
            f"in status {entry.status}"
        )
