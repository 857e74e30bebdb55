"""
Journal entry store: the only place that writes JournalEntry/JournalLine.

Every operation runs in one transaction holding the company lock
(see periods.lock_company), so entry numbers stay unique and an approval
cannot interleave with a period close.
"""
import logging
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from ..conf import TWOPLACES, balance_epsilon
from ..exceptions import (AccountNotFoundError, EntryNotFoundError,
                          InvalidEntryStateError, UnbalancedEntryError)
from ..models import (Account, AuditAction, EntryStatus, EntryType,
                      JournalEntry, JournalLine)
from .audit import log_action
from .periods import assert_open, lock_company, period_for

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")
# Line amounts are stored with max_digits=18, decimal_places=2
MAX_AMOUNT = Decimal("1e16")


def _money(value) -> Decimal:
    if value is None or value == "":
        return ZERO
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
        # NaN and Infinity parse fine but are not amounts
        if not amount.is_finite():
            raise ValidationError(f"Invalid money value: {value!r}")
        amount = amount.quantize(TWOPLACES, rounding=ROUND_HALF_UP)
    except (InvalidOperation, ValueError, TypeError) as exc:
        raise ValidationError(f"Invalid money value: {value!r}") from exc
    if abs(amount) >= MAX_AMOUNT:
        raise ValidationError(f"Amount {amount} exceeds 16 integer digits")
    return amount


def _resolve_account(company, account):
    """Accept an Account or its pk; it must be an active account of company."""
    account_id = account.pk if isinstance(account, Account) else account
    try:
        return Account.objects.get(pk=account_id, company=company, is_active=True)
    except (Account.DoesNotExist, ValueError, TypeError):
        raise AccountNotFoundError(account_id)


def _normalize_lines(company, lines):
    normalized = []
    for i, line in enumerate(lines, start=1):
        if "account" not in line:
            raise ValidationError(f"Line {i} is missing an account")
        debit = _money(line.get("debit"))
        credit = _money(line.get("credit"))
        if debit < 0 or credit < 0:
            raise ValidationError(f"Line {i}: debit and credit must be >= 0")
        if debit == 0 and credit == 0:
            raise ValidationError(
                f"Line {i} requires a non-0 amount on either debit or credit")
        normalized.append({
            "account": _resolve_account(company, line["account"]),
            "debit": debit,
            "credit": credit,
            "description": line.get("description") or "",
            "third_party_id": str(line.get("third_party_id") or ""),
            "third_party_name": line.get("third_party_name") or "",
        })
    return normalized


def _totals(normalized):
    return (
        sum((l["debit"] for l in normalized), ZERO),
        sum((l["credit"] for l in normalized), ZERO),
    )


def _next_number(company, period):
    # Entries are never deleted, so the count only grows
    taken = JournalEntry.objects.filter(
        company=company, number__startswith=f"{period}-").count()
    return f"{period}-{taken + 1:04d}"


def _write_lines(entry, normalized):
    JournalLine.objects.bulk_create([
        JournalLine(
            company=entry.company,
            journal=entry,
            account=l["account"],
            debit=l["debit"],
            credit=l["credit"],
            description=l["description"] or entry.description,
            third_party_id=l["third_party_id"],
            third_party_name=l["third_party_name"],
        )
        for l in normalized
    ])


def _get_for_update(company, entry_id):
    try:
        return JournalEntry.objects.select_for_update().get(
            company=company, pk=entry_id)
    except (JournalEntry.DoesNotExist, ValueError, TypeError):
        raise EntryNotFoundError(entry_id)


def _approve(company, entry, user):
    if not entry.can_transition_to(EntryStatus.APPROVED):
        raise InvalidEntryStateError(entry, "approve")

    if entry.lines.count() < 2:
        raise ValidationError(
            "A journal entry needs at least two lines to be approved.")

    # Recompute totals fresh from DB & ignore the stored header copy
    total_debit, total_credit = entry.compute_totals()
    if abs(total_debit - total_credit) >= balance_epsilon():
        raise UnbalancedEntryError(total_debit, total_credit)

    assert_open(company, entry.date)

    entry.status = EntryStatus.APPROVED
    entry.approved_by = user
    entry.approved_at = timezone.now()
    entry.save(update_fields=["status", "approved_by", "approved_at"])

    log_action(
        action=AuditAction.POSTED,
        instance=entry,
        user=user,
        changes={
            "number": entry.number,
            "total_debit": total_debit,
            "total_credit": total_credit,
        },
    )
    logger.info("Approved journal entry %s (company %s)", entry.number, company.pk)
    return entry


def create_entry(
    company,
    user,
    *,
    date,
    description,
    lines,
    entry_type=EntryType.JOURNAL,
    reference="",
    approve=False,
):
    """
    Store a new DRAFT entry with its lines.

    `lines` is a sequence of mappings with account, debit, credit and
    optional description / third_party_id / third_party_name.
    Drafts may be unbalanced; `approve=True` approves in the same
    transaction and fails the whole call if the entry cannot be approved.
    """
    normalized = _normalize_lines(company, lines)
    total_debit, total_credit = _totals(normalized)

    with transaction.atomic():
        lock_company(company)
        assert_open(company, date)

        entry = JournalEntry(
            company=company,
            number=_next_number(company, period_for(date)),
            date=date,
            entry_type=entry_type,
            description=description or "",
            reference=reference or "",
            total_debit=total_debit,
            total_credit=total_credit,
            created_by=user,
        )
        entry.save()
        _write_lines(entry, normalized)

        log_action(
            action=AuditAction.CREATED,
            instance=entry,
            user=user,
            changes={"number": entry.number, "description": entry.description},
        )

        if approve:
            _approve(company, entry, user)

    logger.debug("Created journal entry %s (company %s)", entry.number, company.pk)
    return entry


def update_entry(
    company,
    user,
    entry_id,
    *,
    date=None,
    description=None,
    reference=None,
    lines=None,
):
    """Edit a DRAFT entry; `lines`, when given, replace all existing lines."""
    normalized = _normalize_lines(company, lines) if lines is not None else None

    with transaction.atomic():
        lock_company(company)
        entry = _get_for_update(company, entry_id)
        if not entry.is_draft:
            raise InvalidEntryStateError(entry, "edit")

        assert_open(company, entry.date)
        changes = {}
        if date is not None and date != entry.date:
            assert_open(company, date)
            changes["date"] = [entry.date, date]
            entry.date = date
        if description is not None:
            entry.description = description
            changes["description"] = description
        if reference is not None:
            entry.reference = reference
            changes["reference"] = reference
        if normalized is not None:
            entry.lines.all().delete()
            _write_lines(entry, normalized)
            entry.total_debit, entry.total_credit = _totals(normalized)
            changes["lines"] = len(normalized)

        entry.save()
        log_action(
            action=AuditAction.UPDATED, instance=entry, user=user, changes=changes)
    return entry


def approve_entry(company, user, entry_id):
    with transaction.atomic():
        lock_company(company)
        entry = _get_for_update(company, entry_id)
        _approve(company, entry, user)
    return entry


def void_entry(company, user, entry_id, reason, *, reversal_date=None):
    """
    DRAFT → VOID in place. An APPROVED entry is never altered: it gets a
    reversing entry (debits and credits swapped) which is approved at once.
    Returns the voided draft or the reversal entry.
    """
    with transaction.atomic():
        lock_company(company)
        entry = _get_for_update(company, entry_id)

        if entry.status == EntryStatus.DRAFT:
            entry.status = EntryStatus.VOID
            entry.voided_at = timezone.now()
            entry.void_reason = reason or ""
            entry.save(update_fields=["status", "voided_at", "void_reason"])
            log_action(
                action=AuditAction.VOIDED,
                instance=entry,
                user=user,
                changes={"reason": reason},
            )
            logger.info("Voided draft %s (company %s)", entry.number, company.pk)
            return entry

        if entry.status == EntryStatus.APPROVED:
            if entry.reverses_id is not None:
                raise InvalidEntryStateError(entry, "reverse a reversal")
            if JournalEntry.objects.filter(reverses=entry).exists():
                raise InvalidEntryStateError(entry, "reverse twice")
            return _reverse(company, user, entry, reason, reversal_date)

        if entry.status == EntryStatus.VOID:
            raise InvalidEntryStateError(entry, "void")

        raise ValueError(f"Unknown entry status {entry.status!r}")


def _reverse(company, user, entry, reason, reversal_date):
    date = reversal_date or entry.date
    assert_open(company, date)

    reversal = JournalEntry(
        company=company,
        number=_next_number(company, period_for(date)),
        date=date,
        entry_type=EntryType.REVERSAL,
        description=f"Reversal of {entry.number}: {reason}" if reason else f"Reversal of {entry.number}",
        reference=entry.number,
        total_debit=entry.total_credit,
        total_credit=entry.total_debit,
        created_by=user,
        reverses=entry,
    )
    reversal.save()
    # Swap every line's debit and credit
    _write_lines(reversal, [
        {
            "account": line.account,
            "debit": line.credit,
            "credit": line.debit,
            "description": line.description,
            "third_party_id": line.third_party_id,
            "third_party_name": line.third_party_name,
        }
        for line in entry.lines.select_related("account").order_by("id")
    ])
    log_action(
        action=AuditAction.CREATED,
        instance=reversal,
        user=user,
        changes={"number": reversal.number, "reverses": entry.number},
    )
    _approve(company, reversal, user)

    log_action(
        action=AuditAction.REVERSED,
        instance=entry,
        user=user,
        changes={"reversal": reversal.number, "reason": reason},
    )
    logger.info("Reversed %s with %s (company %s)", entry.number, reversal.number, company.pk)
    return reversal


# ---------- Queries ----------
def get_entry(company, entry_id):
    try:
        return (
            JournalEntry.objects.for_company(company)
            .prefetch_related("lines__account")
            .get(pk=entry_id)
        )
    except (JournalEntry.DoesNotExist, ValueError, TypeError):
        raise EntryNotFoundError(entry_id)


def list_entries(company, status=None, start_date=None, end_date=None):
    qs = JournalEntry.objects.for_company(company)
    if status:
        qs = qs.filter(status=status)
    if start_date:
        qs = qs.filter(date__gte=start_date)
    if end_date:
        qs = qs.filter(date__lte=end_date)
    return qs.order_by("-date", "-number")


def list_lines(
    company,
    account_id=None,
    third_party_id=None,
    start_date=None,
    end_date=None,
    status=None,
):
    qs = (
        JournalLine.objects.for_company(company)
        .select_related("account", "journal")
        .in_range(start_date, end_date)
    )
    if account_id is not None:
        qs = qs.filter(account_id=account_id)
    if third_party_id:
        qs = qs.filter(third_party_id=str(third_party_id))
    if status:
        qs = qs.filter(journal__status=status)
    return qs.order_by("journal__date", "journal__number", "id")
