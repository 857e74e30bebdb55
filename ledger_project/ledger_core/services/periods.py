import logging
from dataclasses import dataclass
from datetime import datetime

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from ..exceptions import (OpenDraftsExistError, PeriodAlreadyClosedError,
                          PeriodClosedError, PeriodNotClosedError)
from ..models import (AuditAction, Company, EntryStatus, JournalEntry, Period,
                      period_label)
from .audit import log_action

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PeriodStatus:
    period: str
    exists: bool
    is_closed: bool
    closed_at: datetime | None
    closed_by_id: int | None


def period_for(date):
    """ Posting date determines the period: "YYYY-MM" """
    return period_label(date.year, date.month)


def lock_company(company):
    """
    Serialise ledger writers of one company for the rest of the transaction.
    Entry numbering, approvals and period closing all take this lock,
    so an approval can never slip in after a concurrent close.
    """
    return Company.objects.select_for_update().get(pk=company.pk)


def _check_month(month):
    if not 1 <= month <= 12:
        raise ValidationError(f"month must be between 1 and 12, got {month}")


def is_closed(company, date):
    # No row means the period has never been closed
    return Period.objects.filter(
        company=company,
        year=date.year,
        month=date.month,
        is_closed=True,
    ).exists()


def assert_open(company, date):
    """Raise PeriodClosedError if date falls in a closed period."""
    if is_closed(company, date):
        raise PeriodClosedError(period_for(date))


def close_period(company, year, month, user=None):
    _check_month(month)
    label = period_label(year, month)
    with transaction.atomic():
        lock_company(company)

        existing = (
            Period.objects.select_for_update()
            .filter(company=company, year=year, month=month)
            .first()
        )
        if existing and existing.is_closed:
            raise PeriodAlreadyClosedError(label)

        # Every entry of the period must be approved or void
        drafts = JournalEntry.objects.filter(
            company=company, period=label, status=EntryStatus.DRAFT
        ).count()
        if drafts:
            raise OpenDraftsExistError(label, drafts)

        period = existing or Period(company=company, year=year, month=month)
        period.is_closed = True
        period.closed_at = timezone.now()
        period.closed_by = user
        period.save()

        log_action(
            action=AuditAction.PERIOD_CLOSED,
            instance=period,
            user=user,
            changes={"year": year, "month": month},
        )

    logger.info("Closed period %s for company %s", label, company.pk)
    return period


def reopen_period(company, year, month, user=None):
    """
    Clear the closed flag. Authorisation is the caller's job;
    this only enforces the CLOSED → OPEN transition.
    """
    _check_month(month)
    label = period_label(year, month)
    with transaction.atomic():
        lock_company(company)

        period = (
            Period.objects.select_for_update()
            .filter(company=company, year=year, month=month)
            .first()
        )
        if period is None or not period.is_closed:
            raise PeriodNotClosedError(label)

        period.is_closed = False
        period.closed_at = None
        period.closed_by = None
        period.save()

        log_action(
            action=AuditAction.PERIOD_REOPENED,
            instance=period,
            user=user,
            changes={"year": year, "month": month},
        )

    logger.warning("Reopened period %s for company %s", label, company.pk)
    return period


def get_period_status(company, year, month):
    _check_month(month)
    period = Period.objects.filter(
        company=company, year=year, month=month).first()
    return PeriodStatus(
        period=period_label(year, month),
        exists=period is not None,
        is_closed=bool(period and period.is_closed),
        closed_at=period.closed_at if period else None,
        closed_by_id=period.closed_by_id if period else None,
    )


def list_periods(company):
    return Period.objects.for_company(company).order_by("-year", "-month")
