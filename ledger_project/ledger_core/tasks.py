import datetime
import logging

from celery import shared_task

logger = logging.getLogger(__name__)


@shared_task  # register this function as a Celery task
def verify_books(company_id, as_of=None):
    """
    Recompute the trial balance of one company and check the
    accounting equation. Read-only; returns a JSON-friendly summary.
    """
    # import lazily to avoid circular imports at module import time
    from .models import Company
    from .services import check_accounting_equation, get_trial_balance

    company = Company.objects.get(pk=company_id)
    # Celery serialises arguments as JSON, dates arrive as ISO strings
    if isinstance(as_of, str):
        as_of = datetime.date.fromisoformat(as_of)

    tb = get_trial_balance(company, as_of)
    check = check_accounting_equation(tb)
    totals_match = tb.totals.total_debits == tb.totals.total_credits
    if not totals_match:
        logger.error(
            "Trial balance of company %s does not balance as of %s: %s != %s",
            company.pk, tb.as_of, tb.totals.total_debits, tb.totals.total_credits,
        )

    return {
        "company_id": company.pk,
        "as_of": tb.as_of.isoformat(),
        "accounts": len(tb.rows),
        "total_debits": str(tb.totals.total_debits),
        "total_credits": str(tb.totals.total_credits),
        "totals_match": totals_match,
        "assets": str(check.assets),
        "liabilities_and_equity": str(check.liabilities_and_equity),
        "difference": str(check.difference),
        "unclosed_result": str(check.unclosed_result),
        "equation_balanced": check.is_balanced,
    }
