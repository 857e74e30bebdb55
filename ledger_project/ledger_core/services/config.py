from typing import NamedTuple

from django.core.exceptions import ValidationError
from django.db import transaction

from ..models import Account, AccountingConfig, AuditAction
from ..models.config import CONFIG_ACCOUNT_FIELDS, REQUIRED_CONFIG_FIELDS
from .audit import log_action
from .chart import get_account


class ConfigCheck(NamedTuple):
    is_valid: bool
    missing: list


def get_accounting_config(company):
    """Return the company's config row, or None if never saved."""
    return (
        AccountingConfig.objects.for_company(company)
        .select_related(*CONFIG_ACCOUNT_FIELDS)
        .first()
    )


def update_accounting_config(company, user=None, **accounts):
    """
    Upsert the default posting accounts.

    Keyword names are the config fields (cash_account, bank_account, ...);
    values are Account instances, account ids or None to clear the mapping.
    """
    unknown = set(accounts) - set(CONFIG_ACCOUNT_FIELDS)
    if unknown:
        raise ValidationError(
            f"Unknown config fields: {', '.join(sorted(unknown))}")

    with transaction.atomic():
        config, _ = AccountingConfig.objects.select_for_update().get_or_create(
            company=company)
        changes = {}
        for field, value in accounts.items():
            if value is not None:
                pk = value.pk if isinstance(value, Account) else value
                # Raises AccountNotFoundError for another company's account
                value = get_account(company, pk)
            old_id = getattr(config, f"{field}_id")
            new_id = value.pk if value is not None else None
            if old_id != new_id:
                changes[field] = [old_id, new_id]
                setattr(config, field, value)

        if changes:
            config.save()
            log_action(
                action=AuditAction.CONFIG_UPDATED,
                instance=config,
                user=user,
                changes=changes,
            )
    return config


def validate_config(company):
    config = get_accounting_config(company)
    if config is None:
        return ConfigCheck(is_valid=False, missing=list(REQUIRED_CONFIG_FIELDS))

    missing = [f for f in REQUIRED_CONFIG_FIELDS if getattr(config, f"{f}_id") is None]
    return ConfigCheck(is_valid=not missing, missing=missing)


def get_config_account(company, field):
    """Mapped account for one config field, or None."""
    if field not in CONFIG_ACCOUNT_FIELDS:
        raise ValidationError(f"Unknown config field: {field}")
    config = get_accounting_config(company)
    return getattr(config, field) if config else None
