from decimal import Decimal

from django.conf import settings

DEFAULT_BALANCE_EPSILON = Decimal("0.01")

# Amounts are stored with two decimals
TWOPLACES = Decimal("0.01")


def balance_epsilon() -> Decimal:
    """Tolerance below which |debits - credits| counts as balanced."""
    value = getattr(settings, "LEDGER_BALANCE_EPSILON", DEFAULT_BALANCE_EPSILON)
    return Decimal(str(value))
