# ownerportal/services/statements_logic.py
from decimal import Decimal
from typing import Sequence

from .money import ZERO, coerce_amount, quantize_money
from .records import Invoice, StatementTotals

PORTAL_COMMISSION_RATE = Decimal("0.15")
MANAGEMENT_COMMISSION_RATE = Decimal("0.25")
# Flat fee charged per invoice; not taken from the booking's own cleaning fee.
CLEANING_FEE_PER_INVOICE = Decimal("75")


def compute_statement_totals(
    invoices: Sequence[Invoice],
    is_admin_owned: bool,
) -> StatementTotals:
    """
    gross      = sum of invoice values (unreadable values count as 0)
    portal     = 15% of gross
    cleaning   = 75 per invoice
    management = 25% of (gross - cleaning - portal), 0 for admin-owned properties
    final      = gross - portal - cleaning - management

    The components are rounded to cents first and the final amount is derived
    from the rounded components, so the four deductions always add back up to
    the gross amount exactly.
    """
    count = len(invoices)

    gross = sum((coerce_amount(inv.value, inv.id) for inv in invoices), ZERO)
    portal = gross * PORTAL_COMMISSION_RATE
    cleaning = CLEANING_FEE_PER_INVOICE * count
    if is_admin_owned:
        management = ZERO
    else:
        management = (gross - cleaning - portal) * MANAGEMENT_COMMISSION_RATE

    gross_r = quantize_money(gross)
    portal_r = quantize_money(portal)
    cleaning_r = quantize_money(cleaning)
    management_r = quantize_money(management)
    final_r = gross_r - portal_r - cleaning_r - management_r

    return StatementTotals(
        gross_amount=gross_r,
        portal_commission=portal_r,
        cleaning_fee=cleaning_r,
        management_commission=management_r,
        final_owner_amount=final_r,
        invoice_count=count,
    )
