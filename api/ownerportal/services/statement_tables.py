# ownerportal/services/statement_tables.py
# Row content shared by the PDF and CSV renderers, so both list the same
# sections, labels and ordering.
from typing import Callable, List, Tuple

from .formatting import format_date, text_or_placeholder
from .records import OwnerStatement

Row = Tuple[str, ...]

TITLE = "OWNER STATEMENT"
REVENUE_TITLE = "REVENUE BREAKDOWN"
EXPENSES_TITLE = "EXPENSES BREAKDOWN"
SUMMARY_TITLE = "SUMMARY"

REVENUE_HEADER: Row = ("Invoice", "Date", "Guest", "Series", "Amount")
EXPENSES_HEADER: Row = ("Description", "Amount")
SUMMARY_HEADER: Row = ("Item", "Amount")

NET_PAYOUT_LABEL = "NET PAYOUT"


def revenue_rows(statement: OwnerStatement, money: Callable) -> List[Row]:
    rows: List[Row] = [
        (
            line.id,
            format_date(line.date),
            text_or_placeholder(line.name, "Unknown"),
            line.series or "",
            money(line.value),
        )
        for line in statement.lines
    ]
    rows.append(("Gross Revenue", "", "", "", money(statement.totals.gross_amount)))
    return rows


def expense_rows(statement: OwnerStatement, money: Callable) -> List[Row]:
    t = statement.totals
    mgmt_label = "Management Commission (0%, admin-owned)" if statement.is_admin_owned else "Management Commission (25%)"
    return [
        ("Portal Commission (15%)", money(t.portal_commission)),
        (f"Cleaning Fee ({t.invoice_count} x 75)", money(t.cleaning_fee)),
        (mgmt_label, money(t.management_commission)),
        ("Total Expenses", money(t.total_expenses)),
    ]


def summary_rows(statement: OwnerStatement, money: Callable) -> List[Row]:
    t = statement.totals
    return [
        ("Gross Revenue", money(t.gross_amount)),
        ("Total Expenses", money(t.total_expenses)),
        (NET_PAYOUT_LABEL, money(t.final_owner_amount)),
    ]
