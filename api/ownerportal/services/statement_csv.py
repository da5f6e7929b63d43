# ownerportal/services/statement_csv.py
import csv
import io
from typing import List, Sequence

from .formatting import (
    format_currency, format_date, format_timestamp, statement_currency,
    statement_locale, text_or_placeholder,
)
from .records import OwnerStatement
from .statement_tables import (
    EXPENSES_HEADER, EXPENSES_TITLE, REVENUE_HEADER, REVENUE_TITLE,
    SUMMARY_HEADER, SUMMARY_TITLE, TITLE, expense_rows, revenue_rows, summary_rows,
)


def statement_csv_rows(statement: OwnerStatement) -> List[Sequence[str]]:
    """Sections in fixed order, separated by blank rows."""
    currency = statement_currency()
    locale = statement_locale()

    def money(amount):
        return format_currency(amount, currency, locale)

    rows: List[Sequence[str]] = [
        (TITLE,),
        ("Property", text_or_placeholder(statement.property_name)),
        ("Owner", text_or_placeholder(statement.owner, "Unassigned")),
        ("Period", f"{format_date(statement.period.start_date)} to {format_date(statement.period.end_date)}"),
        ("Generated", format_timestamp(statement.generated_at)),
        ("Currency", currency),
        (),
        (REVENUE_TITLE,),
        REVENUE_HEADER,
        *revenue_rows(statement, money),
        (),
        (EXPENSES_TITLE,),
        EXPENSES_HEADER,
        *expense_rows(statement, money),
        (),
        (SUMMARY_TITLE,),
        SUMMARY_HEADER,
        *summary_rows(statement, money),
        (),
        ("Statement ID", statement.statement_id),
    ]
    return rows


def render_statement_csv(statement: OwnerStatement) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for row in statement_csv_rows(statement):
        writer.writerow(row)
    return buf.getvalue()
