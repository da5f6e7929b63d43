# ownerportal/services/statement_assembler.py
from datetime import datetime, timezone
from typing import Optional, Sequence

from ..exceptions import AmountParseError
from ..models import Property
from ..schemas.statements import (
    CalculationsOut, InvoiceLineOut, OwnerStatementOut,
    StatementPeriodOut, StatementPropertyOut,
)
from .formatting import statement_currency
from .money import coerce_amount, parse_amount
from .records import Invoice, OwnerStatement, StatementLine, StatementPeriod, StatementTotals


def statement_identifier(property_id: int, period: StatementPeriod) -> str:
    return f"OS-{property_id}-{period.start_date:%Y%m%d}-{period.end_date:%Y%m%d}"


def _line(inv: Invoice) -> StatementLine:
    tax = None
    if inv.tax is not None:
        try:
            tax = parse_amount(inv.tax)
        except AmountParseError:
            tax = None
    return StatementLine(
        id=inv.id,
        name=inv.name,
        value=coerce_amount(inv.value, inv.id),
        date=inv.date,
        series=inv.series,
        tax=tax,
    )


def assemble_statement(
    prop: Property,
    period: StatementPeriod,
    invoices: Sequence[Invoice],
    totals: StatementTotals,
    generated_at: Optional[datetime] = None,
) -> OwnerStatement:
    return OwnerStatement(
        statement_id=statement_identifier(prop.id, period),
        property_id=prop.id,
        property_name=prop.name,
        owner=prop.owner_label,
        is_admin_owned=bool(prop.is_admin_owned),
        period=period,
        totals=totals,
        lines=[_line(inv) for inv in invoices],
        generated_at=generated_at or datetime.now(timezone.utc).replace(microsecond=0),
    )


def statement_to_out(statement: OwnerStatement) -> OwnerStatementOut:
    t = statement.totals
    return OwnerStatementOut(
        statementId=statement.statement_id,
        generatedAt=statement.generated_at.isoformat() if statement.generated_at else "",
        currency=statement_currency(),
        property=StatementPropertyOut(
            id=statement.property_id,
            name=statement.property_name,
            owner=statement.owner,
            isAdminOwned=statement.is_admin_owned,
        ),
        period=StatementPeriodOut(
            startDate=statement.period.start_date.isoformat(),
            endDate=statement.period.end_date.isoformat(),
        ),
        calculations=CalculationsOut(
            grossAmount=float(t.gross_amount),
            portalCommission=float(t.portal_commission),
            cleaningFee=float(t.cleaning_fee),
            managementCommission=float(t.management_commission),
            finalOwnerAmount=float(t.final_owner_amount),
        ),
        invoiceCount=t.invoice_count,
        invoices=[
            InvoiceLineOut(
                id=line.id,
                name=line.name,
                value=float(line.value),
                date=line.date.isoformat() if line.date else None,
                series=line.series,
            )
            for line in statement.lines
        ],
    )
