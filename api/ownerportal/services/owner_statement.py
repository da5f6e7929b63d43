# ownerportal/services/owner_statement.py
import logging
from datetime import date
from typing import Callable, List, Optional

from sqlalchemy.orm import Session

from ..exceptions import InvalidStatementInput, PropertyNotFound
from ..models import Property
from .hostkit_gateway import fetch_invoices
from .records import Invoice, OwnerStatement, StatementPeriod
from .statement_assembler import assemble_statement
from .statements_logic import compute_statement_totals

log = logging.getLogger("owner_statement")

InvoiceSource = Callable[[Property, date, date], List[Invoice]]


def load_property(db: Session, property_id: int) -> Property:
    prop = db.query(Property).filter(Property.id == property_id).first()
    if not prop:
        raise PropertyNotFound(property_id)
    return prop


def generate_owner_statement(
    db: Session,
    property_id: int,
    period: StatementPeriod,
    invoice_source: Optional[InvoiceSource] = None,
) -> OwnerStatement:
    """fetch -> calculate -> assemble. Upstream failures propagate untouched."""
    if property_id is None or property_id <= 0:
        raise InvalidStatementInput("propertyId must be a positive integer")
    if period.start_date > period.end_date:
        raise InvalidStatementInput("startDate must be on or before endDate")

    prop = load_property(db, property_id)
    source = invoice_source or fetch_invoices
    invoices = source(prop, period.start_date, period.end_date)

    totals = compute_statement_totals(invoices, bool(prop.is_admin_owned))
    log.info(
        "Owner statement property=%s %s..%s invoices=%d gross=%s final=%s",
        prop.id, period.start_date, period.end_date,
        totals.invoice_count, totals.gross_amount, totals.final_owner_amount,
    )
    return assemble_statement(prop, period, invoices, totals)
