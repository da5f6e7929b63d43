# ownerportal/services/statement_pdf.py
from typing import Optional
import os
import logging

from jinja2 import TemplateError

from ..shared import templates
from .formatting import (
    format_currency, format_date, format_timestamp, statement_currency,
    statement_locale, text_or_placeholder,
)
from .records import OwnerStatement
from .statement_tables import expense_rows, revenue_rows, summary_rows

log = logging.getLogger("statement_pdf")


def render_statement_pdf_html(statement: OwnerStatement) -> Optional[str]:
    """
    Build a minimal, self-contained HTML owner statement suitable for PDF rendering.
    Section order is fixed: Revenue -> Expenses -> Summary.
    Returns the HTML string or None if the template can't be rendered.
    """
    currency = statement_currency()
    locale = statement_locale()

    def money(amount):
        return format_currency(amount, currency, locale)

    try:
        tpl = templates.env.get_template("pdf/owner_statement_pdf.html")
        return tpl.render(
            statement_id=statement.statement_id,
            property_name=text_or_placeholder(statement.property_name),
            owner=text_or_placeholder(statement.owner, "Unassigned"),
            start_date=format_date(statement.period.start_date),
            end_date=format_date(statement.period.end_date),
            generated_at=format_timestamp(statement.generated_at),
            revenue_rows=revenue_rows(statement, money),
            expense_rows=expense_rows(statement, money),
            summary_rows=summary_rows(statement, money),
        )
    except TemplateError as e:
        log.warning("Failed to render owner statement HTML %s: %s", statement.statement_id, e)
        return None


def render_pdf_from_html(html: str) -> Optional[bytes]:
    """
    HTML -> PDF using wkhtmltopdf (via pdfkit). Returns PDF bytes or None on failure.
    Configure binary via env WKHTMLTOPDF_PATH or ensure it's on PATH.
    """
    try:
        import pdfkit
        exe = os.getenv("WKHTMLTOPDF_PATH")
        cfg = pdfkit.configuration(wkhtmltopdf=exe) if exe else None
        options = {"quiet": "", "encoding": "UTF-8", "page-size": "A4"}
        pdf_bytes = pdfkit.from_string(html, False, configuration=cfg, options=options)
        if isinstance(pdf_bytes, (bytes, bytearray)) and pdf_bytes:
            return bytes(pdf_bytes)
    except OSError as e:
        log.warning("wkhtmltopdf PDF render failed: %s", e)
    return None


def render_statement_pdf(statement: OwnerStatement) -> Optional[bytes]:
    html = render_statement_pdf_html(statement)
    if not html:
        return None
    return render_pdf_from_html(html)
