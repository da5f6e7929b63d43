# ownerportal/services/saft_xml.py
"""
SAFT-style audit XML for one owner statement.

Only the invoice part of a SAF-T (PT) file is produced: an AuditFile with a
Header (the property acts as the company) and one Invoice element per
statement line.
"""
import xml.etree.ElementTree as ET
from xml.dom import minidom
from typing import Optional

from .formatting import PLACEHOLDER, format_amount, format_date, statement_currency
from .records import OwnerStatement

UNKNOWN_CUSTOMER = "Unknown"


def _text(parent: ET.Element, tag: str, value) -> ET.Element:
    el = ET.SubElement(parent, tag)
    el.text = str(value)
    return el


def build_saft_tree(statement: OwnerStatement, currency: Optional[str] = None) -> ET.Element:
    currency = currency or statement_currency()
    root = ET.Element("AuditFile")

    header = ET.SubElement(root, "Header")
    _text(header, "CompanyID", statement.property_id)
    _text(header, "CompanyName", (statement.property_name or "").strip() or PLACEHOLDER)
    _text(header, "StartDate", format_date(statement.period.start_date))
    _text(header, "EndDate", format_date(statement.period.end_date))
    _text(header, "CurrencyCode", currency)
    if statement.generated_at is not None:
        _text(header, "DateCreated", statement.generated_at.strftime("%Y-%m-%dT%H:%M:%S"))

    invoices = ET.SubElement(root, "Invoices")
    for line in statement.lines:
        inv = ET.SubElement(invoices, "Invoice")
        _text(inv, "InvoiceNo", line.id)
        _text(inv, "InvoiceDate", format_date(line.date))
        _text(inv, "CustomerName", (line.name or "").strip() or UNKNOWN_CUSTOMER)
        _text(inv, "InvoiceTotal", format_amount(line.value))
        _text(inv, "Currency", currency)
        if line.tax is not None:
            _text(inv, "Tax", format_amount(line.tax))
    return root


def render_saft_xml(statement: OwnerStatement, currency: Optional[str] = None) -> str:
    root = build_saft_tree(statement, currency)
    raw = ET.tostring(root, encoding="utf-8")
    return minidom.parseString(raw).toprettyxml(indent="  ", encoding="UTF-8").decode("utf-8")
