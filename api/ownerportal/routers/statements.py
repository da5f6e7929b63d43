# ownerportal/routers/statements.py
from typing import Optional

from fastapi.responses import Response

from ..shared import APIRouter, Depends, HTTPException, Query, Session
from ..database import get_db
from ..exceptions import (
    InvalidStatementInput, PropertyNotFound, UpstreamTimeout, UpstreamUnavailable,
)
from ..periods import month_period, parse_iso_date
from ..schemas.statements import OwnerStatementResponse
from ..services.owner_statement import generate_owner_statement
from ..services.records import OwnerStatement, StatementPeriod
from ..services.saft_xml import render_saft_xml
from ..services.statement_assembler import statement_to_out
from ..services.statement_csv import render_statement_csv
from ..services.statement_pdf import render_statement_pdf

router = APIRouter(prefix="/api/statements", tags=["statements"])

FORMATS = ("json", "pdf", "csv", "xml")
MEDIA_TYPES = {
    "pdf": "application/pdf",
    "csv": "text/csv; charset=utf-8",
    "xml": "application/xml",
}


def _parse_format(fmt: Optional[str]) -> str:
    fmt = (fmt or "json").strip().lower()
    if fmt not in FORMATS:
        raise HTTPException(400, f"format must be one of: {', '.join(FORMATS)}")
    return fmt


def _build(db: Session, property_id: int, period: StatementPeriod) -> OwnerStatement:
    try:
        return generate_owner_statement(db, property_id, period)
    except InvalidStatementInput as e:
        raise HTTPException(400, e.detail)
    except PropertyNotFound:
        raise HTTPException(404, "Property not found")
    except UpstreamTimeout as e:
        raise HTTPException(504, str(e))
    except UpstreamUnavailable as e:
        raise HTTPException(502, str(e))


def _filename(statement: OwnerStatement, ext: str) -> str:
    name = statement.property_name or f"Property-{statement.property_id}"
    safe = "".join(ch if ch.isalnum() or ch in ("_", "-", " ") else "_" for ch in name).strip().replace(" ", "_")
    p = statement.period
    return f"OwnerStatement-{safe}-{p.start_date.isoformat()}_{p.end_date.isoformat()}.{ext}"


def _respond(statement: OwnerStatement, fmt: str):
    if fmt == "json":
        return OwnerStatementResponse(
            message="Owner statement generated successfully",
            statement=statement_to_out(statement),
        )

    if fmt == "pdf":
        content = render_statement_pdf(statement)
        if not content:
            raise HTTPException(500, "Failed to render PDF")
    elif fmt == "csv":
        content = render_statement_csv(statement)
    else:
        content = render_saft_xml(statement)

    headers = {"Content-Disposition": f"attachment; filename=\"{_filename(statement, fmt)}\""}
    return Response(content=content, media_type=MEDIA_TYPES[fmt], headers=headers)


def _period_from_query(start_date: Optional[str], end_date: Optional[str]) -> StatementPeriod:
    try:
        start = parse_iso_date(start_date, "startDate")
        end = parse_iso_date(end_date, "endDate")
    except InvalidStatementInput as e:
        raise HTTPException(400, e.detail)
    return StatementPeriod(start_date=start, end_date=end)


# -------------------------------------------------------------
# (1) OWNER STATEMENT for an arbitrary inclusive date range
#     GET /api/statements/property/{id}?startDate=&endDate=&format=
# -------------------------------------------------------------
@router.get("/property/{property_id}", response_model=None)
def property_owner_statement(
    property_id: int,
    start_date: Optional[str] = Query(None, alias="startDate"),   # 'YYYY-MM-DD'
    end_date: Optional[str] = Query(None, alias="endDate"),       # 'YYYY-MM-DD', inclusive
    format: Optional[str] = Query("json"),
    db: Session = Depends(get_db),
):
    fmt = _parse_format(format)
    period = _period_from_query(start_date, end_date)
    return _respond(_build(db, property_id, period), fmt)


# -------------------------------------------------------------
# (2) MONTHLY statement: first to last day of the month
#     GET /api/statements/property/{id}/monthly?year=&month=
# -------------------------------------------------------------
@router.get("/property/{property_id}/monthly", response_model=None)
def property_monthly_statement(
    property_id: int,
    year: int,
    month: int,
    format: Optional[str] = Query("json"),
    db: Session = Depends(get_db),
):
    fmt = _parse_format(format)
    try:
        start, end = month_period(year, month)
    except InvalidStatementInput as e:
        raise HTTPException(400, e.detail)
    return _respond(_build(db, property_id, StatementPeriod(start_date=start, end_date=end)), fmt)


# -------------------------------------------------------------
# (3) SAFT XML shortcut
#     GET /api/statements/property/{id}/saft?startDate=&endDate=
# -------------------------------------------------------------
@router.get("/property/{property_id}/saft", response_model=None)
def property_saft_export(
    property_id: int,
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    db: Session = Depends(get_db),
):
    period = _period_from_query(start_date, end_date)
    return _respond(_build(db, property_id, period), "xml")
