# ownerportal/services/records.py
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, List, Optional


@dataclass(frozen=True)
class Invoice:
    """One upstream invoice, normalized. `value` stays as received."""
    id: str
    name: Optional[str]
    value: Any
    date: Optional[datetime]
    series: str = ""
    tax: Optional[Any] = None


@dataclass(frozen=True)
class StatementPeriod:
    start_date: date
    end_date: date


@dataclass(frozen=True)
class StatementTotals:
    gross_amount: Decimal
    portal_commission: Decimal
    cleaning_fee: Decimal
    management_commission: Decimal
    final_owner_amount: Decimal
    invoice_count: int

    @property
    def total_expenses(self) -> Decimal:
        return self.portal_commission + self.cleaning_fee + self.management_commission


@dataclass(frozen=True)
class StatementLine:
    id: str
    name: Optional[str]
    value: Decimal
    date: Optional[datetime]
    series: str = ""
    tax: Optional[Decimal] = None


@dataclass(frozen=True)
class OwnerStatement:
    """Everything a renderer needs; built fresh per request."""
    statement_id: str
    property_id: int
    property_name: Optional[str]
    owner: str
    is_admin_owned: bool
    period: StatementPeriod
    totals: StatementTotals
    lines: List[StatementLine] = field(default_factory=list)
    generated_at: Optional[datetime] = None
