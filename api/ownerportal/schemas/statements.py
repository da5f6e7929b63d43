# ownerportal/schemas/statements.py
from typing import List, Optional
from pydantic import BaseModel

# Wire names are camelCase: the portal frontend reads them as-is.


class StatementPropertyOut(BaseModel):
    id: int
    name: Optional[str] = None
    owner: str
    isAdminOwned: bool


class StatementPeriodOut(BaseModel):
    startDate: str
    endDate: str


class CalculationsOut(BaseModel):
    grossAmount: float
    portalCommission: float
    cleaningFee: float
    managementCommission: float
    finalOwnerAmount: float


class InvoiceLineOut(BaseModel):
    id: str
    name: Optional[str] = None
    value: float
    date: Optional[str] = None
    series: str = ""


class OwnerStatementOut(BaseModel):
    statementId: str
    generatedAt: str
    currency: str
    property: StatementPropertyOut
    period: StatementPeriodOut
    calculations: CalculationsOut
    invoiceCount: int
    invoices: List[InvoiceLineOut]


class OwnerStatementResponse(BaseModel):
    message: str
    statement: OwnerStatementOut
