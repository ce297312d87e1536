from pydantic import BaseModel, computed_field
from typing import List, Optional

from fieldservice.models.quote import QuoteStatus
from fieldservice.services.display import with_vat
from fieldservice.services.status_flow import EntityKind, get_next_allowed


class LineItemIn(BaseModel):
    # Range checks (quantity > 0, unit_price >= 0) happen in services.quotes
    description: str
    quantity: float = 1
    unit_price: float = 0


class LineItemUpdate(BaseModel):
    description: Optional[str] = None
    quantity: Optional[float] = None
    unit_price: Optional[float] = None


class LineItemRead(BaseModel):
    id: str
    description: str
    quantity: float
    unit_price: float
    line_total: float


class QuoteCreate(BaseModel):
    client_id: str
    notes: Optional[str] = None
    line_items: List[LineItemIn]


class QuoteUpdate(BaseModel):
    client_id: Optional[str] = None
    notes: Optional[str] = None
    line_items: Optional[List[LineItemIn]] = None


class QuoteStatusChange(BaseModel):
    status: QuoteStatus


class QuoteRead(BaseModel):
    id: str
    client_id: str
    client_name: Optional[str] = None
    client_phone: Optional[str] = None
    notes: Optional[str] = None
    line_items: List[LineItemRead] = []
    total: float
    status: str
    converted_job_id: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    class Config:
        from_attributes = True

    @computed_field
    @property
    def total_with_vat(self) -> float:
        return with_vat(self.total)

    @computed_field
    @property
    def editable(self) -> bool:
        return self.status == QuoteStatus.DRAFT.value and not self.converted_job_id

    @computed_field
    @property
    def can_convert(self) -> bool:
        return self.status == QuoteStatus.APPROVED.value and not self.converted_job_id

    @computed_field
    @property
    def allowed_next_statuses(self) -> List[str]:
        return sorted(get_next_allowed(EntityKind.QUOTE, self.status))
