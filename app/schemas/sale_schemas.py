"""Sale / purchase-request Pydantic schemas."""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from app.models.sale import SaleStatus


class PurchaseRequest(BaseModel):
    """Body for both the initiate and the confirm step of a purchase."""
    vehicle_id: int = Field(..., gt=0)
    notes:      str = Field("", max_length=500)


class ProcessSaleRequest(BaseModel):
    sale_id: int          = Field(..., gt=0)
    status:  SaleStatus
    notes:   Optional[str] = Field(None, max_length=500)


class SaleResponse(BaseModel):
    id:                 int
    vehicle_id:         int
    customer_id:        int
    customer_name:      str
    vehicle_make_model: str
    sale_price:         Decimal
    status:             SaleStatus
    requested_at:       datetime
    completed_at:       Optional[datetime] = None
    notes:              str
