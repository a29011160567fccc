"""Vehicle Pydantic schemas."""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from app.models.vehicle import VehicleStatus

MIN_YEAR = 1900
MAX_YEAR = 2030


class VehicleCreate(BaseModel):
    make:         str     = Field(..., min_length=1, max_length=100)
    model:        str     = Field(..., min_length=1, max_length=100)
    year:         int     = Field(..., ge=MIN_YEAR, le=MAX_YEAR)
    color:        str     = Field("", max_length=100)
    vin:          str     = Field(..., min_length=1, max_length=20, description="Vehicle identification number")
    price:        Decimal = Field(..., ge=0, max_digits=18, decimal_places=2)
    mileage:      int     = Field(..., ge=0)
    fuel_type:    str     = Field("", max_length=20)
    transmission: str     = Field("", max_length=20)
    description:  str     = Field("", max_length=1000)


class VehicleUpdate(BaseModel):
    """All fields are optional; only provided fields are updated."""
    make:         Optional[str]     = Field(None, min_length=1, max_length=100)
    model:        Optional[str]     = Field(None, min_length=1, max_length=100)
    year:         Optional[int]     = Field(None, ge=MIN_YEAR, le=MAX_YEAR)
    color:        Optional[str]     = Field(None, max_length=100)
    vin:          Optional[str]     = Field(None, min_length=1, max_length=20)
    price:        Optional[Decimal] = Field(None, ge=0, max_digits=18, decimal_places=2)
    mileage:      Optional[int]     = Field(None, ge=0)
    fuel_type:    Optional[str]     = Field(None, max_length=20)
    transmission: Optional[str]     = Field(None, max_length=20)
    description:  Optional[str]     = Field(None, max_length=1000)
    status:       Optional[VehicleStatus] = None

    @model_validator(mode="after")
    def reject_explicit_nulls(self) -> "VehicleUpdate":
        for name in self.model_fields_set:
            if getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class VehicleFilter(BaseModel):
    make:         Optional[str]     = None
    model:        Optional[str]     = None
    min_year:     Optional[int]     = None
    max_year:     Optional[int]     = None
    min_price:    Optional[Decimal] = None
    max_price:    Optional[Decimal] = None
    color:        Optional[str]     = None
    fuel_type:    Optional[str]     = None
    transmission: Optional[str]     = None
    status:       Optional[VehicleStatus] = None
    page:         int = Field(1, ge=1)
    page_size:    int = Field(10, ge=1, le=100)


class VehicleResponse(BaseModel):
    id:           int
    make:         str
    model:        str
    year:         int
    color:        str
    vin:          str
    price:        Decimal
    mileage:      int
    fuel_type:    str
    transmission: str
    description:  str
    status:       VehicleStatus
    created_at:   datetime
    updated_at:   Optional[datetime] = None

    class Config:
        from_attributes = True
