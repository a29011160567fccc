"""Customer (admin view) schemas"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class CustomerResponse(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: str
    phone: str
    is_active: bool
    created_at: datetime
    last_login_at: Optional[datetime] = None
    purchase_count: int = 0
