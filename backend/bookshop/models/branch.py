# backend/bookshop/models/branch.py

from pydantic import Field
from typing import Optional
from datetime import datetime

from bookshop.models.common import CamelModel


class BranchBase(CamelModel):
    branch_name: str = Field(..., min_length=1)
    branch_address: str = Field(..., min_length=1)
    branch_phone: Optional[str] = None
    branch_email: Optional[str] = None

class BranchCreate(BranchBase):
    pass

class Branch(BranchBase):
    branch_id: str
    created_at: datetime
