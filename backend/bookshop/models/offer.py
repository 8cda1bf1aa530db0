# backend/bookshop/models/offer.py

from pydantic import Field, field_validator, model_validator
from typing import Optional
from datetime import datetime

from bookshop.models.common import CamelModel


class OfferBase(CamelModel):
    offer_title: str = Field(..., min_length=1)
    offer_description: str = Field(..., min_length=1)
    offer_value: str = Field(..., min_length=1) # display text such as "20%" or "Buy 2 get 1"
    offer_image: Optional[str] = None # file name or URL; uploads are handled elsewhere
    discount_percentage: float = Field(0.0, ge=0, le=100)
    valid_from: datetime
    valid_to: datetime
    is_active: bool = True

    @field_validator("valid_from", "valid_to")
    @classmethod
    def to_local_time(cls, value: datetime) -> datetime:
        # Stored as naive server-local timestamps, like every other DATETIME column
        if value.tzinfo is not None:
            return value.astimezone().replace(tzinfo=None)
        return value

    @model_validator(mode="after")
    def check_validity_window(self):
        if self.valid_to < self.valid_from:
            raise ValueError("validTo must not be earlier than validFrom")
        return self

class OfferCreate(OfferBase):
    pass

class Offer(OfferBase):
    offer_id: str
    created_at: datetime
    updated_at: datetime
