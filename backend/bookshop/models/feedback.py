# backend/bookshop/models/feedback.py

from pydantic import Field
from typing import Optional
from datetime import datetime

from bookshop.models.common import CamelModel


class FeedbackCreate(CamelModel):
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    phone_number: Optional[str] = None
    subject: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)

class FeedbackResponse(CamelModel):
    staff_response: str = Field(..., min_length=1)

class Feedback(FeedbackCreate):
    feedback_id: str
    staff_response: Optional[str] = None
    created_at: datetime
