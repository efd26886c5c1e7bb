from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Dict, Optional
from datetime import datetime

from complaintdesk.models.complaint import ComplaintCategory, ComplaintPriority, ComplaintStatus

# Matches the String(255) title column
MAX_TITLE_LENGTH = 255


class ComplaintCreate(BaseModel):
    """
    Submission payload.

    Only these four fields are read; status and owner fields sent by the
    client are ignored (the model drops unknown keys).
    """
    title: Optional[str] = Field(None, max_length=MAX_TITLE_LENGTH)
    description: Optional[str] = None
    category: Optional[ComplaintCategory] = None
    priority: Optional[ComplaintPriority] = None

    @field_validator('title', 'description', mode='before')
    @classmethod
    def strip_text(cls, value):
        return value.strip() if isinstance(value, str) else value

    @model_validator(mode='after')
    def validate_required_fields(self):
        if not self.title or not self.description or self.category is None or self.priority is None:
            raise ValueError("All fields are required")
        return self


class ComplaintStatusUpdate(BaseModel):
    # Optional so a missing status gets its own message from the endpoint
    status: Optional[ComplaintStatus] = None


class ComplaintResponse(BaseModel):
    """Wire representation; also the immutable snapshot handed to notifiers"""
    id: str
    title: str
    description: str
    category: ComplaintCategory
    priority: ComplaintPriority
    status: ComplaintStatus
    date_submitted: datetime = Field(alias="dateSubmitted")
    user_id: str = Field(alias="userId")
    user_email: str = Field(alias="userEmail")
    user_name: str = Field(alias="userName")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    class Config:
        from_attributes = True
        populate_by_name = True
        frozen = True


class ComplaintStats(BaseModel):
    total: int
    by_status: Dict[str, int] = Field(alias="byStatus")

    class Config:
        populate_by_name = True


class MessageResponse(BaseModel):
    message: str
