from sqlalchemy import Column, String, Text, DateTime, Enum as SQLEnum, Index
from datetime import datetime
import enum

from complaintdesk.core.database import Base
from complaintdesk.core.types import GUID, generate_uuid


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class ComplaintCategory(str, enum.Enum):
    PRODUCT = "Product"
    SERVICE = "Service"
    SUPPORT = "Support"
    BILLING = "Billing"
    TECHNICAL = "Technical"


class ComplaintPriority(str, enum.Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class ComplaintStatus(str, enum.Enum):
    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    RESOLVED = "Resolved"


class Complaint(Base):
    """
    Complaint submitted by a user.

    The owner columns (user_id, user_email, user_name) are a copy of the
    submitter's token claims at creation time and never change afterwards.
    """
    __tablename__ = "complaints"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)

    # Enum columns store the display value ("In Progress"), not the member name
    category = Column(SQLEnum(ComplaintCategory, values_callable=_enum_values), nullable=False)
    priority = Column(SQLEnum(ComplaintPriority, values_callable=_enum_values), nullable=False)
    status = Column(
        SQLEnum(ComplaintStatus, values_callable=_enum_values),
        default=ComplaintStatus.PENDING,
        nullable=False,
    )

    date_submitted = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Owner fields
    user_id = Column(GUID, nullable=False)
    user_email = Column(String(255), nullable=False)
    user_name = Column(String(255), nullable=False)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        Index("ix_complaints_user_id", "user_id"),
        Index("ix_complaints_status", "status"),
        Index("ix_complaints_priority", "priority"),
    )

    def __repr__(self):
        return f"<Complaint {self.id} [{self.status.value if self.status else None}]>"
