# Re-export all models for convenient imports
from complaintdesk.models.user import User, UserRole
from complaintdesk.models.complaint import (
    Complaint,
    ComplaintCategory,
    ComplaintPriority,
    ComplaintStatus,
)

__all__ = [
    # User
    "User",
    "UserRole",
    # Complaint
    "Complaint",
    "ComplaintCategory",
    "ComplaintPriority",
    "ComplaintStatus",
]
