# Complaint workflow rules

from complaintdesk.modules.complaints.policy import (
    INITIAL_STATUS,
    StatusTransitionPolicy,
    can_view,
    ensure_admin,
    owner_scope,
)

__all__ = [
    "INITIAL_STATUS",
    "StatusTransitionPolicy",
    "can_view",
    "ensure_admin",
    "owner_scope",
]
