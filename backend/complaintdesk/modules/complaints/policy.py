"""
Authorization and workflow rules for complaints.

Pure decision logic: nothing here touches the database or the request.
The API layer asks these functions *whether* something is allowed and the
service layer applies the answer.

Rules:
1. Any authenticated identity may submit; new complaints always start as Pending
2. Admins see every complaint, everyone else only their own
3. Only admins may change status or delete
4. Status changes follow a transition table (permissive unless configured strict)
"""
from typing import Dict, FrozenSet, Mapping, Optional

from complaintdesk.core.exceptions import AuthorizationError, InvalidStatusTransitionError
from complaintdesk.models.complaint import ComplaintStatus
from complaintdesk.schemas.auth import TokenClaims


INITIAL_STATUS = ComplaintStatus.PENDING

# Any status may be set from any status
UNRESTRICTED_TRANSITIONS: Dict[ComplaintStatus, FrozenSet[ComplaintStatus]] = {
    status: frozenset(ComplaintStatus) for status in ComplaintStatus
}

# Pending -> In Progress -> Resolved, skipping ahead allowed, no going back
FORWARD_ONLY_TRANSITIONS: Dict[ComplaintStatus, FrozenSet[ComplaintStatus]] = {
    ComplaintStatus.PENDING: frozenset({ComplaintStatus.IN_PROGRESS, ComplaintStatus.RESOLVED}),
    ComplaintStatus.IN_PROGRESS: frozenset({ComplaintStatus.RESOLVED}),
    ComplaintStatus.RESOLVED: frozenset(),
}


class StatusTransitionPolicy:
    """Explicit transition table over ComplaintStatus"""

    def __init__(self, transitions: Mapping[ComplaintStatus, FrozenSet[ComplaintStatus]]):
        self.transitions = dict(transitions)

    @classmethod
    def from_settings(cls, strict: bool) -> "StatusTransitionPolicy":
        return cls(FORWARD_ONLY_TRANSITIONS if strict else UNRESTRICTED_TRANSITIONS)

    def allows(self, current: ComplaintStatus, requested: ComplaintStatus) -> bool:
        # Re-setting the current status is a no-op and always allowed
        if current == requested:
            return True
        return requested in self.transitions.get(current, frozenset())

    def check(self, current: ComplaintStatus, requested: ComplaintStatus) -> None:
        if not self.allows(current, requested):
            raise InvalidStatusTransitionError(current.value, requested.value)


def ensure_admin(identity: TokenClaims) -> None:
    """Raise AuthorizationError unless the identity is an admin"""
    if not identity.is_admin:
        raise AuthorizationError("Admin access required")


def owner_scope(identity: TokenClaims) -> Optional[str]:
    """
    Owner id the identity's reads are restricted to.

    None means unrestricted (admin).
    """
    if identity.is_admin:
        return None
    return identity.user_id


def can_view(identity: TokenClaims, owner_user_id: str) -> bool:
    return identity.is_admin or owner_user_id == identity.user_id
