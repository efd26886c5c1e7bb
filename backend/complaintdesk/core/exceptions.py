"""
Custom Exceptions for ComplaintDesk
===================================

Every error carries the HTTP status it maps to, so the API layer renders
them uniformly as ``{"error": message}``.

Usage:
    from complaintdesk.core.exceptions import ComplaintNotFoundError

    if not complaint:
        raise ComplaintNotFoundError(complaint_id)
"""

from typing import Optional, Any, Dict


class ComplaintDeskError(Exception):
    """Base exception for all ComplaintDesk errors"""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)


# ============================================
# Validation Errors (400-type)
# ============================================

class ValidationError(ComplaintDeskError):
    """Input validation failed"""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="VALIDATION_ERROR", details=details)


class InvalidStatusTransitionError(ValidationError):
    """Requested status change is not allowed by the transition table"""

    def __init__(self, current: str, requested: str):
        super().__init__(
            f"Cannot change status from '{current}' to '{requested}'",
            field="status"
        )
        self.code = "INVALID_STATUS_TRANSITION"
        self.details.update({"current": current, "requested": requested})


# ============================================
# Authentication & Authorization Errors
# ============================================

class AuthenticationError(ComplaintDeskError):
    """Missing, invalid or expired session"""

    status_code = 401

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, code="AUTH_FAILED")


class InvalidCredentialsError(AuthenticationError):
    """Login failed; deliberately does not say which field was wrong"""

    def __init__(self):
        super().__init__("Invalid credentials")
        self.code = "INVALID_CREDENTIALS"


class AuthorizationError(ComplaintDeskError):
    """Authenticated but not allowed to perform this action"""

    status_code = 403

    def __init__(self, message: str = "Not authorized"):
        super().__init__(message, code="NOT_AUTHORIZED")


# ============================================
# Resource Errors (404-type)
# ============================================

class ResourceNotFoundError(ComplaintDeskError):
    """Base class for not found errors"""

    status_code = 404

    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(
            f"{resource_type} not found",
            code=f"{resource_type.upper()}_NOT_FOUND",
            details={"resource_type": resource_type, "resource_id": resource_id}
        )


class ComplaintNotFoundError(ResourceNotFoundError):
    """Complaint not found"""

    def __init__(self, complaint_id: str):
        super().__init__("Complaint", complaint_id)


# ============================================
# Dependency Errors (500-type)
# ============================================

class DependencyError(ComplaintDeskError):
    """Storage or transport failure; the client only sees a generic message"""

    status_code = 500

    def __init__(self, message: str = "Internal server error", dependency: str = "database"):
        super().__init__(message, code="DEPENDENCY_ERROR", details={"dependency": dependency})
