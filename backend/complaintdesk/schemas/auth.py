from pydantic import BaseModel, Field, field_serializer, model_validator
from typing import Optional

from complaintdesk.core.exceptions import ValidationError
from complaintdesk.models.user import UserRole

MIN_PASSWORD_LENGTH = 6
# Matches the String(255) name and email columns
MAX_NAME_LENGTH = 255


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


class UserRegister(BaseModel):
    # Presence is checked in the validator so every missing field yields the
    # same message instead of one pydantic error per field
    name: Optional[str] = Field(None, max_length=MAX_NAME_LENGTH)
    email: Optional[str] = Field(None, max_length=MAX_NAME_LENGTH)
    password: Optional[str] = None
    # Kept raw; only interpreted when role selection is enabled
    role: Optional[str] = None

    @model_validator(mode='after')
    def validate_required_fields(self):
        if _is_blank(self.name) or _is_blank(self.email) or not self.password:
            raise ValueError("All fields are required")

        if len(self.password) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

        return self

    def resolve_role(self, allow_selection: bool) -> UserRole:
        """Role for the new account; anything but `user` needs role selection enabled"""
        if not allow_selection or self.role is None:
            return UserRole.USER

        try:
            return UserRole(self.role)
        except ValueError:
            allowed = " or ".join(f"'{role.value}'" for role in UserRole)
            raise ValidationError(f"Role must be {allowed}", field="role")


class UserLogin(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None

    @model_validator(mode='after')
    def validate_required_fields(self):
        if _is_blank(self.email) or not self.password:
            raise ValueError("Email and password are required")
        return self


class TokenClaims(BaseModel):
    """Identity carried inside a session token"""
    user_id: str
    email: str
    role: UserRole
    name: str

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


class UserResponse(BaseModel):
    """Public identity projection - never includes the password hash"""
    id: str
    name: str
    email: str
    role: UserRole

    @field_serializer('role')
    def serialize_role(self, value: UserRole) -> str:
        return value.value

    @classmethod
    def from_claims(cls, claims: TokenClaims) -> "UserResponse":
        return cls(id=claims.user_id, name=claims.name, email=claims.email, role=claims.role)

    class Config:
        from_attributes = True


class AuthResponse(BaseModel):
    message: str
    user: UserResponse


class MeResponse(BaseModel):
    user: UserResponse
