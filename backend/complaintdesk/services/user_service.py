"""
User Service - credential store operations (register, authenticate)
"""

from typing import Optional
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from complaintdesk.core.exceptions import DependencyError, InvalidCredentialsError, ValidationError
from complaintdesk.core.logging_config import logger
from complaintdesk.core.security import burn_password_check, get_password_hash, verify_password
from complaintdesk.models.user import User, UserRole
from complaintdesk.schemas.auth import TokenClaims


DUPLICATE_EMAIL_MESSAGE = "User already exists with this email"


def claims_for(user: User) -> TokenClaims:
    return TokenClaims(user_id=str(user.id), email=user.email, role=user.role, name=user.name)


class UserService:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_email(self, email: str) -> Optional[User]:
        try:
            result = await self.db.execute(select(User).where(User.email == email))
        except SQLAlchemyError as e:
            logger.log_error_with_context(e, context="user lookup")
            raise DependencyError() from e
        return result.scalar_one_or_none()

    async def get_active_by_email(self, email: str) -> Optional[User]:
        """Inactive accounts are treated as if they did not exist"""
        try:
            result = await self.db.execute(
                select(User).where(User.email == email, User.is_active.is_(True))
            )
        except SQLAlchemyError as e:
            logger.log_error_with_context(e, context="user lookup")
            raise DependencyError() from e
        return result.scalar_one_or_none()

    async def register(self, name: str, email: str, password: str, role: UserRole) -> User:
        """Create an active user; raises ValidationError if the email is taken"""
        if await self.get_by_email(email) is not None:
            raise ValidationError(DUPLICATE_EMAIL_MESSAGE, field="email")

        user = User(
            name=name,
            email=email,
            hashed_password=get_password_hash(password),
            role=role,
            is_active=True,
        )
        self.db.add(user)

        try:
            await self.db.commit()
        except IntegrityError as e:
            # Lost a race with a concurrent registration for the same email
            await self.db.rollback()
            raise ValidationError(DUPLICATE_EMAIL_MESSAGE, field="email") from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.log_error_with_context(e, context="user registration")
            raise DependencyError() from e

        await self.db.refresh(user)
        return user

    async def authenticate(self, email: str, password: str) -> User:
        """
        Return the active user matching the credentials.

        Unknown email, inactive account and wrong password all raise the same
        InvalidCredentialsError.
        """
        user = await self.get_active_by_email(email)
        if user is None:
            burn_password_check(password)
            raise InvalidCredentialsError()

        if not verify_password(password, user.hashed_password):
            raise InvalidCredentialsError()

        return user
