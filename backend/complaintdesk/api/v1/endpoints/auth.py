from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from complaintdesk.core.config import settings
from complaintdesk.core.database import get_db
from complaintdesk.core.exceptions import InvalidCredentialsError, ValidationError
from complaintdesk.core.logging_config import logger, set_user_id
from complaintdesk.core.rate_limiter import limiter, LOGIN_RATE_LIMIT, REGISTER_RATE_LIMIT
from complaintdesk.core.security import create_access_token
from complaintdesk.modules.auth.dependencies import get_current_identity
from complaintdesk.modules.auth.session import clear_session_cookie, set_session_cookie
from complaintdesk.schemas.auth import (
    AuthResponse,
    MeResponse,
    TokenClaims,
    UserLogin,
    UserRegister,
    UserResponse,
)
from complaintdesk.schemas.complaint import MessageResponse
from complaintdesk.services.user_service import UserService, claims_for


router = APIRouter()


def _client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(REGISTER_RATE_LIMIT)
async def register(
    request: Request,
    response: Response,
    user_data: UserRegister,
    db: AsyncSession = Depends(get_db)
):
    """Register new user and start a session (rate limited: 3/min)"""
    client_ip = _client_ip(request)
    role = user_data.resolve_role(settings.ALLOW_ROLE_SELECTION)

    try:
        user = await UserService(db).register(
            name=user_data.name,
            email=user_data.email,
            password=user_data.password,
            role=role,
        )
    except ValidationError as e:
        logger.log_auth_event(
            event="register",
            success=False,
            user_email=user_data.email,
            reason=e.message,
            client_ip=client_ip
        )
        raise

    claims = claims_for(user)
    set_session_cookie(response, create_access_token(claims))
    set_user_id(claims.user_id)

    logger.log_auth_event(
        event="register",
        success=True,
        user_email=user.email,
        client_ip=client_ip,
        user_role=claims.role.value
    )

    return AuthResponse(message="User registered successfully", user=UserResponse.from_claims(claims))


@router.post("/login", response_model=AuthResponse)
@limiter.limit(LOGIN_RATE_LIMIT)
async def login(
    request: Request,
    response: Response,
    credentials: UserLogin,
    db: AsyncSession = Depends(get_db)
):
    """Login user (rate limited: 5/min)"""
    client_ip = _client_ip(request)

    try:
        user = await UserService(db).authenticate(credentials.email, credentials.password)
    except InvalidCredentialsError:
        logger.log_auth_event(
            event="login",
            success=False,
            user_email=credentials.email,
            reason="Invalid credentials",
            client_ip=client_ip
        )
        raise

    claims = claims_for(user)
    set_session_cookie(response, create_access_token(claims))
    set_user_id(claims.user_id)

    logger.log_auth_event(
        event="login",
        success=True,
        user_email=user.email,
        client_ip=client_ip,
        user_role=claims.role.value
    )

    return AuthResponse(message="Login successful", user=UserResponse.from_claims(claims))


@router.get("/me", response_model=MeResponse)
async def get_current_user_info(
    identity: TokenClaims = Depends(get_current_identity)
):
    """Get current user info from the session token"""
    return MeResponse(user=UserResponse.from_claims(identity))


@router.post("/logout", response_model=MessageResponse)
async def logout(request: Request, response: Response):
    """
    Clear the session cookie.

    Tokens are stateless, so a copy of the token held elsewhere stays valid
    until it expires.
    """
    clear_session_cookie(response)
    logger.log_auth_event(event="logout", success=True, client_ip=_client_ip(request))
    return MessageResponse(message="Logged out successfully")
