from datetime import datetime, timedelta
from typing import Optional, Dict, Any
from jose import JWTError, jwt
from pydantic import ValidationError as PydanticValidationError
from starlette.requests import Request
import bcrypt

from complaintdesk.core.config import settings
from complaintdesk.schemas.auth import TokenClaims

ACCESS_TOKEN_TYPE = "access"

# Lazily built so importing this module never pays for a bcrypt round
_dummy_password_hash: Optional[str] = None


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password"""
    # Bcrypt has a 72 byte limit - truncate password if necessary
    password_bytes = plain_password.encode('utf-8')[:72]
    try:
        return bcrypt.checkpw(password_bytes, hashed_password.encode('utf-8'))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def get_password_hash(password: str) -> str:
    """Hash password with configurable rounds (BCRYPT_ROUNDS in .env)"""
    # Bcrypt has a 72 byte limit - truncate password if necessary
    password_bytes = password.encode('utf-8')[:72]
    hashed = bcrypt.hashpw(password_bytes, bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS))
    return hashed.decode('utf-8')


def burn_password_check(plain_password: str) -> None:
    """
    Run a bcrypt comparison against a throwaway hash.

    Called when a login names no active account, so that path costs the same
    as a wrong password.
    """
    global _dummy_password_hash
    if _dummy_password_hash is None:
        _dummy_password_hash = get_password_hash("complaintdesk-timing-equalizer")
    verify_password(plain_password, _dummy_password_hash)


def create_access_token(claims: TokenClaims, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT session token"""
    if expires_delta is None:
        expires_delta = timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS)

    to_encode: Dict[str, Any] = {
        "sub": claims.user_id,
        "email": claims.email,
        "role": claims.role.value,
        "name": claims.name,
        "type": ACCESS_TOKEN_TYPE,
        "exp": datetime.utcnow() + expires_delta,
    }
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> Optional[TokenClaims]:
    """
    Verify signature, expiry and token type.

    Returns None for anything that is not a valid session token; callers
    treat that as "unauthenticated".
    """
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        return None

    if payload.get("type") != ACCESS_TOKEN_TYPE:
        return None

    try:
        return TokenClaims(
            user_id=payload.get("sub"),
            email=payload.get("email"),
            role=payload.get("role"),
            name=payload.get("name"),
        )
    except PydanticValidationError:
        return None


def get_token_from_request(request: Request) -> Optional[str]:
    """
    Extract the session token.

    An ``Authorization: Bearer`` header wins; the session cookie is consulted
    only when no bearer header is present.
    """
    auth_header = request.headers.get("authorization")
    if auth_header and auth_header.startswith("Bearer "):
        return auth_header[7:]

    return request.cookies.get(settings.SESSION_COOKIE_NAME) or None
