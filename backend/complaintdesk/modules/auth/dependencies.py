from fastapi import Depends, Request

from complaintdesk.core.exceptions import AuthenticationError
from complaintdesk.core.logging_config import set_user_id
from complaintdesk.core.security import decode_token, get_token_from_request
from complaintdesk.modules.complaints.policy import ensure_admin
from complaintdesk.schemas.auth import TokenClaims


async def get_current_identity(request: Request) -> TokenClaims:
    """
    Get the authenticated identity from the session token.

    Identity comes from the token claims alone; the users table is not
    consulted, so a token stays valid until it expires.
    """
    token = get_token_from_request(request)
    if not token:
        raise AuthenticationError("Not authenticated")

    claims = decode_token(token)
    if claims is None:
        raise AuthenticationError("Invalid or expired session")

    set_user_id(claims.user_id)
    return claims


async def get_current_admin(
    identity: TokenClaims = Depends(get_current_identity)
) -> TokenClaims:
    """Get current identity, requiring the admin role"""
    ensure_admin(identity)
    return identity
