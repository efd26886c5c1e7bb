# Authentication module

from complaintdesk.modules.auth.dependencies import (
    get_current_identity,
    get_current_admin,
)
from complaintdesk.modules.auth.session import (
    set_session_cookie,
    clear_session_cookie,
)

__all__ = [
    "get_current_identity",
    "get_current_admin",
    "set_session_cookie",
    "clear_session_cookie",
]
