from wpai.security.access_gate import (
    TOKEN_HEADER,
    TOKEN_OPTION,
    authorize,
    ensure_access_token,
    get_access_token,
)

__all__ = ["TOKEN_HEADER", "TOKEN_OPTION", "authorize", "ensure_access_token", "get_access_token"]
