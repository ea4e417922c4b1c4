"""Shared-secret access gate.

The credential is stored once in the settings store under ``wpai_agent_token``
and created on first start if absent. Callers send it in the ``x-wpai-token``
header. The credential value must never reach a log line.
"""

import hmac
import logging
import secrets
import string

from wpai.store.protocol import SettingsStoreProtocol

__all__ = ["TOKEN_HEADER", "TOKEN_OPTION", "authorize", "ensure_access_token", "get_access_token"]

logger = logging.getLogger(__name__)

TOKEN_OPTION = "wpai_agent_token"
TOKEN_HEADER = "x-wpai-token"
_TOKEN_LENGTH = 32
_ALPHABET = string.ascii_letters + string.digits


def _generate_token() -> str:
    return "".join(secrets.choice(_ALPHABET) for _ in range(_TOKEN_LENGTH))


def get_access_token(settings_store: SettingsStoreProtocol) -> str:
    """Return the stored credential, or ``""`` if none exists yet."""
    value = settings_store.get_option(TOKEN_OPTION, "")
    return value if isinstance(value, str) else ""


def ensure_access_token(settings_store: SettingsStoreProtocol) -> str:
    """Create the credential once. An existing credential is never replaced."""
    token = get_access_token(settings_store)
    if token:
        return token
    token = _generate_token()
    settings_store.update_option(TOKEN_OPTION, token)
    logger.info("Generated new access token (stored in option '%s')", TOKEN_OPTION)
    return token


def authorize(supplied: str | None, stored: str | None) -> bool:
    """Fail-closed, constant-time comparison of the supplied credential."""
    if not stored or not supplied:
        return False
    return hmac.compare_digest(supplied.encode("utf-8"), stored.encode("utf-8"))
