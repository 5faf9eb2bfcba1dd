"""Admin session context resolved from HTTP Basic credentials.

Handlers that need to know who is calling receive a SessionContext argument
instead of reading global login state.
"""

import base64
import binascii
import hmac
import os
from dataclasses import dataclass
from functools import wraps
from typing import Callable, Optional, Tuple

from flask import Response, jsonify, request

__all__ = ["SessionContext", "admin_credentials", "resolve_session", "admin_required"]


@dataclass(frozen=True)
class SessionContext:
    username: Optional[str] = None
    is_admin: bool = False

    @property
    def is_authenticated(self) -> bool:
        return self.username is not None


ANONYMOUS = SessionContext()


def admin_credentials() -> Tuple[Optional[str], Optional[str]]:
    """Get admin credentials from environment."""
    return os.getenv("ADMIN_USER"), os.getenv("ADMIN_PASS")


def _parse_basic_auth(header: str) -> Optional[Tuple[str, str]]:
    if not header.startswith("Basic "):
        return None
    try:
        decoded = base64.b64decode(header.split(" ", 1)[1]).decode("utf-8")
        username, password = decoded.split(":", 1)
    except (binascii.Error, UnicodeDecodeError, ValueError):
        return None
    return username, password


def _matches(given: str, expected: str) -> bool:
    # compare_digest rejects non-ASCII str, so compare UTF-8 bytes
    return hmac.compare_digest(given.encode("utf-8"), expected.encode("utf-8"))


def resolve_session(authorization_header: Optional[str]) -> SessionContext:
    """Build the session for a request's Authorization header."""
    user, password = admin_credentials()
    if not user or not password:
        return ANONYMOUS

    parsed = _parse_basic_auth(authorization_header or "")
    if parsed is None:
        return ANONYMOUS

    username, passwd = parsed
    if _matches(username, user) and _matches(passwd, password):
        return SessionContext(username=username, is_admin=True)
    return ANONYMOUS


def _unauthorized() -> Response:
    response = jsonify({"error": "Authentication required"})
    response.status_code = 401
    response.headers["WWW-Authenticate"] = 'Basic realm="Catalog Admin"'
    return response


def admin_required(view: Callable) -> Callable:
    """Resolve the session and pass it to ``view`` as ``session``.

    Responds 403 when no admin credentials are configured and 401 when the
    request's credentials don't match.
    """

    @wraps(view)
    def wrapper(*args, **kwargs):
        user, password = admin_credentials()
        if not user or not password:
            return jsonify({"error": "Admin access is not configured"}), 403

        session = resolve_session(request.headers.get("Authorization"))
        if not session.is_admin:
            return _unauthorized()
        return view(*args, session=session, **kwargs)

    return wrapper
