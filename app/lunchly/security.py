import hmac
import secrets

from flask import Request, session

CSRF_SESSION_KEY = "csrf_token"


def ensure_csrf_token() -> str:
    """Return the session's CSRF token, creating one on first use."""
    token = session.get(CSRF_SESSION_KEY)
    if not token:
        token = secrets.token_urlsafe(32)
        session[CSRF_SESSION_KEY] = token
    return token


def validate_csrf(req: Request) -> bool:
    """Check the token posted in the form (or X-CSRF-Token header) against the session."""
    token = req.headers.get("X-CSRF-Token") or req.form.get(CSRF_SESSION_KEY)
    expected = session.get(CSRF_SESSION_KEY)
    if not token or not expected:
        return False
    return hmac.compare_digest(str(token), str(expected))
