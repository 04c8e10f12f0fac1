"""
The signed-in user's session.

The token is kept in memory and persisted to a small JSON file, the
client-side counterpart of browser local storage. The user identity is
decoded from the token itself; the signature is verified by the backend
on every request, so the client only reads the claims.
"""
import json
import logging
import os
from pathlib import Path
from typing import Optional

import jwt

from .models import User

logger = logging.getLogger(__name__)

DEFAULT_SESSION_PATH = Path.home() / ".storefront" / "session.json"


def decode_user(token: str) -> User:
    """
    Read the user claims out of an access token.
    Raises jwt.ExpiredSignatureError or jwt.InvalidTokenError
    """
    payload = jwt.decode(
        token,
        options={"verify_signature": False, "verify_exp": True},
        algorithms=["HS256"],
    )
    claims = payload.get("user")
    if not claims:
        raise jwt.InvalidTokenError("Token carries no user")
    return User(**claims)


class SessionStore:
    """Holds the current token and user, persisted to ``path`` when given"""

    def __init__(self, path=None, persist=True):
        if path is None and persist:
            path = os.getenv("STOREFRONT_SESSION_FILE", DEFAULT_SESSION_PATH)
        self.path = Path(path) if path else None
        self.token: Optional[str] = None
        self.user: Optional[User] = None
        self.load()

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None and self.user is not None

    def load(self):
        """Restore a persisted session, dropping it if the token is no longer usable"""
        if not self.path or not self.path.exists():
            return
        try:
            token = json.loads(self.path.read_text(encoding="utf-8")).get("token")
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read session file {self.path}: {e}")
            return
        if not token:
            return
        try:
            self._set(token)
        except jwt.ExpiredSignatureError:
            logger.info("Stored session has expired")
            self.logout()
        except (jwt.InvalidTokenError, ValueError) as e:
            logger.warning(f"Discarding unreadable stored session: {e}")
            self.logout()

    def login(self, token: str) -> User:
        """Adopt a freshly issued token and persist it"""
        user = self._set(token)
        if self.path:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps({"token": token}), encoding="utf-8")
        logger.info(f"Signed in as {user.email} ({user.user_type})")
        return user

    def logout(self):
        self.token = None
        self.user = None
        if self.path and self.path.exists():
            self.path.unlink()

    def _set(self, token):
        user = decode_user(token)
        self.token = token
        self.user = user
        return user
