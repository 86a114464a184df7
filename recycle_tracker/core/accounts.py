"""
Account directory for login and registration.

Credentials are a stand-in, not a security boundary: secrets are compared
as plain strings. Session state belongs to the caller.
"""

import threading
from typing import Dict, Optional

from ..errors import AccountAlreadyExistsError, InvalidInputError
from ..storage.models import AccountCredential
from ..utils.logger import get_logger
from .leaderboard import Leaderboard

logger = get_logger(__name__)


class AccountDirectory:
    """Maps usernames to credentials and stable user ids."""

    def __init__(self, leaderboard: Leaderboard):
        self.leaderboard = leaderboard
        self._credentials: Dict[str, AccountCredential] = {}
        self._lock = threading.RLock()

    def login(self, username: str, secret: str) -> Optional[str]:
        """Return the user id if username and secret match exactly."""
        with self._lock:
            credential = self._credentials.get(username)
        if credential is not None and credential.secret == secret:
            logger.debug("Login succeeded for %s", username)
            return credential.user_id
        logger.debug("Login failed for %s", username)
        return None

    def register(self, username: str, secret: str) -> str:
        """Create an account and its zeroed leaderboard profile.

        The leaderboard entry is created before the credential becomes
        visible to login, so a registered user is never missing from the
        roster.

        Args:
            username: Case-sensitive, unique username
            secret: Password stand-in

        Returns:
            The new user id

        Raises:
            InvalidInputError: If username or secret is empty
            AccountAlreadyExistsError: If username is already registered
        """
        with self._lock:
            credential = self.new_credential(username, secret)
            self.restore(credential)

        logger.info("Registered %s as %s", username, credential.user_id)
        return credential.user_id

    def new_credential(self, username: str, secret: str) -> AccountCredential:
        """Validate a registration and allocate its user id without publishing it.

        Raises:
            InvalidInputError: If username or secret is empty
            AccountAlreadyExistsError: If username is already registered
        """
        if not username or not username.strip():
            raise InvalidInputError("username is required and cannot be empty")
        if not secret:
            raise InvalidInputError("secret is required and cannot be empty")

        with self._lock:
            if username in self._credentials:
                raise AccountAlreadyExistsError(username)
            return AccountCredential(
                username=username, secret=secret, user_id=self._next_user_id()
            )

    def restore(self, credential: AccountCredential) -> None:
        """Publish an account and its roster entry.

        Used for new registrations and for accounts loaded from storage.

        Raises:
            AccountAlreadyExistsError: If the username or user id is already taken
        """
        with self._lock:
            if credential.username in self._credentials:
                raise AccountAlreadyExistsError(credential.username)
            if not self.leaderboard.add_user(credential.user_id, credential.username):
                raise AccountAlreadyExistsError(credential.username)
            self._credentials[credential.username] = credential

    def get(self, username: str) -> Optional[AccountCredential]:
        with self._lock:
            return self._credentials.get(username)

    def _next_user_id(self) -> str:
        taken = {credential.user_id for credential in self._credentials.values()}
        n = len(self._credentials) + 1
        while f"user{n}" in taken or self.leaderboard.has_user(f"user{n}"):
            n += 1
        return f"user{n}"
