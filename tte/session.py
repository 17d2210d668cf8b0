"""Session identity for the tracker.

The logged-in user is a UUID cached in the local session record
(~/.tte/config.json). The record is handed to SessionManager as a plain
dict; login/logout change it and the caller persists it with save_config().

Login is a lookup by shared secret: an unknown secret creates a new
account, so login never fails for a "wrong password".
"""

import uuid

from tte.errors import AccountDeleted, NotLoggedIn


class SessionManager:

    def __init__(self, config, repository=None):
        self.config = config
        self.repository = repository

    def login(self, secret):
        """Find the user with this secret, creating one if none exists."""
        user_id = self.repository.find_user_by_secret(secret)
        if user_id is None:
            user_id = self.repository.create_user(secret)
        self.config["user_id"] = str(user_id)
        return user_id

    def logout(self):
        self.config["user_id"] = None

    def current_user(self):
        """Return the stored user ID. Raises NotLoggedIn if absent or malformed."""
        stored = self.config.get("user_id")
        if not stored or not isinstance(stored, str):
            raise NotLoggedIn()
        try:
            return uuid.UUID(stored)
        except ValueError:
            raise NotLoggedIn()

    def validate(self, user_id):
        """The stored ID can go stale if the account is removed server-side."""
        if not self.repository.user_exists(user_id):
            raise AccountDeleted()

    def authenticate(self):
        user_id = self.current_user()
        self.validate(user_id)
        return user_id
