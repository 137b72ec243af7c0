"""OS keychain storage for the database URL, which may embed a password."""

from typing import Optional

import keyring
from keyring.errors import PasswordDeleteError

SERVICE_NAME = "fleetcontract"


class DatabaseKeychain:
    """Database URL in the OS keychain."""

    KEY_DATABASE_URL = "database_url"

    @classmethod
    def store(cls, url: str) -> None:
        keyring.set_password(SERVICE_NAME, cls.KEY_DATABASE_URL, url)

    @classmethod
    def retrieve(cls) -> Optional[str]:
        """Stored URL, or None."""
        return keyring.get_password(SERVICE_NAME, cls.KEY_DATABASE_URL) or None

    @classmethod
    def delete(cls) -> None:
        try:
            keyring.delete_password(SERVICE_NAME, cls.KEY_DATABASE_URL)
        except PasswordDeleteError:
            pass  # Nothing stored

    @classmethod
    def exists(cls) -> bool:
        return cls.retrieve() is not None
