"""Settings storage and database URL resolution."""

import os
from pathlib import Path
from typing import Optional

import platformdirs
import tomli
import tomli_w
from pydantic import ValidationError

from fleetcontract.core.keychain import DatabaseKeychain
from fleetcontract.exceptions import ConfigValidationError
from fleetcontract.models import Settings

DATABASE_URL_ENV = "FLEETCONTRACT_DATABASE_URL"


def default_database_url() -> str:
    """SQLite file in the user data dir."""
    data_dir = Path(platformdirs.user_data_dir("fleetcontract", ensure_exists=True))
    return f"sqlite:///{data_dir / 'contracts.db'}"


class SettingsManager:
    """Reads and writes settings.toml."""

    SETTINGS_FILENAME = "settings.toml"

    def __init__(self, config_dir: Optional[Path] = None) -> None:
        """Initialize settings manager.

        Args:
            config_dir: Override config directory (for testing)
        """
        if config_dir:
            self._config_dir = Path(config_dir)
        else:
            self._config_dir = Path(
                platformdirs.user_config_dir("fleetcontract", ensure_exists=True)
            )

    @property
    def config_path(self) -> Path:
        """Path to the settings file."""
        return self._config_dir / self.SETTINGS_FILENAME

    @property
    def exists(self) -> bool:
        return self.config_path.exists()

    def load(self) -> Settings:
        """Load settings, or defaults when no file exists.

        Raises:
            ConfigValidationError: If the file is not valid TOML or has bad values
        """
        if not self.exists:
            return Settings()

        try:
            data = tomli.loads(self.config_path.read_text(encoding="utf-8"))
        except tomli.TOMLDecodeError as e:
            raise ConfigValidationError("settings", str(e))

        try:
            return Settings.model_validate(data)
        except ValidationError as e:
            raise ConfigValidationError("settings", str(e))

    def save(self, settings: Settings) -> None:
        self._config_dir.mkdir(parents=True, exist_ok=True)
        data = settings.model_dump(mode="json", exclude_none=True)
        self.config_path.write_text(tomli_w.dumps(data), encoding="utf-8")

    def delete(self) -> bool:
        """Delete the settings file.

        Returns:
            True if file was deleted, False if it didn't exist
        """
        if self.exists:
            self.config_path.unlink()
            return True
        return False


def resolve_database_url(
    explicit: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> str:
    """Pick the database URL.

    Order: explicit value, environment variable, keychain, settings file,
    then the default SQLite file.
    """
    if explicit:
        return explicit

    env_url = os.environ.get(DATABASE_URL_ENV)
    if env_url:
        return env_url

    stored = DatabaseKeychain.retrieve()
    if stored:
        return stored

    if settings and settings.database_url:
        return settings.database_url

    return default_database_url()
