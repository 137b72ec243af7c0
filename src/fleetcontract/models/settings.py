"""Application settings model."""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field


class Settings(BaseModel):
    """User settings stored in settings.toml."""

    version: int = Field(default=1, description="Settings schema version")
    database_url: Optional[str] = Field(
        default=None,
        description="SQLAlchemy URL; prefer the keychain when it holds a password",
    )
    export_dir: Optional[Path] = None
