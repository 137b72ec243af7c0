"""Draft files (TOML)."""

from datetime import date
from pathlib import Path

import tomli
import tomli_w
from pydantic import ValidationError

from fleetcontract.exceptions import DraftFormatError, DraftNotFoundError
from fleetcontract.models import Draft


class DraftStore:
    """Reads and writes drafts so a form can be finished or submitted later."""

    @staticmethod
    def load(path: Path) -> Draft:
        """Load a draft file.

        Vehicles without an ``id`` get a fresh one.

        Raises:
            DraftNotFoundError: If the file doesn't exist
            DraftFormatError: If the file is not a valid draft
        """
        path = Path(path)
        if not path.exists():
            raise DraftNotFoundError(str(path))

        try:
            data = tomli.loads(path.read_text(encoding="utf-8"))
        except (tomli.TOMLDecodeError, UnicodeDecodeError) as e:
            raise DraftFormatError(str(path), str(e))

        # Integers and dates typed without quotes in a hand-written file
        sections = [data.get("client")] + list(data.get("vehicles", []))
        for section in sections:
            if isinstance(section, dict):
                for key, value in section.items():
                    if isinstance(value, int) and not isinstance(value, bool):
                        section[key] = str(value)
                    elif isinstance(value, date):
                        section[key] = value.isoformat()

        try:
            return Draft.model_validate(data)
        except ValidationError as e:
            raise DraftFormatError(str(path), str(e))

    @staticmethod
    def save(draft: Draft, path: Path) -> Path:
        """Write a draft file, creating parent directories."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        data = draft.model_dump(mode="json")
        path.write_text(tomli_w.dumps(data), encoding="utf-8")
        return path
