"""Custom exceptions for fleetcontract."""

from typing import Optional


class FleetContractError(Exception):
    """Base exception for all fleetcontract errors."""

    def __init__(self, message: str, details: Optional[str] = None) -> None:
        self.message = message
        self.details = details
        super().__init__(message)


# ─────────────────────────────────────────────────────────────────────────────
# Config Errors
# ─────────────────────────────────────────────────────────────────────────────


class ConfigError(FleetContractError):
    """Base class for configuration errors."""


class ConfigValidationError(ConfigError):
    """Settings file could not be parsed or validated."""

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(
            f"Invalid configuration: {field}",
            reason,
        )


# ─────────────────────────────────────────────────────────────────────────────
# Draft Errors
# ─────────────────────────────────────────────────────────────────────────────


class DraftError(FleetContractError):
    """Base class for draft file errors."""


class DraftNotFoundError(DraftError):
    """Draft file does not exist."""

    def __init__(self, path: str) -> None:
        super().__init__(
            f"Draft not found: {path}",
            "Run 'fleetcontract new --save <file>' to create one.",
        )


class DraftFormatError(DraftError):
    """Draft file is not valid TOML or does not match the draft layout."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(
            f"Invalid draft file: {path}",
            reason,
        )


# ─────────────────────────────────────────────────────────────────────────────
# Backend Errors
# ─────────────────────────────────────────────────────────────────────────────


class GatewayError(FleetContractError):
    """Base class for persistence gateway failures."""


class RecordNotFoundError(GatewayError):
    """A record addressed by id does not exist."""

    def __init__(self, entity: str, record_id: str) -> None:
        super().__init__(
            f"Record not found in {entity}: {record_id}",
        )


class DuplicateKeyError(GatewayError):
    """A create would violate a unique business key."""

    def __init__(self, entity: str, key: str) -> None:
        super().__init__(
            f"Duplicate key in {entity}: {key}",
        )


class IdentifierGenerationError(FleetContractError):
    """Contract number could not be generated."""

    def __init__(self, contract_type: str, reason: Optional[str] = None) -> None:
        super().__init__(
            f"Could not generate a contract number for {contract_type}",
            reason,
        )


# ─────────────────────────────────────────────────────────────────────────────
# Export Errors
# ─────────────────────────────────────────────────────────────────────────────


class ExportError(FleetContractError):
    """Spreadsheet could not be written."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(
            f"Failed to write spreadsheet {path}",
            reason,
        )
