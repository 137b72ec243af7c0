"""Result models for contract submission."""

from typing import Optional

from pydantic import BaseModel


class SubmissionResult(BaseModel):
    """Outcome of one submission attempt."""

    success: bool
    contract_number: Optional[str] = None
    contract_id: Optional[str] = None
    message: Optional[str] = None
    error_message: Optional[str] = None
    rollback_complete: bool = True

    @classmethod
    def failed(cls, error_message: str, rollback_complete: bool = True) -> "SubmissionResult":
        return cls(
            success=False,
            error_message=error_message,
            rollback_complete=rollback_complete,
        )

    @property
    def banner(self) -> str:
        """One-line text for the success/failure banner."""
        if self.success:
            return f"{self.message} (ID: {self.contract_number})"
        return f"Failed to create contract: {self.error_message}"
