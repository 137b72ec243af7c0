"""Core services for fleetcontract."""

from fleetcontract.core.config import SettingsManager, resolve_database_url
from fleetcontract.core.drafts import DraftStore
from fleetcontract.core.errors import ErrorMap, FieldKey
from fleetcontract.core.form import ContractForm
from fleetcontract.core.keychain import DatabaseKeychain
from fleetcontract.core.orchestrator import ContractSubmitter

__all__ = [
    "ContractForm",
    "ContractSubmitter",
    "DatabaseKeychain",
    "DraftStore",
    "ErrorMap",
    "FieldKey",
    "SettingsManager",
    "resolve_database_url",
]
