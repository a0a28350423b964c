"""
Registry core: chain catalog, wallet session, network reconciliation,
the NameStorage client, name suggestions and the registration protocol.
"""

from .catalog import ChainCatalog, ChainInfo
from .client import RegistryBinding, RegistryClient
from .orchestrator import (
    ConflictPrompt,
    DismissPrompt,
    DisplayState,
    RegistrationOrchestrator,
    RegistrationResult,
    RegistrationState,
)
from .reconcile import NetworkReconciler
from .session import AccountsChanged, NetworkChanged, SessionState, WalletSession
from .suggest import SuggestionEngine, candidate_name, generate_candidates

__all__ = [
    "AccountsChanged",
    "ChainCatalog",
    "ChainInfo",
    "ConflictPrompt",
    "DismissPrompt",
    "DisplayState",
    "NetworkChanged",
    "NetworkReconciler",
    "RegistrationOrchestrator",
    "RegistrationResult",
    "RegistrationState",
    "RegistryBinding",
    "RegistryClient",
    "SessionState",
    "SuggestionEngine",
    "WalletSession",
    "candidate_name",
    "generate_candidates",
]
