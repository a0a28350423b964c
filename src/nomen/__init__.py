__all__ = [
    # Configuration
    "Settings",
    "load_settings",
    # Errors
    "NomenError",
    "ConfigError",
    "ProviderError",
    "RpcError",
    "ContractError",
    # Providers
    "JsonRpcWalletProvider",
    "LocalAccountProvider",
    "discover_provider",
    # Registry core
    "ChainCatalog",
    "ChainInfo",
    "WalletSession",
    "SessionState",
    "NetworkReconciler",
    "RegistryBinding",
    "RegistryClient",
    "SuggestionEngine",
    "RegistrationOrchestrator",
    "RegistrationResult",
    "RegistrationState",
    "DisplayState",
]

from .config import Settings, load_settings
from .errors import ConfigError, ContractError, NomenError, ProviderError, RpcError
from .pneuma.provider import JsonRpcWalletProvider, LocalAccountProvider, discover_provider
from .registry import (
    ChainCatalog,
    ChainInfo,
    DisplayState,
    NetworkReconciler,
    RegistrationOrchestrator,
    RegistrationResult,
    RegistrationState,
    RegistryBinding,
    RegistryClient,
    SessionState,
    SuggestionEngine,
    WalletSession,
)
