"""
Registration protocol and displayed state.

One registration runs at a time::

    Idle -> NetworkChecking -> NetworkInvalid
                            -> ExistenceChecking -> Submitting -> Confirmed | Failed
                                                 -> ConflictResolving -> Cancelled
                                                                      -> (selection) Idle

Every path ends back in Idle. Choosing a suggested name only replaces the
pending name; the user has to submit again.

The orchestrator also owns the displayed network / balance / name and the
loop that applies queued wallet events to the session.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, Optional, Protocol

import httpx
import structlog

from ..config import Settings
from ..errors import ContractError, ProviderError
from ..pneuma.provider import WalletProvider
from ..utils import from_wei
from .catalog import ChainCatalog
from .client import RegistryClient
from .reconcile import NetworkReconciler
from .session import AccountsChanged, NetworkChanged, SessionEvent, WalletSession
from .suggest import SuggestionEngine

log = structlog.get_logger()


class RegistrationState(str, Enum):
    IDLE = "idle"
    NETWORK_CHECKING = "network_checking"
    NETWORK_INVALID = "network_invalid"
    EXISTENCE_CHECKING = "existence_checking"
    CONFLICT_RESOLVING = "conflict_resolving"
    SUBMITTING = "submitting"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass(frozen=True)
class RegistrationResult:
    """Outcome of one submit.

    A chosen suggestion comes back with ``state=CONFLICT_RESOLVING`` and
    ``selected`` set, although the orchestrator is already Idle again; use
    ``needs_resubmit`` to detect it.
    """

    name: str
    state: RegistrationState
    suggestions: list[str] = field(default_factory=list)
    selected: Optional[str] = None

    @property
    def confirmed(self) -> bool:
        return self.state is RegistrationState.CONFIRMED

    @property
    def needs_resubmit(self) -> bool:
        return self.selected is not None


class ConflictPrompt(Protocol):
    async def notify_conflict(self, name: str) -> None:
        ...

    async def choose(self, name: str, candidates: list[str]) -> Optional[str]:
        ...


class DismissPrompt:
    """Prompt that never picks a suggestion."""

    async def notify_conflict(self, name: str) -> None:
        return None

    async def choose(self, name: str, candidates: list[str]) -> Optional[str]:
        return None


@dataclass(frozen=True)
class DisplayState:
    network: str = ""
    balance: str = ""
    name: str = ""


DisplayListener = Callable[[DisplayState], None]


class RegistrationOrchestrator:
    def __init__(
        self,
        session: WalletSession,
        catalog: ChainCatalog,
        registry: RegistryClient,
        suggestions: Optional[SuggestionEngine] = None,
        reconciler: Optional[NetworkReconciler] = None,
        prompt: Optional[ConflictPrompt] = None,
    ) -> None:
        self.session = session
        self.catalog = catalog
        self.registry = registry
        self.suggestions = suggestions or SuggestionEngine(registry, session)
        self.reconciler = reconciler or NetworkReconciler(session)
        self.prompt = prompt or DismissPrompt()

        self.state = RegistrationState.IDLE
        self.transitions: list[RegistrationState] = []
        self.pending_name = ""
        self.display = DisplayState()
        self._display_listeners: list[DisplayListener] = []

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        provider: Optional[WalletProvider],
        prompt: Optional[ConflictPrompt] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> "RegistrationOrchestrator":
        session = WalletSession(provider)
        catalog = ChainCatalog(settings.chain_list_url, client=client, timeout=settings.rpc_timeout)
        registry = RegistryClient(
            session,
            settings.contract_chain_id,
            settings.contract_address,
            receipt_timeout=settings.receipt_timeout,
            poll_interval=settings.poll_interval,
        )
        return cls(session, catalog, registry, prompt=prompt)

    @property
    def can_submit(self) -> bool:
        return self.state is RegistrationState.IDLE

    def _enter(self, state: RegistrationState) -> None:
        self.state = state
        self.transitions.append(state)
        log.debug("registration_state", state=state.value, name=self.pending_name)

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    async def submit(self, name: Optional[str]) -> Optional[RegistrationResult]:
        """
        Run one registration attempt for ``name``.

        Returns None without doing anything when the name is empty or another
        attempt is still in flight.
        """
        name = (name or "").strip()
        if not name:
            return None
        if not self.can_submit:
            log.info("submit_ignored_busy", name=name, state=self.state.value)
            return None

        self.transitions = []
        self.pending_name = name
        try:
            return await self._register(name)
        except Exception:
            log.error("update_name_error", name=name, exc_info=True)
            self._enter(RegistrationState.FAILED)
            return RegistrationResult(name, RegistrationState.FAILED)
        finally:
            self._enter(RegistrationState.IDLE)

    async def _register(self, name: str) -> RegistrationResult:
        self._enter(RegistrationState.NETWORK_CHECKING)
        network_ok = await self._reconcile_active()

        account = self.session.state.account
        if not network_ok or self.registry.binding is None or account is None:
            self._enter(RegistrationState.NETWORK_INVALID)
            return RegistrationResult(name, RegistrationState.NETWORK_INVALID)

        self._enter(RegistrationState.EXISTENCE_CHECKING)
        if await self.registry.name_exists(account, name):
            return await self._resolve_conflict(name)

        self._enter(RegistrationState.SUBMITTING)
        try:
            saved = await self.registry.set_name(self.session.state.account, name)
        except Exception:
            log.warning("set_name_error", name=name, exc_info=True)
            saved = False

        if not saved:
            self._enter(RegistrationState.FAILED)
            return RegistrationResult(name, RegistrationState.FAILED)

        self._enter(RegistrationState.CONFIRMED)
        await self.refresh_name()
        return RegistrationResult(name, RegistrationState.CONFIRMED)

    async def _resolve_conflict(self, name: str) -> RegistrationResult:
        self._enter(RegistrationState.CONFLICT_RESOLVING)
        await self.prompt.notify_conflict(name)

        candidates = await self.suggestions.suggest(name)
        if not candidates:
            self._enter(RegistrationState.CANCELLED)
            return RegistrationResult(name, RegistrationState.CANCELLED)

        selected = await self.prompt.choose(name, candidates)
        if selected and selected in candidates:
            self.pending_name = selected
            return RegistrationResult(
                name, RegistrationState.CONFLICT_RESOLVING, candidates, selected
            )

        self._enter(RegistrationState.CANCELLED)
        return RegistrationResult(name, RegistrationState.CANCELLED, candidates)

    async def _reconcile_active(self) -> bool:
        """Reconcile the wallet's chain, then re-read it once the switch settled."""
        ok = await self.reconciler.reconcile(
            self.session.state.chain_id, self.registry.required_chain_id
        )
        if ok and self.session.provider is not None:
            chain_id = await self.session.get_active_chain_id()
            if chain_id is not None:
                self.session.apply(NetworkChanged(chain_id))
        return ok

    # ------------------------------------------------------------------
    # Displayed state
    # ------------------------------------------------------------------

    def on_display(self, listener: DisplayListener) -> None:
        self._display_listeners.append(listener)

    def _update_display(self, **changes: str) -> None:
        display = replace(self.display, **changes)
        if display == self.display:
            return
        self.display = display
        for listener in list(self._display_listeners):
            listener(display)

    def refresh_network(self) -> None:
        chain_id = self.session.state.chain_id
        self._update_display(network=self.catalog.lookup(chain_id) if chain_id else "")

    async def refresh_balance(self) -> None:
        wei = await self.session.get_balance(self.session.state.account)
        balance = from_wei(wei) if wei is not None else ""
        log.debug("balance", wei=wei, ether=balance)
        self._update_display(balance=balance)

    async def refresh_name(self) -> None:
        try:
            name = await self.registry.read_name(self.session.state.account)
        except (ProviderError, ContractError) as exc:
            log.warning("refresh_name_failed", error=str(exc))
            name = ""
        log.debug("refresh_name", name=name)
        self._update_display(name=name)

    async def refresh(self) -> None:
        self.refresh_network()
        await self.refresh_balance()
        await self.refresh_name()

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Load the catalog, authorize, subscribe, reconcile and fill the display."""
        await self.catalog.load()
        await self.session.connect()
        self.session.apply(NetworkChanged(await self.session.get_active_chain_id()))
        self.session.subscribe()
        await self._reconcile_active()
        await self.refresh()

    async def handle_event(self, event: SessionEvent) -> None:
        if not self.session.apply(event):
            return
        if isinstance(event, AccountsChanged):
            await self.refresh_balance()
            await self.refresh_name()
            return

        self.refresh_network()
        await self._reconcile_active()
        self.refresh_network()
        await self.refresh_balance()
        await self.refresh_name()

    async def run(self) -> None:
        """Apply queued wallet events forever."""
        while True:
            event = await self.session.events.get()
            try:
                await self.handle_event(event)
            except Exception:
                log.error("session_event_error", event=repr(event), exc_info=True)
