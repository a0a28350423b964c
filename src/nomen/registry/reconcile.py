from __future__ import annotations

from typing import Optional

import structlog

from ..errors import ProviderError
from ..utils import chain_id_to_hex, normalize_chain_id
from .session import WalletSession

log = structlog.get_logger()


class NetworkReconciler:
    """Asks the wallet to move to the registry's chain when it is elsewhere."""

    def __init__(self, session: WalletSession) -> None:
        self.session = session

    async def reconcile(
        self,
        active_chain_id: Optional[str],
        required_chain_id: Optional[str],
    ) -> bool:
        """
        Request a network switch if the active chain differs from the required one.

        Returns:
            True when no switch was needed or the switch request succeeded,
            False when the provider rejected or failed it. Never raises.
        """
        active = normalize_chain_id(active_chain_id)
        required = normalize_chain_id(required_chain_id)
        if active is None or required is None or active == required:
            return True

        provider = self.session.provider
        if provider is None:
            return True

        try:
            result = await provider.request_chain_switch(chain_id_to_hex(required))
        except ProviderError as exc:
            log.info("switch_network_error", target=required, code=exc.code, error=exc.message)
            return False
        except Exception:
            log.warning("switch_network_error", target=required, exc_info=True)
            return False

        log.info("switch_network_result", target=required, result=result)
        return True
