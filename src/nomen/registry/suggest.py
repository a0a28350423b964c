"""
Alternative names for a taken one.

Candidate ``i`` is ``<base>_<suffix>`` where the suffix is cut from a fresh
random base-36 fraction string (``"0.k3j9x..."``) after its ``"0."``
prefix. The suffix starts at two characters and grows by one per index,
capped by how much random text is available.
"""

from __future__ import annotations

import asyncio
import random
from typing import Callable, Optional

import structlog

from .client import RegistryClient
from .session import WalletSession

log = structlog.get_logger()

DEFAULT_SUGGESTIONS = 10
MIN_SUFFIX = 2
BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"

RandomSource = Callable[[], str]


def base36_fraction(rng: Optional[random.Random] = None, digits: int = 11) -> str:
    """Render a random fraction in base 36, e.g. ``"0.4fzyo82mvyr"``."""
    value = (rng or random).random()
    out = []
    for _ in range(digits):
        value *= 36
        digit = int(value)
        out.append(BASE36[digit])
        value -= digit
        if not value:
            break
    text = "".join(out).rstrip("0")
    return "0." + text if text else "0"


def suffix_length(index: int, source_length: int) -> int:
    """Suffix length for candidate ``index`` given a random string of ``source_length``."""
    available = max(source_length - 2, 0)
    return MIN_SUFFIX + min(index, available - MIN_SUFFIX)


def candidate_name(base_name: str, index: int, source: str) -> str:
    text = source[2:]
    return f"{base_name}_{text[:suffix_length(index, len(source))]}"


def generate_candidates(
    base_name: str,
    count: int = DEFAULT_SUGGESTIONS,
    source: Optional[RandomSource] = None,
) -> list[str]:
    """Generate ``count`` candidates, drawing one random string per candidate."""
    source = source or base36_fraction
    return [candidate_name(base_name, i, source()) for i in range(count)]


class SuggestionEngine:
    def __init__(
        self,
        registry: RegistryClient,
        session: WalletSession,
        source: Optional[RandomSource] = None,
    ) -> None:
        self.registry = registry
        self.session = session
        self.source = source or base36_fraction

    async def suggest(self, base_name: str, count: int = DEFAULT_SUGGESTIONS) -> list[str]:
        """
        Candidates for ``base_name`` that are free at check time, in generation order.

        All existence checks are in flight together. Any failure, or losing the
        registry binding before every candidate was checked, yields [], which
        means "no suggestions available", not "all taken".
        """
        try:
            names = generate_candidates(base_name, count, self.source)
            account = self.session.state.account
            results = await asyncio.gather(
                *(self.registry.check_name(account, name) for name in names)
            )
            if any(taken is None for taken in results):
                log.info("generate_names_unavailable", base_name=base_name)
                return []
            return [name for name, taken in zip(names, results) if not taken]
        except Exception:
            log.warning("generate_names_error", base_name=base_name, exc_info=True)
            return []
