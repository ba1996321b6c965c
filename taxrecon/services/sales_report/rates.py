"""Jurisdiction rate lookup with zip > state > country precedence."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Protocol

from taxrecon.utils.jurisdictions import INDIA_COUNTRY_CODE, normalize_indian_state

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class JurisdictionRate:
    country: str
    state: Optional[str]
    zip_code: Optional[str]
    combined_rate: Decimal
    is_seller_responsible: bool = False

    @property
    def percent(self) -> Decimal:
        return self.combined_rate * 100


class RateTable(Protocol):
    def find(
        self, country: str, state: Optional[str], zip_code: Optional[str]
    ) -> Optional[JurisdictionRate]:
        """Exact match on all three keys; ``None`` keys match missing values only."""
        ...


class RateResolver:
    """Resolve the applicable rate for a location.

    Lookup order: state + zip, then state only, then the country default.
    A state that is present but not recognised resolves to ``None`` rather than
    being guessed at, and callers report such rows at a zero rate.
    """

    def __init__(self, table: RateTable):
        self.table = table

    def resolve(
        self,
        country: str,
        state: Optional[str] = None,
        zip_code: Optional[str] = None,
    ) -> Optional[JurisdictionRate]:
        country = country.strip().upper()
        state_code: Optional[str] = None
        if state is not None and state.strip():
            state_code = _normalize_state(country, state)
            if state_code is None:
                logger.info("Unrecognised state %r for %s; no state-level rate", state, country)
                return None

        zip_code = zip_code.strip() if zip_code and zip_code.strip() else None

        if state_code and zip_code:
            rate = self.table.find(country, state_code, zip_code)
            if rate is not None:
                return rate
        if state_code:
            rate = self.table.find(country, state_code, None)
            if rate is not None:
                return rate
        return self.table.find(country, None, None)


def _normalize_state(country: str, state: str) -> Optional[str]:
    if country == INDIA_COUNTRY_CODE:
        return normalize_indian_state(state)
    return state.strip().upper()
