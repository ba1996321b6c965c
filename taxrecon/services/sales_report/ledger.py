"""Transaction ledger access and the India report inclusion rules.

``LedgerRepository`` is the only seam between the report and the storage engine.
``select_transactions`` applies the inclusion/exclusion predicates in Python so the
rules hold no matter how much (or how little) the repository pre-filters.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Iterator, Optional, Protocol

from taxrecon.utils.jurisdictions import INDIA_COUNTRY_NAME

from .period_utils import ReportingPeriod

logger = logging.getLogger(__name__)

COMPLETED_STATE = "successful"


@dataclass(frozen=True)
class TransactionRecord:
    """Read-only view of a completed sale."""

    id: int
    external_id: str
    created_at: datetime
    country: Optional[str]
    ip_country: Optional[str]
    ip_state: Optional[str]
    price_cents: int
    quantity: int
    tax_cents: int
    state: str
    refunded: bool = False
    business_vat_id: Optional[str] = None
    zip_code: Optional[str] = None

    @property
    def effective_country(self) -> Optional[str]:
        """Billing country, or the geo-IP country when billing country is unknown."""
        return self.country or self.ip_country

    @property
    def is_business_purchase(self) -> bool:
        return bool(self.business_vat_id and self.business_vat_id.strip())


class LedgerRepository(Protocol):
    def list_transactions(self, period: ReportingPeriod, country: str) -> Iterable[TransactionRecord]: ...


def select_transactions(
    ledger: LedgerRepository,
    period: ReportingPeriod,
    country: str = INDIA_COUNTRY_NAME,
) -> Iterator[TransactionRecord]:
    """Yield transactions that belong in the consumer-tax report for ``period``.

    Included: created inside the period (UTC), attributed to ``country``, successful.
    Excluded: refunded purchases and purchases carrying a business tax id.
    """
    for record in ledger.list_transactions(period, country):
        if not period.contains(record.created_at):
            continue
        if record.effective_country != country:
            continue
        if record.state != COMPLETED_STATE:
            continue
        if record.refunded:
            logger.debug("Skipping refunded purchase %s", record.external_id)
            continue
        if record.is_business_purchase:
            logger.debug("Skipping business purchase %s", record.external_id)
            continue
        yield record


def sort_transactions(records: Iterable[TransactionRecord]) -> list[TransactionRecord]:
    """Order by creation time, then ledger id, independent of ledger return order."""
    return sorted(records, key=lambda r: (r.created_at, r.id))
