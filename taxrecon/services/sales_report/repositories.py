"""SQLAlchemy implementations of the ledger and rate table seams."""
from __future__ import annotations

import logging
from datetime import timezone
from decimal import Decimal
from typing import Iterator, Optional

from sqlalchemy import and_, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from taxrecon.core.exceptions import LedgerQueryError
from taxrecon.models.models import Purchase, PurchaseState, ZipTaxRate

from .ledger import TransactionRecord
from .period_utils import ReportingPeriod
from .rates import JurisdictionRate

logger = logging.getLogger(__name__)


class SqlAlchemyLedgerRepository:
    """Streams purchases for a period straight from the ledger tables."""

    def __init__(self, db: Session, batch_size: int = 500):
        self.db = db
        self.batch_size = batch_size

    def list_transactions(self, period: ReportingPeriod, country: str) -> Iterator[TransactionRecord]:
        try:
            query = (
                self.db.query(Purchase)
                .filter(
                    and_(
                        Purchase.created_at >= period.start,
                        Purchase.created_at < period.end,
                        Purchase.purchase_state == PurchaseState.SUCCESSFUL.value,
                        or_(
                            Purchase.country == country,
                            and_(Purchase.country.is_(None), Purchase.ip_country == country),
                        ),
                    )
                )
                .order_by(Purchase.id)
                .yield_per(self.batch_size)
            )
            for purchase in query:
                yield self._to_record(purchase)
        except SQLAlchemyError as exc:
            logger.exception("Ledger query failed for %s: %s", period.label, exc)
            raise LedgerQueryError(
                f"Failed to query purchases for {period.label}: {exc}",
                details={"month": period.month, "year": period.year},
            ) from exc

    @staticmethod
    def _to_record(purchase: Purchase) -> TransactionRecord:
        if purchase.price_cents is None or purchase.created_at is None:
            raise LedgerQueryError(
                f"Purchase {purchase.external_id} is missing price or date",
                details={"external_id": purchase.external_id},
            )
        created_at = purchase.created_at
        # SQLite drops tzinfo; stored values are UTC
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        return TransactionRecord(
            id=purchase.id,
            external_id=purchase.external_id,
            created_at=created_at,
            country=purchase.country,
            ip_country=purchase.ip_country,
            ip_state=purchase.ip_state,
            price_cents=purchase.price_cents,
            quantity=purchase.quantity or 1,
            tax_cents=purchase.tax_cents or 0,
            state=purchase.purchase_state,
            refunded=bool(purchase.refunded),
            business_vat_id=purchase.business_vat_id,
            zip_code=purchase.zip_code,
        )


class SqlAlchemyRateTable:
    """Reads the ``zip_tax_rates`` table; soft-deleted rows are ignored and the newest row wins."""

    def __init__(self, db: Session):
        self.db = db

    def find(
        self, country: str, state: Optional[str], zip_code: Optional[str]
    ) -> Optional[JurisdictionRate]:
        conditions = [ZipTaxRate.country == country, ZipTaxRate.deleted_at.is_(None)]
        conditions.append(ZipTaxRate.state.is_(None) if state is None else ZipTaxRate.state == state)
        conditions.append(ZipTaxRate.zip_code.is_(None) if zip_code is None else ZipTaxRate.zip_code == zip_code)
        try:
            row = (
                self.db.query(ZipTaxRate)
                .filter(and_(*conditions))
                .order_by(ZipTaxRate.id.desc())
                .first()
            )
        except SQLAlchemyError as exc:
            logger.exception("Rate lookup failed for %s/%s/%s: %s", country, state, zip_code, exc)
            raise LedgerQueryError(
                f"Failed to read tax rates for {country}: {exc}",
                details={"country": country, "state": state, "zip_code": zip_code},
            ) from exc
        if row is None:
            return None
        return JurisdictionRate(
            country=row.country,
            state=row.state,
            zip_code=row.zip_code,
            combined_rate=Decimal(str(row.combined_rate)),
            is_seller_responsible=bool(row.is_seller_responsible),
        )
