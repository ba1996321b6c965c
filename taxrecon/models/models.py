"""Ledger tables read by the report pipeline.

The purchase ledger and the rate table are owned by the storefront; this service
only maps the columns it reads and never writes to them outside of tests.
"""
from __future__ import annotations

import datetime as dt
import enum
from decimal import Decimal

from sqlalchemy import Boolean, DateTime, Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from taxrecon.db.base_class import Base


def utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class PurchaseState(str, enum.Enum):
    IN_PROGRESS = "in_progress"
    SUCCESSFUL = "successful"
    FAILED = "failed"


class Purchase(Base):
    __tablename__ = "purchases"
    __table_args__ = (
        Index("ix_purchases_created_at_state", "created_at", "purchase_state"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    external_id: Mapped[str] = mapped_column(String(64), unique=True, index=True)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    purchase_state: Mapped[str] = mapped_column(String(32), default=PurchaseState.IN_PROGRESS.value)
    country: Mapped[str | None] = mapped_column(String(100), nullable=True)
    ip_country: Mapped[str | None] = mapped_column(String(100), nullable=True)
    ip_state: Mapped[str | None] = mapped_column(String(100), nullable=True)
    zip_code: Mapped[str | None] = mapped_column(String(20), nullable=True)
    # Per-unit price the buyer saw, in minor units
    price_cents: Mapped[int] = mapped_column(Integer, default=0)
    quantity: Mapped[int] = mapped_column(Integer, default=1)
    # Tax collected by the platform, in minor units
    tax_cents: Mapped[int] = mapped_column(Integer, default=0)
    refunded: Mapped[bool | None] = mapped_column(Boolean, nullable=True, default=False)
    business_vat_id: Mapped[str | None] = mapped_column(String(64), nullable=True)


class ZipTaxRate(Base):
    __tablename__ = "zip_tax_rates"

    id: Mapped[int] = mapped_column(primary_key=True)
    country: Mapped[str] = mapped_column(String(2), index=True)
    state: Mapped[str | None] = mapped_column(String(8), nullable=True)
    zip_code: Mapped[str | None] = mapped_column(String(20), nullable=True)
    combined_rate: Mapped[Decimal] = mapped_column(Numeric(8, 6))
    is_seller_responsible: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    deleted_at: Mapped[dt.datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
