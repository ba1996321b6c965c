"""Tests for transaction selection rules and the SQLAlchemy ledger."""
from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone

import pytest
from sqlalchemy.exc import OperationalError

from taxrecon.core.exceptions import LedgerQueryError
from taxrecon.services.sales_report.ledger import (
    TransactionRecord,
    select_transactions,
    sort_transactions,
)
from taxrecon.services.sales_report.period_utils import ReportingPeriod
from taxrecon.services.sales_report.repositories import SqlAlchemyLedgerRepository

JUNE_2023 = ReportingPeriod(month=6, year=2023)


def _record(**overrides) -> TransactionRecord:
    data = dict(
        id=1,
        external_id="pur_0001",
        created_at=datetime(2023, 6, 15, tzinfo=timezone.utc),
        country="India",
        ip_country="India",
        ip_state="MH",
        price_cents=1000,
        quantity=1,
        tax_cents=180,
        state="successful",
    )
    data.update(overrides)
    return TransactionRecord(**data)


class ListLedger:
    """Returns whatever it was given; does no filtering of its own."""

    def __init__(self, records):
        self.records = records
        self.calls = []

    def list_transactions(self, period, country):
        self.calls.append((period, country))
        return iter(self.records)


def _ids(records):
    return [r.external_id for r in records]


def test_business_vat_id_is_excluded():
    ledger = ListLedger([
        _record(external_id="consumer"),
        _record(external_id="b2b", business_vat_id="GST123456789"),
    ])
    assert _ids(select_transactions(ledger, JUNE_2023)) == ["consumer"]


def test_blank_business_vat_id_is_not_a_business():
    ledger = ListLedger([_record(business_vat_id="   ")])
    assert len(list(select_transactions(ledger, JUNE_2023))) == 1


def test_refunded_is_excluded():
    ledger = ListLedger([_record(external_id="refunded", refunded=True), _record(external_id="kept")])
    assert _ids(select_transactions(ledger, JUNE_2023)) == ["kept"]


def test_incomplete_purchases_are_excluded():
    ledger = ListLedger([_record(state="in_progress"), _record(state="failed")])
    assert list(select_transactions(ledger, JUNE_2023)) == []


def test_out_of_period_purchases_are_excluded():
    ledger = ListLedger([
        _record(external_id="first", created_at=datetime(2023, 6, 1, tzinfo=timezone.utc)),
        _record(external_id="next-month", created_at=datetime(2023, 7, 1, tzinfo=timezone.utc)),
        _record(external_id="prev-month", created_at=datetime(2023, 5, 31, 23, 59, 59, tzinfo=timezone.utc)),
    ])
    assert _ids(select_transactions(ledger, JUNE_2023)) == ["first"]


def test_ip_country_counts_only_when_billing_country_missing():
    ledger = ListLedger([
        _record(external_id="ip-only", country=None, ip_country="India"),
        _record(external_id="billed-elsewhere", country="United States", ip_country="India"),
    ])
    assert _ids(select_transactions(ledger, JUNE_2023)) == ["ip-only"]


def test_ledger_is_asked_for_period_and_country():
    ledger = ListLedger([])
    list(select_transactions(ledger, JUNE_2023))
    assert ledger.calls == [(JUNE_2023, "India")]


def test_selection_is_lazy():
    ledger = ListLedger([_record()])
    selected = select_transactions(ledger, JUNE_2023)
    assert ledger.calls == []
    next(selected)
    assert len(ledger.calls) == 1


def test_sort_orders_by_date_then_id():
    base = _record()
    records = [
        replace(base, id=3, external_id="c", created_at=datetime(2023, 6, 2, tzinfo=timezone.utc)),
        replace(base, id=2, external_id="b", created_at=datetime(2023, 6, 1, tzinfo=timezone.utc)),
        replace(base, id=1, external_id="a", created_at=datetime(2023, 6, 2, tzinfo=timezone.utc)),
    ]
    assert _ids(sort_transactions(records)) == ["b", "a", "c"]


def test_sqlalchemy_repository_prefilters_period_country_and_state(db_session, purchase_factory):
    purchase_factory(external_id="in-period")
    purchase_factory(external_id="ip-country", country=None)
    purchase_factory(external_id="july", created_at=datetime(2023, 7, 1, tzinfo=timezone.utc))
    purchase_factory(external_id="us", country="United States", ip_country="United States")
    purchase_factory(external_id="pending", purchase_state="in_progress")

    repo = SqlAlchemyLedgerRepository(db_session)
    records = list(repo.list_transactions(JUNE_2023, "India"))

    assert sorted(_ids(records)) == ["in-period", "ip-country"]
    assert all(r.created_at.tzinfo is not None for r in records)


def test_sqlalchemy_repository_maps_columns(db_session, purchase_factory):
    purchase_factory(
        external_id="mapped",
        ip_state="KA",
        zip_code="560001",
        price_cents=2500,
        quantity=3,
        tax_cents=450,
        refunded=None,
        business_vat_id="GST999",
    )
    (record,) = SqlAlchemyLedgerRepository(db_session).list_transactions(JUNE_2023, "India")

    assert record.external_id == "mapped"
    assert record.ip_state == "KA"
    assert record.zip_code == "560001"
    assert (record.price_cents, record.quantity, record.tax_cents) == (2500, 3, 450)
    assert record.refunded is False
    assert record.business_vat_id == "GST999"


def test_sqlalchemy_repository_wraps_database_errors(db_session, monkeypatch):
    def broken_query(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("database is locked"))

    monkeypatch.setattr(db_session, "query", broken_query)
    repo = SqlAlchemyLedgerRepository(db_session)

    with pytest.raises(LedgerQueryError) as excinfo:
        next(iter(repo.list_transactions(JUNE_2023, "India")))
    assert isinstance(excinfo.value.__cause__, OperationalError)
    assert excinfo.value.code == "LED310"
