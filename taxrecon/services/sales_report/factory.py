"""Wires the report job to the database, S3 and Slack."""
from __future__ import annotations

from sqlalchemy.orm import Session

from taxrecon.core.clock import Clock, system_clock
from taxrecon.services.notification.slack import SlackNotifier
from taxrecon.storage.s3_client import S3Client, get_s3_client

from .publisher import ReportPublisher
from .rates import RateResolver
from .report_job import IndiaSalesReportJob, Notifier
from .repositories import SqlAlchemyLedgerRepository, SqlAlchemyRateTable


def build_india_sales_report_job(
    db: Session,
    storage: S3Client | None = None,
    notifier: Notifier | None = None,
    clock: Clock = system_clock,
) -> IndiaSalesReportJob:
    return IndiaSalesReportJob(
        ledger=SqlAlchemyLedgerRepository(db),
        resolver=RateResolver(SqlAlchemyRateTable(db)),
        publisher=ReportPublisher(storage, storage_factory=get_s3_client),
        notifier=notifier or SlackNotifier(),
        clock=clock,
    )
