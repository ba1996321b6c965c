"""India sales report run: validate, select, compute, render, publish, notify."""
from __future__ import annotations

import enum
import logging
import time
from dataclasses import dataclass
from typing import Optional, Protocol

from taxrecon import metrics
from taxrecon.core.clock import Clock, system_clock
from taxrecon.services.notification.slack import ReportOutcome
from taxrecon.utils.jurisdictions import INDIA_COUNTRY_CODE, INDIA_COUNTRY_NAME

from .computations import ReportRow, compute_row
from .ledger import LedgerRepository, TransactionRecord, select_transactions, sort_transactions
from .period_utils import ReportingPeriod, resolve_period
from .publisher import ReportArtifact, ReportPublisher
from .rates import JurisdictionRate, RateResolver
from .report_csv import render_csv

logger = logging.getLogger(__name__)

NOTIFICATION_SUBJECT = "India Sales Reporting"


class JobStage(str, enum.Enum):
    VALIDATING = "validating"
    FILTERING = "filtering"
    COMPUTING = "computing"
    RENDERING = "rendering"
    PUBLISHING = "publishing"
    NOTIFYING = "notifying"
    FAILED = "failed"
    NOTIFYING_FAILURE = "notifying_failure"
    DONE = "done"


class Notifier(Protocol):
    def notify(self, outcome: ReportOutcome) -> bool: ...


@dataclass(frozen=True)
class ReportResult:
    period: ReportingPeriod
    artifact: ReportArtifact
    row_count: int

    @property
    def url(self) -> str:
        return self.artifact.url


class IndiaSalesReportJob:
    """Builds and publishes the monthly India sales tax reconciliation report.

    An invalid period is raised straight to the caller with no notification.
    Any later failure is logged, announced once on the failure channel and then
    re-raised so the scheduler can apply its own retry policy.
    """

    def __init__(
        self,
        ledger: LedgerRepository,
        resolver: RateResolver,
        publisher: ReportPublisher,
        notifier: Notifier,
        clock: Clock = system_clock,
    ):
        self.ledger = ledger
        self.resolver = resolver
        self.publisher = publisher
        self.notifier = notifier
        self.clock = clock
        self.stage: Optional[JobStage] = None
        self.stages: list[JobStage] = []

    def run(self, month: Optional[int] = None, year: Optional[int] = None) -> ReportResult:
        self.stages = []
        self._enter(JobStage.VALIDATING)
        period = resolve_period(month, year, clock=self.clock)
        logger.info("Starting India sales report for %s", period.label)

        started = time.monotonic()
        try:
            self._enter(JobStage.FILTERING)
            records = sort_transactions(select_transactions(self.ledger, period, INDIA_COUNTRY_NAME))

            self._enter(JobStage.COMPUTING)
            rows = self._compute_rows(records)

            self._enter(JobStage.RENDERING)
            body = render_csv(rows)

            self._enter(JobStage.PUBLISHING)
            artifact = self.publisher.publish(body, period)
        except Exception as exc:
            failed_stage = self.stage
            self._enter(JobStage.FAILED)
            logger.exception(
                "India sales report for %s failed during %s: %s",
                period.label, failed_stage.value if failed_stage else "unknown", exc,
            )
            metrics.report_run_failed(time.monotonic() - started)
            self._enter(JobStage.NOTIFYING_FAILURE)
            self._notify(
                ReportOutcome(
                    subject=NOTIFICATION_SUBJECT,
                    success=False,
                    message=f"India sales report for {period.label} failed: {exc}",
                )
            )
            self._enter(JobStage.DONE)
            raise

        metrics.report_run_succeeded(len(rows), time.monotonic() - started)
        self._enter(JobStage.NOTIFYING)
        self._notify(
            ReportOutcome(
                subject=NOTIFICATION_SUBJECT,
                success=True,
                message=(
                    f"India sales report for {period.label} is ready "
                    f"({len(rows)} transactions) - {artifact.url}"
                ),
            )
        )
        self._enter(JobStage.DONE)
        logger.info("India sales report for %s published to %s", period.label, artifact.key)
        return ReportResult(period=period, artifact=artifact, row_count=len(rows))

    def _compute_rows(self, records: list[TransactionRecord]) -> list[ReportRow]:
        cache: dict[tuple[Optional[str], Optional[str]], Optional[JurisdictionRate]] = {}
        rows = []
        for record in records:
            key = (record.ip_state, record.zip_code)
            if key not in cache:
                cache[key] = self._rate_for(record)
            rows.append(compute_row(record, cache[key]))
        return rows

    def _rate_for(self, record: TransactionRecord) -> Optional[JurisdictionRate]:
        # Unrecognised states resolve to None and are reported at a zero rate
        rate = self.resolver.resolve(INDIA_COUNTRY_CODE, record.ip_state, record.zip_code)
        if rate is None:
            logger.warning("No tax rate found for purchase %s; reporting zero rate", record.external_id)
        return rate

    def _notify(self, outcome: ReportOutcome) -> None:
        try:
            delivered = self.notifier.notify(outcome)
        except Exception as exc:  # noqa: BLE001 - notification is best effort
            logger.error("Report notification failed: %s", exc)
            return
        if not delivered:
            logger.warning("Report notification not delivered: %s", outcome.message)

    def _enter(self, stage: JobStage) -> None:
        self.stage = stage
        self.stages.append(stage)
        logger.debug("India sales report stage -> %s", stage.value)
