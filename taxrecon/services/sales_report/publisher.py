"""Publishes rendered reports to object storage."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from taxrecon.core.config import settings
from taxrecon.core.exceptions import PublishError
from taxrecon.storage.s3_client import S3Client, StorageError, get_s3_client

from .period_utils import ReportingPeriod
from .report_csv import CONTENT_TYPE

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReportArtifact:
    key: str
    body: bytes
    url: str


def report_key(period: ReportingPeriod, prefix: str | None = None) -> str:
    """Storage key for a period. Same period, same key, so reruns overwrite."""
    prefix = (settings.REPORTS_S3_PREFIX if prefix is None else prefix).strip("/")
    filename = f"india-sales-report-{period.year:04d}-{period.month:02d}.csv"
    return f"{prefix}/{filename}" if prefix else filename


class ReportPublisher:
    """Uploads a rendered report and returns its presigned link.

    Without an explicit ``storage`` the client is built on first publish, so an
    unreachable bucket surfaces as a ``PublishError`` from ``publish``.
    """

    def __init__(
        self,
        storage: S3Client | None = None,
        prefix: str | None = None,
        storage_factory: Callable[[], S3Client] = get_s3_client,
    ):
        self.storage = storage
        self.prefix = prefix
        self.storage_factory = storage_factory

    def publish(self, body: bytes, period: ReportingPeriod) -> ReportArtifact:
        key = report_key(period, self.prefix)
        try:
            if self.storage is None:
                self.storage = self.storage_factory()
            self.storage.put_bytes(body, key, content_type=CONTENT_TYPE)
            url = self.storage.presigned_url(key)
        except StorageError as exc:
            logger.exception("Report upload failed for %s: %s", key, exc)
            raise PublishError(key, str(exc)) from exc
        logger.info("Published %s (%s bytes) for %s", key, len(body), period.label)
        return ReportArtifact(key=key, body=body, url=url)
