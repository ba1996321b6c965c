"""
Internal Report Routes.

On-demand trigger for the India sales report. The work runs on the Celery worker;
this endpoint only validates the period and enqueues the task.
"""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel

from taxrecon.api.dependencies import require_internal_token
from taxrecon.services.sales_report.period_utils import resolve_period
from taxrecon.workers.tasks import create_india_sales_report

logger = logging.getLogger(__name__)
router = APIRouter(dependencies=[Depends(require_internal_token)])


class ReportEnqueuedOut(BaseModel):
    task_id: str
    month: int
    year: int


@router.post(
    "/reports/india-sales",
    response_model=ReportEnqueuedOut,
    status_code=status.HTTP_202_ACCEPTED,
)
def enqueue_india_sales_report(
    month: int | None = Query(None, description="Month (1-12); defaults to last month"),
    year: int | None = Query(None, description="Year (2014-3200); defaults to last month's year"),
):
    """Queue an India sales report run. Invalid periods are rejected before queueing."""
    period = resolve_period(month, year)
    task = create_india_sales_report.delay(period.month, period.year)
    logger.info("Queued India sales report for %s task_id=%s", period.label, task.id)
    return {"task_id": task.id, "month": period.month, "year": period.year}
