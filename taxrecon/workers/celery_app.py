from __future__ import annotations

from celery import Celery
from celery.schedules import crontab

from taxrecon.core.config import settings
from taxrecon.core.redis_utils import get_ssl_options, prepare_redis_url


def _create_celery() -> Celery:
    redis_url = prepare_redis_url(settings.REDIS_URL)
    ssl_options = get_ssl_options()
    celery = Celery(
        "taxrecon",
        broker=redis_url,
        backend=redis_url,
        include=["taxrecon.workers.tasks"],
    )
    celery.conf.update(
        task_default_queue="default",
        task_serializer="json",
        result_serializer="json",
        accept_content=["json"],
        timezone="UTC",
        enable_utc=True,
        task_always_eager=settings.ENV.lower() in {"test"},
        task_eager_propagates=True,
    )
    if ssl_options:
        celery.conf.update(
            broker_use_ssl=ssl_options,
            redis_backend_use_ssl=ssl_options,
        )
    # Beat schedule (only active outside test env)
    if settings.ENV.lower() not in {"test"} and settings.INDIA_REPORT_ENABLED:
        celery.conf.beat_schedule = {
            "monthly-india-sales-report": {
                "task": "reports.create_india_sales_report",
                "schedule": crontab(minute=0, hour=6, day_of_month=1),  # 06:00 UTC first day
                # No args: the job defaults to the previous calendar month
            }
        }
    return celery


celery_app = _create_celery()
