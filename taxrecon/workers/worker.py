from __future__ import annotations

from taxrecon.core.logger import init_logging
from taxrecon.core.monitoring import init_monitoring
from taxrecon.workers.celery_app import celery_app


def main() -> None:
    """Convenience entrypoint for launching the Celery worker with beat."""
    init_logging()
    init_monitoring()
    celery_app.worker_main(["worker", "--beat", "--loglevel=info"])


if __name__ == "__main__":
    main()
