from fastapi import FastAPI

from taxrecon.api.routes_health import router as health_router
from taxrecon.api.routes_metrics import router as metrics_router
from taxrecon.api.routes_reports import router as reports_router
from taxrecon.core.config import settings
from taxrecon.core.errors import register_error_handlers
from taxrecon.core.logger import init_logging
from taxrecon.core.monitoring import init_monitoring


def create_app() -> FastAPI:
    init_logging()
    init_monitoring()

    # Disable interactive docs in production
    is_production = settings.ENV.lower() == "prod"
    app = FastAPI(
        title=settings.APP_NAME,
        debug=False,
        docs_url=None if is_production else "/docs",
        redoc_url=None if is_production else "/redoc",
        openapi_url=None if is_production else "/openapi.json",
    )
    register_error_handlers(app)
    app.include_router(reports_router, prefix="/internal", tags=["reports"])
    app.include_router(metrics_router, tags=["metrics"])
    app.include_router(health_router)
    return app


app = create_app()
