"""
Sheet Profiler API

FastAPI application serving the spreadsheet analysis dashboard: dataset
profiling, upload parsing and chart series preparation.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import analysis, charts
from .core.config import settings
from .middleware import (
    ErrorHandlerMiddleware,
    RateLimiterMiddleware,
    RequestLoggerMiddleware,
)

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger("sheet_profiler.main")


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
    )

    # Added last runs first: errors wrap everything, then logging, then limits
    app.add_middleware(
        RateLimiterMiddleware,
        max_requests=settings.RATE_LIMIT_REQUESTS,
        window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
    )
    app.add_middleware(RequestLoggerMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(ErrorHandlerMiddleware)

    app.include_router(analysis.router, prefix=settings.API_PREFIX)
    app.include_router(charts.router, prefix=settings.API_PREFIX)
    # The dashboard client posts to the unversioned /analyze path
    app.include_router(analysis.router, include_in_schema=False)

    @app.get("/health")
    async def health():
        return {
            "status": "healthy",
            "app": settings.APP_NAME,
            "version": settings.APP_VERSION,
        }

    logger.info("%s %s ready (api prefix %s)", settings.APP_NAME, settings.APP_VERSION, settings.API_PREFIX)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
