import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException

# Load env before settings are read
if "PYTEST_CURRENT_TEST" not in os.environ:
    load_dotenv()

from fitcore.api import achievements, coins, health, plans  # noqa: E402
from fitcore.core.config import settings, validate_config  # noqa: E402
from fitcore.core.database import check_connection, create_all_tables, get_database_url  # noqa: E402
from fitcore.core.errors import (  # noqa: E402
    AppError,
    app_error_handler,
    http_error_handler,
    unhandled_exception_handler,
)
from fitcore.core.logging import configure_logging  # noqa: E402
from fitcore.core.middleware.request_id import RequestIdMiddleware  # noqa: E402

configure_logging(settings.ENV)
validate_config(strict=getattr(settings, "CONFIG_STRICT", False))


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger = logging.getLogger("fitcore")
    logger.info("Starting fitcore...")
    if get_database_url() and check_connection():
        create_all_tables()
    try:
        yield
    finally:
        logger.info("Stopping fitcore...")


app = FastAPI(title="fitcore", lifespan=lifespan)

app.add_middleware(RequestIdMiddleware)

app.add_exception_handler(AppError, app_error_handler)
app.add_exception_handler(HTTPException, http_error_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

app.include_router(health.router)
app.include_router(achievements.router, tags=["achievements"])
app.include_router(plans.router, tags=["plans"])
app.include_router(coins.router, tags=["coins"])


def run() -> None:
    import uvicorn

    uvicorn.run(
        "fitcore.main:app",
        host=os.getenv("FITCORE_HOST", "0.0.0.0"),
        port=int(os.getenv("FITCORE_PORT", "8000")),
        reload=settings.ENV == "development",
    )


if __name__ == "__main__":
    run()
