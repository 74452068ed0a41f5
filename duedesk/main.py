# duedesk/main.py

import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from duedesk.api.customers import router as customers_router
from duedesk.api.dashboard import router as dashboard_router
from duedesk.config import get_settings
from duedesk.db.engine import get_engine
from duedesk.db.schema import metadata
from duedesk.errors import DueDeskError
from duedesk.models.dashboard import HealthOut

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger(__name__)

STARTED_AT = time.monotonic()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # same effect as CREATE TABLE IF NOT EXISTS
    metadata.create_all(get_engine())
    logger.info("DueDesk API ready (database: %s)", get_settings().database_url)
    yield


app = FastAPI(
    title="DueDesk Customer Payments API",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(DueDeskError)
def handle_duedesk_error(request: Request, exc: DueDeskError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.message},
    )


@app.exception_handler(RequestValidationError)
def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = []
    for err in exc.errors():
        # drop the leading "body" / "query" / "path"
        field = ".".join(str(part) for part in err["loc"][1:])
        message = err["msg"].removeprefix("Value error, ")
        details.append({"field": field, "message": message})

    first = details[0] if details else {"field": "", "message": "Invalid request"}
    error = f"{first['field']}: {first['message']}" if first["field"] else first["message"]

    return JSONResponse(
        status_code=400,
        content={"success": False, "error": error, "details": details},
    )


@app.get("/api/health", response_model=HealthOut)
def health_check() -> HealthOut:
    return HealthOut(
        status="ok",
        message="DueDesk API is running",
        timestamp=datetime.now(timezone.utc),
        uptime=round(time.monotonic() - STARTED_AT, 3),
    )


app.include_router(customers_router)
app.include_router(dashboard_router)
