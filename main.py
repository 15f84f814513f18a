from dotenv import load_dotenv
load_dotenv()

import logging
import time
import uuid
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from api.v1.site_admin import router as v1_site_admin_router
from api.v1.system_log import router as v1_system_log_router
from core.exceptions import NotFound, OperationNotAllowed, StoreFailure, ValidationError

# Setup logging
from core.logging_config import setup_logging, get_logger, LogContext
setup_logging()
logger = get_logger(__name__)

# Setup Sentry error tracking
from core.settings import settings
import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration


def filter_sentry_event(event, hint):
    """Filter events before sending to Sentry"""
    # Skip health checks
    if "transaction" in event and "/health" in event["transaction"]:
        return None

    if "request" in event:
        request = event["request"]
        if "headers" in request:
            request_id = request["headers"].get("x-request-id")
            if request_id:
                event.setdefault("tags", {})["request_id"] = request_id

    return event


if settings.SENTRY_DSN:
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.SENTRY_ENVIRONMENT,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            StarletteIntegration(transaction_style="endpoint"),
            SqlalchemyIntegration(),
        ],
        traces_sample_rate=0.1,
        attach_stacktrace=True,
        send_default_pii=False,
        before_send=filter_sentry_event,
        auto_enabling_integrations=False,
    )
    logger.info_ctx("Sentry error tracking enabled", environment=settings.SENTRY_ENVIRONMENT)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("SiteAdmin API starting up")

    if settings.DB_LOG_ENABLED:
        from services.db_logging import install_db_log_handler
        handler = install_db_log_handler()
        logger.info_ctx("Database log handler installed", level=logging.getLevelName(handler.level))

    yield

    # Shutdown
    if settings.DB_LOG_ENABLED:
        from services.db_logging import remove_db_log_handler
        remove_db_log_handler()

    logger.info("SiteAdmin API shutting down")


def request_culture(request: Request) -> str:
    # First language of Accept-Language, e.g. "nl-NL,nl;q=0.9" -> "nl-NL"
    accept_language = request.headers.get("accept-language", "")
    return accept_language.split(",")[0].split(";")[0].strip()


app = FastAPI(title="SiteAdmin API", version="1.0.0", lifespan=lifespan)


# Logging middleware
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()
    request_id = getattr(request.state, "request_id", "unknown")

    # Skip health checks to reduce noise
    if request.url.path == "/health":
        return await call_next(request)

    with LogContext(
        request_id=request_id,
        path=request.url.path,
        url=str(request.url),
        method=request.method,
        ip_address=request.client.host if request.client else "",
        culture=request_culture(request),
    ):
        logger.info(f"Request started: {request.method} {request.url.path}")

        try:
            response = await call_next(request)
            duration = round(time.time() - start_time, 3)

            with LogContext(status_code=response.status_code, duration=duration):
                if response.status_code >= 500:
                    logger.error(f"Request failed: {request.method} {request.url.path} - {response.status_code} in {duration}s")
                elif response.status_code >= 400:
                    logger.info(f"Request client error: {request.method} {request.url.path} - {response.status_code} in {duration}s")
                else:
                    logger.info(f"Request completed: {request.method} {request.url.path} - {response.status_code} in {duration}s")

            return response

        except Exception:
            duration = round(time.time() - start_time, 3)
            with LogContext(duration=duration):
                logger.exception(f"Request exception: {request.method} {request.url.path}")

            return JSONResponse(
                status_code=500,
                content={
                    "detail": "Internal server error",
                    "request_id": request_id
                }
            )


# Request ID middleware, registered last so it wraps the logging middleware
@app.middleware("http")
async def add_request_id(request: Request, call_next):
    request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
    request.state.request_id = request_id

    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content={"detail": exc.message, "field": exc.field})


@app.exception_handler(NotFound)
async def not_found_handler(request: Request, exc: NotFound):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(OperationNotAllowed)
async def operation_not_allowed_handler(request: Request, exc: OperationNotAllowed):
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.exception_handler(StoreFailure)
async def store_failure_handler(request: Request, exc: StoreFailure):
    request_id = getattr(request.state, "request_id", "unknown")
    logger.error_ctx("Store failure", error_message=str(exc))
    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "request_id": request_id
        }
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    request_id = getattr(request.state, "request_id", "unknown")

    with LogContext(
        request_id=request_id,
        path=request.url.path,
        method=request.method,
    ):
        logger.exception("Unhandled exception")

    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "request_id": request_id
        }
    )

app.include_router(v1_site_admin_router, prefix="/api/v1/site-admin")
app.include_router(v1_system_log_router, prefix="/api/v1/system-log")


@app.get("/health")
async def health():
    return {"status": "healthy", "service": "siteadmin-api"}
