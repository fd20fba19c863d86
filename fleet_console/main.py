import importlib
import logging
import uuid

import httpx
import sentry_sdk
from fastapi import FastAPI, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from sentry_sdk.integrations.asgi import SentryAsgiMiddleware

from fleet_console.config import settings
from fleet_console.logging_setup import TRACE_ID_CTX, setup_logging
from fleet_console.services.api_client import ApiError, SessionExpired
from fleet_console.validation import FormError, error_body, field_errors

logger = logging.getLogger(__name__)

app = FastAPI(title=settings.APP_NAME)

# initialize logging and Sentry
setup_logging(settings.LOG_LEVEL, service=settings.APP_NAME)
if settings.SENTRY_DSN:
    sentry_sdk.init(dsn=settings.SENTRY_DSN)
    app.add_middleware(SentryAsgiMiddleware)


@app.middleware("http")
async def add_trace_id(request: Request, call_next):
    trace_id = request.headers.get("x-trace-id") or str(uuid.uuid4())
    TRACE_ID_CTX.set(trace_id)
    response = await call_next(request)
    response.headers["X-Trace-Id"] = trace_id
    return response


@app.exception_handler(SessionExpired)
async def session_expired_handler(request: Request, exc: SessionExpired):
    return JSONResponse(
        status_code=401,
        content={"message": exc.message, "redirect": "/login", "redirectDelayMs": settings.LOGIN_REDIRECT_DELAY_MS},
    )


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    # client errors (404, 409, ...) keep their status; everything else is a bad gateway
    status_code = exc.status if exc.status and 400 <= exc.status < 500 else 502
    return JSONResponse(status_code=status_code, content={"message": exc.message, "retryable": True})


@app.exception_handler(FormError)
async def form_error_handler(request: Request, exc: FormError):
    return JSONResponse(status_code=422, content=error_body(exc.errors))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=422, content=jsonable_encoder(error_body(field_errors(exc.errors()))))


# (module, mount prefix) of each console page
MODULES = [
    ("buses", "/buses"),
    ("trips", "/trips"),
    ("monthly_fees", "/monthly-fees"),
    ("expenses", "/expenses"),
    ("routes", "/routes"),
    ("route_sections", "/route-sections"),
    ("stops", "/stops"),
    ("sections", "/sections"),
    ("tickets", "/tickets"),
    ("day_end", "/day-end"),
]


for mod, prefix in MODULES:
    pkg = importlib.import_module(f"fleet_console.modules.{mod}.router")
    app.include_router(pkg.router, prefix=prefix)


@app.get("/")
async def root():
    return {"app": settings.APP_NAME, "status": "ok"}


@app.get("/metrics")
async def metrics():
    content = generate_latest()
    return Response(content=content, media_type=CONTENT_TYPE_LATEST)


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/ready")
async def ready():
    # readiness: the fleet backend answers at all
    try:
        async with httpx.AsyncClient(base_url=settings.UPSTREAM_API_URL, timeout=settings.UPSTREAM_TIMEOUT_SECONDS) as client:
            await client.get("/")
    except httpx.HTTPError as exc:
        logger.warning("Fleet backend unreachable: %s", exc)
        return Response(status_code=503, content="fleet backend unavailable")
    return {"status": "ready"}
