from fastapi import FastAPI
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from slowapi.errors import RateLimitExceeded
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from timing_asgi import TimingMiddleware, TimingClient  # type: ignore
from timing_asgi.integrations import StarletteScopeToName  # type: ignore

from rdb.core import config
from rdb.core.database.engine import init_db
from rdb.core.errors import NotAuthorized, ValidationFailed, BusinessRuleViolation
from rdb.core.rate_limit import limiter
from rdb.features.permissions.routes import router as permission_router
from rdb.utils import get_logger


log = get_logger(__name__)
log.info("Initializing server")
app = FastAPI(
    title="RDB Board Permissions",
    description="Per-board role assignments for users and groups",
    version="0.1.0",
    docs_url="/docs" if config.ENABLE_DOCS else None,
    redoc_url="/redoc" if config.ENABLE_DOCS else None,
    openapi_url="/openapi.json" if config.ENABLE_DOCS else None
)
app.state.limiter = limiter


class PrintTimings(TimingClient):
    def timing(self, metric_name, timing, tags):
        log.debug(dict(route=metric_name.removeprefix("main.rdb.features."), timing=timing, tags=tags))


app.add_middleware(TimingMiddleware, client=PrintTimings(), metric_namer=StarletteScopeToName("main", app))

if config.ENABLE_DOCS:
    log.warning("Docs enabled")
if config.ALLOW_ORIGIN:
    log.warning("Setting allow origin to %s", config.ALLOW_ORIGIN)
    origins = [config.ALLOW_ORIGIN]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
if config.SESSION_SECRET == "change-me":
    log.warning("SESSION_SECRET is not set, using the development default")


@app.exception_handler(NotAuthorized)
async def not_authorized_handler(_request: Request, _exc: NotAuthorized) -> Response:
    # Same answer for "no such board" and "no rights on it"
    return Response(status_code=404)


@app.exception_handler(ValidationFailed)
async def validation_failed_handler(_request: Request, exc: ValidationFailed) -> Response:
    log.info("Validation failed %s", exc.errors)
    return JSONResponse(status_code=422, content={"errors": exc.errors})


@app.exception_handler(BusinessRuleViolation)
async def business_rule_handler(_request: Request, exc: BusinessRuleViolation) -> Response:
    log.info("Business rule violated %s", exc.code)
    return JSONResponse(status_code=422, content={"errors": [exc.code]})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(_request: Request, exc: RequestValidationError):
    errors = dict()
    for error in exc.errors():
        if "loc" not in error or "msg" not in error:
            continue
        key = error["loc"][-1]
        if key == "__root__":
            key = "root"
        errors.setdefault(str(key), []).append(error["msg"])
    log.info("Request validation error %s", errors)
    return JSONResponse(status_code=422, content=jsonable_encoder({"errors": errors}))


@app.exception_handler(RateLimitExceeded)
def rate_limit_exceeded_handler(_request: Request, _exc: RateLimitExceeded) -> Response:
    return JSONResponse({"error": "You are going too fast"}, status_code=429)


@app.on_event("startup")
async def startup():
    """Initialize database on application startup."""
    log.info("Initializing database...")
    await init_db()
    log.info("Database initialized successfully")


@app.get("/")
async def root():
    """Root endpoint - API health check."""
    return {
        "message": "RDB Board Permissions API",
        "version": "0.1.0",
        "status": "online",
        "docs": "/docs" if config.ENABLE_DOCS else None,
        "authentication": {
            "info": "Board endpoints require a host-issued Bearer token; "
                    "requests without board ADMIN rights are answered with 404",
            "protected_endpoints": ["/rdb/boards/{board_id}/permissions/*"],
        },
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


app.include_router(
    permission_router,
    prefix="/rdb/boards/{board_id}/permissions",
    tags=["permissions"]
)
