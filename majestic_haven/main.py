import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from .config import settings
from .db import SessionLocal, ensure_schema
from .limiter import limiter
from .routers import api, bookings_views, public_views, rooms_views
from .services.seed import seed_sample_rooms
from .templating import TEMPLATES_DIR

# --- Logging configuration ---
_level = logging.DEBUG if getattr(settings, "DEBUG", False) else logging.INFO
logging.basicConfig(
    level=_level,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
# Align uvicorn loggers with our level (useful under Docker Compose)
for _name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
    logging.getLogger(_name).setLevel(_level)
logger = logging.getLogger("majestic_haven.startup")
logger.info("Starting %s (DEBUG=%s)", settings.APP_NAME, getattr(settings, "DEBUG", False))

@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Runs startup tasks: schema creation and optional sample data."""
    logger.info("Running startup tasks...")
    if settings.AUTO_CREATE_SCHEMA:
        ensure_schema()
    if settings.SEED_SAMPLE_ROOMS:
        db = SessionLocal()
        try:
            seed_sample_rooms(db)
        finally:
            db.close()
    logger.info("Startup tasks complete.")
    yield


app = FastAPI(
    title=settings.APP_NAME,
    lifespan=lifespan,
    version="0.1.0",
    description=(
        f"{settings.APP_NAME}: browse rooms, check availability and book a stay.\n\n"
        "Swagger UI lists the JSON API under the 'api' tag (/api/v1)."
    ),
    openapi_tags=[
        {
            "name": "api",
            "description": (
                "JSON API over rooms, availability and bookings. "
                "Room catalogue changes and booking edits need the X-Admin-Key header."
            ),
        }
    ],
)

# Session cookie carries flash messages between redirects
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.SECRET_KEY,
    session_cookie=settings.SESSION_COOKIE_NAME,
    max_age=settings.SESSION_MAX_AGE_DAYS * 24 * 60 * 60,  # days in seconds
    https_only=settings.ENVIRONMENT == "production",
)

# Add the limiter to the app state
app.state.limiter = limiter
# Add the exception handler for rate limit exceeded errors
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)


@app.exception_handler(StarletteHTTPException)
async def not_found_handler(request: Request, exc: StarletteHTTPException):
    """Catch-all 404 page for the website; the JSON API keeps JSON errors."""
    if exc.status_code == 404 and not request.url.path.startswith("/api/"):
        return public_views.not_found_page(request)
    return await http_exception_handler(request, exc)


app.include_router(public_views.router)
app.include_router(rooms_views.router)
app.include_router(bookings_views.router)
app.include_router(api.router)

app.mount("/static", StaticFiles(directory=str(TEMPLATES_DIR.parent / "static"), check_dir=False), name="static")

@app.get("/healthz")
@limiter.exempt
def healthz():
    return {"status": "ok"}
