from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from config.settings import settings

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
# quiet third-party debug logs
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("multipart").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


# ✅ middlewares
from middlewares.timing import TimingMiddleware
from middlewares.error_handler import add_error_handlers

# ✅ routers
from routers import attendance, dashboard, public, reports, students

from database.db import init_db

app = FastAPI(
    title=settings.APP_TITLE,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
)

# ✅ CORS (React frontend)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ✅ latency header X-Latency-Ms
app.add_middleware(TimingMiddleware)

# ✅ global error handlers (uniform JSON error body)
add_error_handlers(app)

# ✅ /api prefix
app.include_router(students.router,    prefix="/api")
app.include_router(attendance.router,  prefix="/api")
app.include_router(dashboard.router,   prefix="/api")
app.include_router(reports.router,     prefix="/api")
app.include_router(public.router,      prefix="/api")   # no auth


# ✅ health check
@app.get("/api/health")
def health_check():
    return {"ok": True}


@app.on_event("startup")
def _create_tables():
    init_db()
    logger.info("%s %s started (env=%s)", settings.APP_TITLE, settings.APP_VERSION, settings.ENV)


# ✅ root
@app.get("/")
def root():
    return {"message": settings.APP_TITLE}
