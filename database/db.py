import logging

from sqlalchemy import create_engine               # SQLAlchemy engine factory
from sqlalchemy.orm import declarative_base        # base class for models
from sqlalchemy.orm import sessionmaker            # session factory

from config.settings import settings               # ✅ environment settings

logger = logging.getLogger(__name__)


def _connect_args(url: str) -> dict:
    # SQLite connections are shared across FastAPI's worker threads
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


# ✅ engine built from the configured DB URL
engine = create_engine(
    settings.DATABASE_URL,
    connect_args=_connect_args(settings.DATABASE_URL),
    pool_pre_ping=True,
)

# ✅ session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# ✅ declarative base shared by every model
Base = declarative_base()


# ✅ per-request DB session (FastAPI dependency)
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None):
    """Create missing tables. Models must be imported so they register on Base."""
    from models import attendance, students  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
    logger.info("database tables ensured")
