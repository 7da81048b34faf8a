from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from prestamistas.core.config import DATABASE_URL

# ---------------------
# SQLAlchemy engine / session / Base
# ---------------------
engine_kwargs = {"echo": False, "pool_pre_ping": True, "future": True}

# sqlite (local runs) has no connection pool sizing
if not DATABASE_URL.startswith("sqlite"):
    engine_kwargs.update(pool_size=5, max_overflow=10)
else:
    engine_kwargs["connect_args"] = {"check_same_thread": False}

engine = create_engine(DATABASE_URL, **engine_kwargs)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
