import os
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base

# Default to a local SQLite file if not specified
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///crowdsense.db")

Base = declarative_base()

def make_engine(url: str = DATABASE_URL) -> Engine:
    connect_args = {}
    if url.startswith("sqlite"):
        # Sessions are used from FastAPI worker threads
        connect_args["check_same_thread"] = False
    return create_engine(url, pool_pre_ping=True, connect_args=connect_args)

def init_db(bind: Engine):
    """Initialize database tables."""
    # Import models here to ensure they are registered with Base
    from . import models
    Base.metadata.create_all(bind=bind)
