"""
Database wiring for the scoreboard:
- Read DATABASE_URL from env (.env works locally)
- Build the SQLAlchemy Engine (SQLite for dev/tests, MySQL via PyMySQL if you like)
- SessionLocal factory + get_db() dependency, one session per request
- create_all() so local runs don't need migrations

Only results and stats live here; matches stay in memory.
"""

import os
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase
from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL")
if not DATABASE_URL:
    raise RuntimeError(
        "DATABASE_URL is not set. Add it to your environment or a local .env "
        "(e.g. DATABASE_URL=sqlite:///./digit_duel.db)."
    )

# FastAPI runs sync routes in worker threads; SQLite refuses cross-thread use by default
connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

# pool_pre_ping=True = drop dead connections before handing them out
engine = create_engine(
    DATABASE_URL,
    pool_pre_ping=True,
    echo=False,
    future=True,
    connect_args=connect_args,
)

SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


class Base(DeclarativeBase):
    pass


def get_db() -> Generator:
    """Yield a session for one request and always close it."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_all() -> None:
    """Dev convenience: create the tables if they don't exist."""
    from . import models  # noqa: F401  (registers the tables on Base.metadata)
    Base.metadata.create_all(bind=engine)
