# app/db.py
"""Database engine and session utilities.

Centralized SQLAlchemy engine creation and session dependency helper for FastAPI.
"""
import os
from dotenv import load_dotenv
from sqlalchemy import create_engine, event, func
from sqlalchemy.orm import sessionmaker, declarative_base
from .utils import escape_like

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./pass_exchange.db")

# Normalize SQLAlchemy URL scheme (SQLAlchemy 2.x doesn't accept 'postgres://')
if DATABASE_URL.startswith("postgres://"):
    DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql+psycopg2://", 1)

if DATABASE_URL.startswith("sqlite"):
    # FastAPI runs sync endpoints in a threadpool
    engine = create_engine(DATABASE_URL, connect_args={"check_same_thread": False})

    @event.listens_for(engine, "connect")
    def _register_casefold(dbapi_conn, connection_record):
        # SQLite's lower() only folds ASCII
        dbapi_conn.create_function(
            "casefold", 1, lambda s: s.casefold() if s is not None else None, deterministic=True
        )
else:
    # tuned pool settings for cloud DB
    engine = create_engine(
        DATABASE_URL,
        pool_size=int(os.getenv("DB_POOL_SIZE", 5)),
        max_overflow=int(os.getenv("DB_MAX_OVERFLOW", 10)),
        pool_pre_ping=True
    )

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def contains_folded(column, text: str, escape: str = "\\"):
    """Case-insensitive substring match of `column` against `text`, Unicode aware."""
    if engine.dialect.name == "sqlite":
        return func.casefold(column).like(f"%{escape_like(text.casefold(), escape)}%", escape=escape)
    return column.ilike(f"%{escape_like(text, escape)}%", escape=escape)
