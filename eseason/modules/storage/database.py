"""Database engine and session management."""
import logging
from typing import Any, Dict

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from ...config.provider import DatabaseConfig

logger = logging.getLogger(__name__)

# Base class for models
Base = declarative_base()


def _engine_kwargs(config: DatabaseConfig) -> Dict[str, Any]:
    kwargs: Dict[str, Any] = {
        "echo": config.echo,
        "pool_pre_ping": True,  # Verify connections before using
    }
    if config.is_sqlite:
        # Single shared connection so in-memory databases survive across sessions
        kwargs.update({
            "poolclass": StaticPool,
            "connect_args": {"check_same_thread": False},
        })
    else:
        kwargs.update({
            "pool_size": config.pool_size,
            "max_overflow": config.max_overflow,
            "pool_recycle": config.pool_recycle,
        })
    return kwargs


def create_db_engine(config: DatabaseConfig) -> Engine:
    """Create a pooled engine. Safe for concurrent use across requests."""
    engine = create_engine(config.url, **_engine_kwargs(config))
    logger.info(f"Database engine created for {engine.url.get_backend_name()}")
    return engine


def create_session_factory(engine: Engine) -> sessionmaker:
    """Session factory; objects stay readable after commit."""
    return sessionmaker(
        bind=engine,
        autoflush=False,
        expire_on_commit=False,
    )


def init_db(engine: Engine) -> None:
    """Create all tables. Use migrations for schema changes in production."""
    from . import models  # noqa: F401  registers tables on Base

    Base.metadata.create_all(bind=engine)
