"""
Database helpers.
Uses SQLAlchemy 2.0 patterns.

Services never own an engine: the application builds one (``build_engine``)
and hands each service a ``Session``.
"""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from entity_service.shared.config.settings import settings


def build_engine(url: str | None = None, **kwargs) -> Engine:
    """
    Create an engine for the configured database.

    SQLite URLs get ``check_same_thread=False`` so that a session can be
    handed between threads of a request-scoped worker.
    """
    url = url or settings.database_url
    if url.startswith("sqlite"):
        connect_args = kwargs.pop("connect_args", {})
        connect_args.setdefault("check_same_thread", False)
        kwargs["connect_args"] = connect_args
    else:
        kwargs.setdefault("pool_pre_ping", True)  # Verify connections before using
        kwargs.setdefault("pool_recycle", 1800)  # Recycle connections after 30 minutes
    kwargs.setdefault("echo", settings.echo_sql)
    return create_engine(url, **kwargs)


def safe_commit(db: Session) -> None:
    """
    Safe commit with automatic rollback on failure.

    Raises the original exception after rolling back.
    """
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
