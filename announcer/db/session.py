from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from announcer.core.settings import get_settings

_session_factory = None


def get_session_factory() -> sessionmaker:
    """Build the engine and session factory on first use from ``DATABASE_URL``."""
    global _session_factory
    if _session_factory is None:
        engine = create_engine(get_settings().database_url, pool_pre_ping=True)
        _session_factory = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    return _session_factory
