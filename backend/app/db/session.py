from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from app.core.config import Settings, get_settings


def build_engine(settings: Settings) -> Engine:
    timeout = max(1, settings.store_timeout_seconds)
    if settings.database_url.startswith("sqlite"):
        # sqlite waits on locked files for `timeout` seconds before raising.
        return create_engine(
            settings.database_url,
            connect_args={"check_same_thread": False, "timeout": timeout},
        )
    return create_engine(
        settings.database_url,
        pool_pre_ping=True,
        pool_timeout=timeout,
        connect_args={
            "connect_timeout": timeout,
            "options": f"-c statement_timeout={timeout * 1000}",
        },
    )


engine = build_engine(get_settings())
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
