"""Database settings, engine and session handling for the sources store."""

from collections.abc import Iterator
from contextlib import contextmanager
from functools import lru_cache

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy import URL, create_engine, make_url
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from src.paths import ENV_FILE

DRIVER_NAME = "postgresql+psycopg2"


class DatabaseConfig(BaseSettings):
    """Connection settings for the PostgreSQL sources store.

    Loaded from environment variables with the DATABASE_ prefix. A full
    ``DATABASE_URL`` takes precedence over the individual parts.

    :param url: Complete connection URL.
    :param host: Database host.
    :param port: Database port.
    :param user: Database user.
    :param password: Database password.
    :param name: Database name.
    :param echo: Whether SQLAlchemy logs every statement.
    """

    model_config = SettingsConfigDict(
        env_prefix="DATABASE_",
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    url: str | None = Field(default=None, description="Complete connection URL")
    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, ge=1, le=65535, description="Database port")
    user: str = Field(default="app", description="Database user")
    password: SecretStr = Field(default=SecretStr(""), description="Database password")
    name: str = Field(default="newsletter_ingest", description="Database name")
    echo: bool = Field(default=False, description="Log SQL statements")

    def sqlalchemy_url(self) -> URL:
        """Build the SQLAlchemy URL for these settings.

        Credentials are passed as separate parts so special characters in the
        password do not need escaping.

        :returns: The connection URL.
        """
        if self.url:
            return make_url(self.url)

        return URL.create(
            DRIVER_NAME,
            username=self.user,
            password=self.password.get_secret_value() or None,
            host=self.host,
            port=self.port,
            database=self.name,
        )


@lru_cache
def get_database_settings() -> DatabaseConfig:
    """Get the cached database settings.

    :returns: The database configuration.
    """
    return DatabaseConfig()


def get_database_url() -> str:
    """Render the configured connection URL, password included.

    :returns: The database connection URL.
    """
    return get_database_settings().sqlalchemy_url().render_as_string(hide_password=False)


def create_db_engine(config: DatabaseConfig | None = None) -> Engine:
    """Create a SQLAlchemy engine for the sources store.

    :param config: Database settings (loaded from the environment if not provided).
    :returns: A configured SQLAlchemy engine.
    """
    config = config or get_database_settings()
    return create_engine(config.sqlalchemy_url(), echo=config.echo, pool_pre_ping=True)


@lru_cache
def get_engine() -> Engine:
    """Get the process-wide engine.

    :returns: The database engine.
    """
    return create_db_engine()


@lru_cache
def get_session_factory() -> sessionmaker[Session]:
    """Get the process-wide session factory.

    :returns: A sessionmaker bound to the database engine.
    """
    return sessionmaker(bind=get_engine(), expire_on_commit=False)


@contextmanager
def get_session() -> Iterator[Session]:
    """Open a session for one unit of work.

    The session is committed when the block exits cleanly and rolled back if
    it raises. It is always closed.

    :yields: A database session.
    """
    session = get_session_factory()()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
