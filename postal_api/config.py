import os
from typing import Mapping, NamedTuple, Optional

from dotenv import load_dotenv
from sqlalchemy.engine import URL

# .env is optional; real environment variables win
load_dotenv()

DB_USER = "postgres"


class ConfigError(RuntimeError):
    """Startup configuration is unusable; the process should exit."""


class DBSettings(NamedTuple):
    host: str
    name: str
    password: str


def load_db_settings(environ: Optional[Mapping[str, str]] = None) -> DBSettings:
    env = os.environ if environ is None else environ
    settings = DBSettings(
        host=env.get("DB_HOST", ""),
        name=env.get("DB_NAME", ""),
        password=env.get("PASSWORD", ""),
    )
    # host/name are not validated here; a bad value fails at connect time
    if not settings.password:
        raise ConfigError("missing or invalid database password")
    return settings


def database_uri(settings: DBSettings) -> str:
    url = URL.create(
        "postgresql+psycopg",
        username=DB_USER,
        password=settings.password,
        host=settings.host or None,
        database=settings.name or None,
        query={"sslmode": "disable"},
    )
    return url.render_as_string(hide_password=False)


class Config:
    APP_ENV = os.environ.get("APP_ENV", "development")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True}

    # HeartRails Geo API
    GEOCODER_URL = os.environ.get("GEOCODER_URL", "https://geoapi.heartrails.com/api/json")
    GEOCODER_TIMEOUT = float(os.environ.get("GEOCODER_TIMEOUT", "10"))
