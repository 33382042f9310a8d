# postal_api/__main__.py
from __future__ import annotations

import logging

import click
from sqlalchemy.exc import SQLAlchemyError

from . import create_app
from .config import ConfigError
from .dao import access_log_dao

log = logging.getLogger("postal_api")


@click.group()
def cli() -> None:
    """Postal code lookup service."""


@cli.command("serve")
@click.option("--host", default="0.0.0.0", show_default=True)
@click.option("--port", default=8080, show_default=True, type=int)
def serve(host: str, port: int) -> None:
    """Check the database and start the HTTP server."""
    try:
        app = create_app()
    except ConfigError as e:
        click.echo(f"configuration error: {e}", err=True)
        raise SystemExit(1)

    with app.app_context():
        try:
            access_log_dao.ping()
        except SQLAlchemyError as e:
            log.critical("Failed to connect to database: %s", e)
            raise SystemExit(1)

    app.run(host=host, port=port, threaded=True)


if __name__ == "__main__":
    cli()
