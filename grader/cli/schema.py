from __future__ import annotations

import logging

import alembic.command
import alembic.config
import sqlalchemy

import grader.lib.cli as click
from grader.core import di
from grader.storage.table import metadata

logger = logging.getLogger(__name__)


@click.group("schema")
def schema(): ...


@schema.command()
@click.option("--stamp/--no-stamp", default=True, help="mark the new database as up to date with the migrations")
@di.inject
def create(
    stamp: bool,
    engine: sqlalchemy.Engine = di.Provide["storage.persistent.engine"],
    alembic_conf: alembic.config.Config = di.Provide["storage.persistent.alembic_config"],
):
    """Create every table directly from the table definitions."""
    metadata.create_all(engine)
    logger.info("created schema", extra={"tables": sorted(metadata.tables)})
    if stamp:
        alembic.command.stamp(alembic_conf, "head")


@schema.command()
@click.option("--verbose", "-v", is_flag=True, default=False)
@di.inject
def current(verbose: bool, alembic_conf: alembic.config.Config = di.Provide["storage.persistent.alembic_config"]):
    alembic.command.current(alembic_conf, verbose=verbose)


@schema.command()
@click.argument("message")
@di.inject
def generate(message: str, alembic_conf: alembic.config.Config = di.Provide["storage.persistent.alembic_config"]):
    alembic.command.revision(alembic_conf, message, autogenerate=True)


@schema.command()
@click.argument("revision", default="head")
@di.inject
def up(revision: str, alembic_conf: alembic.config.Config = di.Provide["storage.persistent.alembic_config"]):
    alembic.command.upgrade(alembic_conf, revision)


@schema.command()
@click.argument("revision")
@di.inject
def down(revision: str, alembic_conf: alembic.config.Config = di.Provide["storage.persistent.alembic_config"]):
    alembic.command.downgrade(alembic_conf, revision)


@schema.command()
@click.option("--verbose", "-v", is_flag=True, default=False)
@di.inject
def history(verbose: bool, alembic_conf: alembic.config.Config = di.Provide["storage.persistent.alembic_config"]):
    alembic.command.history(alembic_conf, verbose=verbose, indicate_current=True)


@schema.command()
@click.argument("revision")
@di.inject
def stamp(revision: str, alembic_conf: alembic.config.Config = di.Provide["storage.persistent.alembic_config"]):
    alembic.command.stamp(alembic_conf, revision)
