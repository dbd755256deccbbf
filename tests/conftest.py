from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session, sessionmaker

from regsync.adapters.sqlalchemy import start_mappers
from regsync.adapters.sqlalchemy.migrations import upgrade_head
from regsync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyCompanyUnitOfWork,
    shutdown,
    startup,
)
from tests.helpers.companies import make_company, make_officer, make_shareholder
from tests.helpers.unit_of_work import CompanyStore

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    start_mappers()
    upgrade_head(engine=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_session(sqlite_engine: Engine) -> Iterator[Session]:
    session_factory = sessionmaker(bind=sqlite_engine, future=True, expire_on_commit=False)
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[], SqlAlchemyCompanyUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)

    def factory() -> SqlAlchemyCompanyUnitOfWork:
        return SqlAlchemyCompanyUnitOfWork()

    try:
        yield factory
    finally:
        shutdown()


@pytest.fixture
def company_store() -> CompanyStore:
    """A store holding one company whose rosters agree with ``make_raw_extraction``."""

    company = make_company()
    store = CompanyStore()
    store.add(company, make_officer(company), make_shareholder(company))
    return store
