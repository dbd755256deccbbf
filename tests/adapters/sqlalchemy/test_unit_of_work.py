from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine

from regsync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyCompanyUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)
from tests.helpers.companies import make_company

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy.engine import Engine


@pytest.fixture(autouse=True)
def reset_unit_of_work_state() -> Iterator[None]:
    shutdown()
    yield
    shutdown()


def test_unit_of_work_requires_startup() -> None:
    assert not is_started()
    with pytest.raises(StartupError):
        SqlAlchemyCompanyUnitOfWork()


def test_startup_requires_force_for_reconfiguration() -> None:
    engine_a = create_engine("sqlite+pysqlite:///:memory:", future=True)
    engine_b = create_engine("sqlite+pysqlite:///:memory:", future=True)

    startup(engine=engine_a, force=True)

    with pytest.raises(StartupError):
        startup(engine=engine_b)

    startup(engine=engine_b, force=True)
    assert configured_engine() is engine_b


def test_repositories_require_an_open_unit_of_work(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    uow = SqlAlchemyCompanyUnitOfWork()

    with pytest.raises(StartupError):
        _ = uow.repositories


def test_exception_rolls_back(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    company = make_company()

    with pytest.raises(RuntimeError), SqlAlchemyCompanyUnitOfWork() as uow:
        uow.repositories.companies.add(company)
        uow.session.flush()
        raise RuntimeError("boom")

    with SqlAlchemyCompanyUnitOfWork() as uow:
        assert uow.repositories.companies.get(company.id) is None


def test_uncommitted_work_is_discarded(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    company = make_company()

    with SqlAlchemyCompanyUnitOfWork() as uow:
        uow.repositories.companies.add(company)

    with SqlAlchemyCompanyUnitOfWork() as uow:
        assert uow.repositories.companies.get(company.id) is None
