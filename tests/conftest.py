"""Shared test fixtures.

Statement sets are plain pydantic values; every test gets a fresh copy.
"""

from datetime import datetime, timezone

import pytest
from dependency_injector import providers

from statement_interpreter.config import Settings
from statement_interpreter.container import AppContainer
from statement_interpreter.schemas.statements import FinancialStatements
from tests.fixtures import load_fixture
from tests.fixtures.builders import distressed_company, healthy_company

FIXED_NOW = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture()
def healthy() -> FinancialStatements:
    """Five growing, cash-rich years with buybacks and rising dividends."""
    return healthy_company()


@pytest.fixture()
def distressed() -> FinancialStatements:
    """Three shrinking, loss-making years ending in negative equity."""
    return distressed_company()


@pytest.fixture()
def acme_payload() -> dict:
    """camelCase statements document as an API client would send it."""
    return load_fixture("statements_ACME.json")


@pytest.fixture()
def acme(acme_payload) -> FinancialStatements:
    return FinancialStatements.model_validate(acme_payload)


@pytest.fixture()
def settings() -> Settings:
    return Settings(parallel_analyzers=False)


@pytest.fixture()
def container(settings) -> AppContainer:
    c = AppContainer()
    c.settings.override(providers.Object(settings))
    yield c
    c.settings.reset_override()


@pytest.fixture()
def fixed_now() -> datetime:
    return FIXED_NOW
