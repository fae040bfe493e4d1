"""Dependency providers for FastAPI.

The container is built once per process; tests reset ``_container`` to force
a rebuild with overridden settings.
"""

from functools import lru_cache
from typing import Optional

from dependency_injector import providers

from statement_interpreter.config import Settings
from statement_interpreter.container import AppContainer
from statement_interpreter.facade import InterpreterFacade

_container: Optional[AppContainer] = None


@lru_cache
def get_settings() -> Settings:
    return Settings()


def get_container() -> AppContainer:
    global _container
    if _container is None:
        _container = AppContainer()
        _container.settings.override(providers.Object(get_settings()))
    return _container


def get_facade() -> InterpreterFacade:
    return InterpreterFacade(container=get_container())
