"""Fixtures shared by every unit test."""

import os

import pytest

from infrastructure.settings import (
    get_database_settings,
    get_keycloak_settings,
    get_settings,
    get_tenancy_settings,
)


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    """Drop cached settings and any GOCOMMERCE_* variables from the host.

    Settings getters are lru_cached, so a value loaded by one test would
    otherwise leak into the next.
    """
    for name in list(os.environ):
        if name.startswith("GOCOMMERCE_"):
            monkeypatch.delenv(name)

    getters = (
        get_settings,
        get_database_settings,
        get_tenancy_settings,
        get_keycloak_settings,
    )
    for getter in getters:
        getter.cache_clear()
    yield
    for getter in getters:
        getter.cache_clear()
