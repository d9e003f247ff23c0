"""Shared fixtures for provider and dispatcher tests."""
from __future__ import annotations

import pytest

from config import BackendPreference, Settings
from dispatch import Dispatcher
from fallback import FallbackProvider
from provider import Provider


@pytest.fixture(scope="session")
def fallback() -> FallbackProvider:
    return FallbackProvider()


@pytest.fixture(scope="session")
def native() -> Provider:
    pytest.importorskip("gmpy2")
    from native import NativeProvider

    return NativeProvider()


@pytest.fixture(scope="session", params=["native", "fallback"])
def provider(request) -> Provider:
    """Every test using this fixture runs once per backend."""
    return request.getfixturevalue(request.param)


@pytest.fixture
def fallback_dispatcher() -> Dispatcher:
    return Dispatcher(Settings(backend=BackendPreference.FALLBACK))


@pytest.fixture
def native_dispatcher() -> Dispatcher:
    pytest.importorskip("gmpy2")
    return Dispatcher(Settings(backend=BackendPreference.NATIVE))
