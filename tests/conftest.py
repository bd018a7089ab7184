"""Shared pytest fixtures for reactivity tests."""

import pytest

from reactivity import _anchor, set_proxy_cache


@pytest.fixture(autouse=True)
def reset_dependency_store():
    """Start every test with an empty dependency store and no wrapper cache."""
    _anchor.reset()
    set_proxy_cache(False)
    yield
    set_proxy_cache(False)
