"""
Pytest configuration.

Swaps in a fast password hasher and empties the cache around every test,
since account ids are reused once a test transaction rolls back.
"""
import pytest
from django.core.cache import cache


@pytest.fixture(scope="session", autouse=True)
def fast_password_hasher():
    # Session-scoped so it is active before setUpTestData hashes fixture passwords.
    from django.test import override_settings

    with override_settings(PASSWORD_HASHERS=["django.contrib.auth.hashers.MD5PasswordHasher"]):
        yield


@pytest.fixture(autouse=True)
def empty_cache():
    cache.clear()
    yield
    cache.clear()
