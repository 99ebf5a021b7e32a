"""
Global test configuration and fixtures for cookieseal

This module provides shared fixtures: passwords, session options, cookie
stores and request/response doubles.
"""

import pytest

from cookieseal.core.schemas.session import SessionOptions
from tests.utils.helpers import MemoryCookieStore, make_request, make_response

PASSWORD_A = "a" * 16 + "Zq3-Lm9_Pw7xYt2V"
PASSWORD_B = "b" * 16 + "Kd8_Rn4-Hs6uJc1W"


# ============================================================================
# Password Fixtures
# ============================================================================

@pytest.fixture
def password():
    """A valid 32 character password"""
    return PASSWORD_A


@pytest.fixture
def rotated_passwords():
    """Rotation map where id 2 is current"""
    return {1: PASSWORD_A, 2: PASSWORD_B}


# ============================================================================
# Session Fixtures
# ============================================================================

@pytest.fixture
def session_options(password):
    """Session options with a one hour ttl"""
    return SessionOptions(cookie_name="sid", password=password, ttl=3600)


@pytest.fixture
def cookie_store():
    """Empty in-memory cookie store"""
    return MemoryCookieStore()


@pytest.fixture
def request_without_cookie():
    return make_request()


@pytest.fixture
def response():
    return make_response()
