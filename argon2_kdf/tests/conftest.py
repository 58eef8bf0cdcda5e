############################################################
#
# argon2-kdf - Argon2 Password Hashing and Key Derivation
#
# conftest.py: Pytest configuration and shared test fixtures
#
# Luke Sheneman
# Research Computing and Data Services (RCDS)
# Institute for Interdisciplinary Data Sciences (IIDS)
# University of Idaho
# sheneman@uidaho.edu
#
############################################################

"""Pytest configuration and shared fixtures for argon2-kdf tests."""

import pytest

from argon2_kdf.core.algorithm import Algorithm
from argon2_kdf.core.hasher import Hasher
from argon2_kdf.core.params import CostParameters
from argon2_kdf.core.record import HashRecord
from argon2_kdf.security.password_hash import get_hasher
from argon2_kdf.settings import get_settings


@pytest.fixture(autouse=True)
def clear_cached_config():
    """Drop cached settings and hasher so env changes take effect."""
    get_settings.cache_clear()
    get_hasher.cache_clear()
    yield
    get_settings.cache_clear()
    get_hasher.cache_clear()


@pytest.fixture
def fast_hasher():
    """Cheap hasher for tests that do not care about cost."""
    return Hasher().with_memory_cost(64).with_time_cost(1).with_parallelism(1)


@pytest.fixture
def sample_salt():
    return b"somesalt"


@pytest.fixture
def sample_record():
    """Record with fixed contents, not derived from any password."""
    return HashRecord(
        algorithm=Algorithm.ARGON2ID,
        params=CostParameters(memory_cost=19456, time_cost=2, parallelism=1, version=19),
        salt=b"somesalt",
        derived_key=b"derivedkeybytes",
    )


@pytest.fixture
def sample_hash_string():
    """Canonical encoding of sample_record."""
    return "$argon2id$v=19$m=19456,t=2,p=1$c29tZXNhbHQ$ZGVyaXZlZGtleWJ5dGVz"


@pytest.fixture
def reference_vector():
    """
    Output of the reference argon2 CLI:

        echo -n "password" | ./argon2 somesalt -t 2 -m 16 -p 4 -l 24
    """
    return {
        "password": b"password",
        "salt": b"somesalt",
        "encoded": "$argon2i$v=19$m=65536,t=2,p=4$c29tZXNhbHQ$RdescudvJCsgt3ub+b+dWRWJTmaaJObG",
        "hex": "45d7ac72e76f242b20b77b9bf9bf9d5915894e669a24e6c6",
    }
