############################################################
#
# argon2-kdf - Argon2 Password Hashing and Key Derivation
#
# password_hash.py: String-based password hashing helpers
#
# Luke Sheneman
# Research Computing and Data Services (RCDS)
# Institute for Interdisciplinary Data Sciences (IIDS)
# University of Idaho
# sheneman@uidaho.edu
#
############################################################

"""Password hashing helpers for applications that store PHC strings."""

from functools import lru_cache
from typing import Optional, Union

from argon2_kdf.core.hasher import Hasher
from argon2_kdf.core.record import HashRecord
from argon2_kdf.errors import FormatError
from argon2_kdf.logging_config import get_logger
from argon2_kdf.security.secret import BytesLike, Secret

logger = get_logger(__name__)

SecretLike = Union[Secret, BytesLike, str]


@lru_cache(maxsize=1)
def get_hasher() -> Hasher:
    """Get the hasher configured from settings."""
    return Hasher.from_settings()


def hash_password(password: str, secret: Optional[SecretLike] = None) -> str:
    """
    Hash a password using the configured Argon2 variant.

    Args:
        password: The plaintext password
        secret: Optional pepper, wiped after use

    Returns:
        PHC hash string (includes algorithm, parameters and salt)
    """
    if secret is None:
        return get_hasher().hash(password).to_string()
    with get_hasher().with_secret(secret) as hasher:
        return hasher.hash(password).to_string()


def verify_password(
    password: str,
    password_hash: str,
    secret: Optional[SecretLike] = None,
) -> bool:
    """
    Verify a password against a stored hash.

    Args:
        password: The plaintext password to verify
        password_hash: The stored PHC hash string
        secret: Pepper used when the hash was created, wiped after use

    Returns:
        True if the password matches. A malformed stored hash is logged
        and treated as a mismatch.
    """
    try:
        record = HashRecord.parse(password_hash)
    except FormatError as e:
        logger.warning("invalid_password_hash", field=e.field, reason=e.reason)
        if secret is not None:
            Secret.coerce(secret).wipe()
        return False
    if secret is None:
        return record.verify(password)
    return record.verify_with_secret(password, secret)


def needs_rehash(password_hash: str) -> bool:
    """
    Check if a password hash needs to be rehashed.

    This is useful when upgrading hash parameters.

    Args:
        password_hash: The stored hash

    Returns:
        True if the hash should be regenerated

    Raises:
        FormatError: The stored hash is malformed
    """
    return HashRecord.parse(password_hash).needs_rehash(get_hasher())
