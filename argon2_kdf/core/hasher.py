############################################################
#
# argon2-kdf - Argon2 Password Hashing and Key Derivation
#
# hasher.py: Hasher configuration builder and hash operation
#
# Luke Sheneman
# Research Computing and Data Services (RCDS)
# Institute for Interdisciplinary Data Sciences (IIDS)
# University of Idaho
# sheneman@uidaho.edu
#
############################################################

"""Hasher builder.

Usage:
    record = (
        Hasher()
        .with_memory_cost(65536)
        .with_time_cost(3)
        .with_secret(Secret(pepper))
        .hash(b"password")
    )
    stored = record.to_string()
"""

import secrets
from dataclasses import dataclass, field, replace
from typing import Optional, Union

from argon2_kdf.core.algorithm import DEFAULT_VERSION, Algorithm
from argon2_kdf.core.params import (
    DEFAULT_HASH_LENGTH,
    DEFAULT_MEMORY_COST,
    DEFAULT_PARALLELISM,
    DEFAULT_SALT_LENGTH,
    DEFAULT_TIME_COST,
    CostParameters,
    check_hash_length,
    check_memory_cost,
    check_parallelism,
    check_salt_length,
    check_time_cost,
    check_version,
)
from argon2_kdf.core.primitive import derive
from argon2_kdf.core.record import HashRecord, as_password_bytes
from argon2_kdf.errors import ConfigurationError, DerivationError
from argon2_kdf.logging_config import get_logger
from argon2_kdf.security.secret import BytesLike, Secret, wipe

logger = get_logger(__name__)


@dataclass(frozen=True)
class Hasher:
    """
    Immutable hashing configuration.

    Each with_* method validates its argument and returns a new Hasher, so
    a configured instance can be shared between threads and reused for any
    number of hash() calls. Auto-generated salts are fresh on every call.
    """

    algorithm: Algorithm = Algorithm.ARGON2ID
    version: int = DEFAULT_VERSION
    memory_cost: int = DEFAULT_MEMORY_COST
    time_cost: int = DEFAULT_TIME_COST
    parallelism: int = DEFAULT_PARALLELISM
    hash_length: int = DEFAULT_HASH_LENGTH
    salt_length: int = DEFAULT_SALT_LENGTH
    custom_salt: Optional[bytes] = field(default=None, repr=False)
    secret: Optional[Secret] = field(default=None, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "algorithm", Algorithm.coerce(self.algorithm))
        check_version(self.version)
        check_memory_cost(self.memory_cost)
        check_time_cost(self.time_cost)
        check_parallelism(self.parallelism)
        check_hash_length(self.hash_length)
        check_salt_length(self.salt_length)
        if self.custom_salt is not None:
            if not isinstance(self.custom_salt, (bytes, bytearray, memoryview)):
                raise ConfigurationError(f"salt must be bytes-like, got {type(self.custom_salt).__name__}")
            check_salt_length(len(self.custom_salt))
            object.__setattr__(self, "custom_salt", bytes(self.custom_salt))
        if self.secret is not None and not isinstance(self.secret, Secret):
            raise ConfigurationError("secret must be a Secret instance")

    @classmethod
    def default(cls) -> "Hasher":
        return cls()

    @classmethod
    def from_settings(cls, settings=None) -> "Hasher":
        """Build a Hasher from ARGON2_KDF_* settings."""
        if settings is None:
            from argon2_kdf.settings import get_settings

            settings = get_settings()
        return (
            cls()
            .with_algorithm(settings.algorithm)
            .with_version(settings.version)
            .with_memory_cost(settings.memory_cost)
            .with_time_cost(settings.time_cost)
            .with_parallelism(settings.parallelism)
            .with_hash_length(settings.hash_length)
            .with_salt_length(settings.salt_length)
        )

    def _replace(self, **changes) -> "Hasher":
        # Derived hashers hold their own copy of the secret
        if self.secret is not None and "secret" not in changes:
            changes["secret"] = self.secret.copy()
        return replace(self, **changes)

    def with_algorithm(self, algorithm: Union[Algorithm, str]) -> "Hasher":
        return self._replace(algorithm=algorithm)

    def with_version(self, version: int) -> "Hasher":
        return self._replace(version=version)

    def with_memory_cost(self, memory_cost: int) -> "Hasher":
        """Memory cost in KiB."""
        return self._replace(memory_cost=memory_cost)

    def with_time_cost(self, time_cost: int) -> "Hasher":
        return self._replace(time_cost=time_cost)

    def with_parallelism(self, parallelism: int) -> "Hasher":
        """Lane count; the primitive runs one thread per lane."""
        return self._replace(parallelism=parallelism)

    def with_hash_length(self, hash_length: int) -> "Hasher":
        return self._replace(hash_length=hash_length)

    def with_salt_length(self, salt_length: int) -> "Hasher":
        """Length of auto-generated salts. Ignored when a custom salt is set."""
        return self._replace(salt_length=salt_length)

    def with_custom_salt(self, salt: BytesLike) -> "Hasher":
        """Use a fixed salt instead of generating one per hash."""
        return self._replace(custom_salt=salt)

    def with_secret(self, secret: Union[Secret, BytesLike, str]) -> "Hasher":
        """
        Mix an application secret (pepper) into every hash.

        The returned Hasher holds the given Secret and wipes it on close()
        or when its with block exits. Hashers derived from it by further
        with_* calls hold their own copy.
        """
        secret = Secret.coerce(secret)
        if secret.wiped:
            raise ConfigurationError("secret has been wiped and can no longer be used")
        return self._replace(secret=secret)

    def cost_parameters(self) -> CostParameters:
        """Validated cost parameters; checks memory against lane count."""
        return CostParameters(
            memory_cost=self.memory_cost,
            time_cost=self.time_cost,
            parallelism=self.parallelism,
            version=self.version,
        )

    def _resolve_salt(self) -> bytes:
        if self.custom_salt is not None:
            return self.custom_salt
        try:
            return secrets.token_bytes(self.salt_length)
        except OSError as e:
            logger.error("salt_generation_failed", error=str(e))
            raise DerivationError(f"random source failed: {e}") from e

    def hash(self, password: Union[BytesLike, str]) -> HashRecord:
        """
        Derive a hash record for a password.

        Args:
            password: Password bytes; str is UTF-8 encoded

        Returns:
            HashRecord holding the parameters, salt and derived key

        Raises:
            ConfigurationError: The combined parameters are out of range
            DerivationError: The primitive or the random source failed
        """
        params = self.cost_parameters()
        password = as_password_bytes(password)
        salt = self._resolve_salt()
        key = derive(
            self.algorithm,
            params.version,
            params.memory_cost,
            params.time_cost,
            params.parallelism,
            password,
            salt,
            self.secret.view() if self.secret is not None else None,
            self.hash_length,
        )
        try:
            record = HashRecord(
                algorithm=self.algorithm,
                params=params,
                salt=salt,
                derived_key=bytes(key),
            )
        finally:
            wipe(key)

        logger.debug(
            "hash_created",
            algorithm=self.algorithm.value,
            version=params.version,
            memory_cost=params.memory_cost,
            time_cost=params.time_cost,
            parallelism=params.parallelism,
            hash_length=self.hash_length,
            peppered=self.secret is not None and len(self.secret) > 0,
        )
        return record

    def close(self) -> None:
        """Wipe the held secret, if any."""
        if self.secret is not None:
            self.secret.wipe()

    def __enter__(self) -> "Hasher":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
