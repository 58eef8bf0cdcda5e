############################################################
#
# argon2-kdf - Argon2 Password Hashing and Key Derivation
#
# record.py: Immutable hash record and password verification
#
# Luke Sheneman
# Research Computing and Data Services (RCDS)
# Institute for Interdisciplinary Data Sciences (IIDS)
# University of Idaho
# sheneman@uidaho.edu
#
############################################################

"""Hash records.

A HashRecord is the validated result of one derivation. It is what gets
persisted (via its canonical string) and what later verifies candidate
passwords.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional, Union

from argon2_kdf.core import codec
from argon2_kdf.core.algorithm import DEFAULT_VERSION, Algorithm
from argon2_kdf.core.params import (
    DEFAULT_MEMORY_COST,
    DEFAULT_PARALLELISM,
    DEFAULT_TIME_COST,
    MAX_HASH_LENGTH,
    MAX_PASSWORD_LENGTH,
    MAX_SALT_LENGTH,
    MIN_HASH_LENGTH,
    MIN_SALT_LENGTH,
    CostParameters,
)
from argon2_kdf.core.primitive import derive
from argon2_kdf.errors import ConfigurationError
from argon2_kdf.security.secret import BytesLike, Secret, constant_time_eq, wipe

if TYPE_CHECKING:
    from argon2_kdf.core.hasher import Hasher


def as_password_bytes(password: Union[BytesLike, str]) -> BytesLike:
    """Normalize a password argument. Strings are UTF-8 encoded."""
    if isinstance(password, str):
        password = password.encode("utf-8")
    if not isinstance(password, (bytes, bytearray, memoryview)):
        raise ConfigurationError(f"password must be bytes-like or str, got {type(password).__name__}")
    if len(password) > MAX_PASSWORD_LENGTH:
        raise ConfigurationError(f"password must be at most {MAX_PASSWORD_LENGTH} bytes")
    return password


@dataclass(frozen=True)
class HashRecord:
    """
    Result of an Argon2 derivation.

    Attributes:
        algorithm: Argon2 variant used
        params: Cost parameters and version used
        salt: Salt bytes
        derived_key: Raw derived key bytes
    """

    algorithm: Algorithm
    params: CostParameters
    salt: bytes = field(repr=False)
    derived_key: bytes = field(repr=False)

    def __post_init__(self):
        if not isinstance(self.algorithm, Algorithm):
            object.__setattr__(self, "algorithm", Algorithm.coerce(self.algorithm))
        if not isinstance(self.params, CostParameters):
            raise ConfigurationError("params must be a CostParameters instance")
        for name, minimum, maximum in (
            ("salt", MIN_SALT_LENGTH, MAX_SALT_LENGTH),
            ("derived_key", MIN_HASH_LENGTH, MAX_HASH_LENGTH),
        ):
            value = getattr(self, name)
            if not isinstance(value, (bytes, bytearray, memoryview)):
                raise ConfigurationError(f"{name} must be bytes-like, got {type(value).__name__}")
            # Own an immutable copy
            value = bytes(value)
            if not minimum <= len(value) <= maximum:
                raise ConfigurationError(
                    f"{name} length must be between {minimum} and {maximum} bytes, got {len(value)}"
                )
            object.__setattr__(self, name, value)

    @classmethod
    def from_parts(
        cls,
        derived_key: BytesLike,
        salt: BytesLike,
        algorithm: Union[Algorithm, str] = Algorithm.ARGON2ID,
        memory_cost: int = DEFAULT_MEMORY_COST,
        time_cost: int = DEFAULT_TIME_COST,
        parallelism: int = DEFAULT_PARALLELISM,
        version: int = DEFAULT_VERSION,
    ) -> "HashRecord":
        """Build a record from raw components, e.g. columns stored separately."""
        return cls(
            algorithm=Algorithm.coerce(algorithm),
            params=CostParameters(
                memory_cost=memory_cost,
                time_cost=time_cost,
                parallelism=parallelism,
                version=version,
            ),
            salt=salt,
            derived_key=derived_key,
        )

    @classmethod
    def parse(cls, text: Union[str, bytes]) -> "HashRecord":
        """
        Parse a canonical hash string.

        Raises:
            FormatError: The string is malformed
        """
        return codec.decode(text)

    def to_string(self) -> str:
        """Canonical PHC-style encoding."""
        return codec.encode(self)

    def __str__(self) -> str:
        return self.to_string()

    @property
    def version(self) -> int:
        return self.params.version

    @property
    def memory_cost(self) -> int:
        return self.params.memory_cost

    @property
    def time_cost(self) -> int:
        return self.params.time_cost

    @property
    def parallelism(self) -> int:
        return self.params.parallelism

    @property
    def salt_length(self) -> int:
        return len(self.salt)

    @property
    def hash_length(self) -> int:
        return len(self.derived_key)

    def as_bytes(self) -> bytes:
        """Raw derived key, e.g. for use as an encryption key."""
        return self.derived_key

    def salt_bytes(self) -> bytes:
        return self.salt

    def _matches(self, password: Union[BytesLike, str], secret: Optional[Secret]) -> bool:
        candidate = derive(
            self.algorithm,
            self.params.version,
            self.params.memory_cost,
            self.params.time_cost,
            self.params.parallelism,
            as_password_bytes(password),
            self.salt,
            secret.view() if secret is not None else None,
            len(self.derived_key),
        )
        try:
            return constant_time_eq(candidate, self.derived_key)
        finally:
            wipe(candidate)

    def verify(self, password: Union[BytesLike, str]) -> bool:
        """
        Check a candidate password against this record.

        Returns:
            True if the password derives the stored key

        Raises:
            DerivationError: The key could not be re-derived
        """
        return self._matches(password, None)

    def verify_with_secret(
        self,
        password: Union[BytesLike, str],
        secret: Union[Secret, BytesLike, str],
    ) -> bool:
        """
        Check a candidate password for a record hashed with a secret.

        The secret is consumed: it is wiped when this call returns or raises.
        """
        with Secret.coerce(secret) as held:
            return self._matches(password, held)

    def needs_rehash(self, hasher: Optional["Hasher"] = None) -> bool:
        """
        Check whether this record was produced with different settings.

        Args:
            hasher: Target configuration; defaults to Hasher.from_settings()

        Returns:
            True if the record should be regenerated on next login
        """
        if hasher is None:
            from argon2_kdf.core.hasher import Hasher

            hasher = Hasher.from_settings()
        expected_salt_length = (
            len(hasher.custom_salt) if hasher.custom_salt is not None else hasher.salt_length
        )
        return (
            self.algorithm != hasher.algorithm
            or self.params.version != hasher.version
            or self.params.memory_cost != hasher.memory_cost
            or self.params.time_cost != hasher.time_cost
            or self.params.parallelism != hasher.parallelism
            or len(self.derived_key) != hasher.hash_length
            or len(self.salt) != expected_salt_length
        )
