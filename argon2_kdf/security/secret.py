############################################################
#
# argon2-kdf - Argon2 Password Hashing and Key Derivation
#
# secret.py: Pepper holder with wipe-on-release semantics
#
# Luke Sheneman
# Research Computing and Data Services (RCDS)
# Institute for Interdisciplinary Data Sciences (IIDS)
# University of Idaho
# sheneman@uidaho.edu
#
############################################################

"""Sensitive buffer handling.

A Secret keeps the pepper in a mutable bytearray so it can be zeroed in
place. Python may still hold transient copies elsewhere (the caller's own
bytes object, for example); wiping covers every buffer this package owns.
"""

import hmac
from typing import Union

from argon2_kdf.core.params import MAX_SECRET_LENGTH
from argon2_kdf.errors import ConfigurationError

BytesLike = Union[bytes, bytearray, memoryview]


def wipe(buffer: bytearray) -> None:
    """Overwrite a bytearray with zeros in place."""
    buffer[:] = bytes(len(buffer))


def constant_time_eq(a: BytesLike, b: BytesLike) -> bool:
    """
    Compare two byte sequences without an early exit on mismatch.

    Every byte pair is examined when the lengths are equal; differing
    lengths compare unequal.
    """
    return hmac.compare_digest(a, b)


class Secret:
    """
    Application-held secret (pepper) mixed into the derivation.

    Usage:
        with Secret(b"pepper") as secret:
            record = Hasher().with_secret(secret).hash(b"password")
        # secret bytes are zeroed here
    """

    __slots__ = ("_buffer", "_wiped")

    def __init__(self, data: Union[BytesLike, str]):
        if isinstance(data, str):
            data = data.encode("utf-8")
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise ConfigurationError(f"secret must be bytes-like, got {type(data).__name__}")
        if len(data) > MAX_SECRET_LENGTH:
            raise ConfigurationError(f"secret must be at most {MAX_SECRET_LENGTH} bytes")
        self._buffer = bytearray(data)
        self._wiped = False

    @classmethod
    def coerce(cls, value: Union["Secret", BytesLike, str]) -> "Secret":
        """Return value itself if it is a Secret, otherwise wrap it."""
        if isinstance(value, cls):
            return value
        return cls(value)

    def view(self) -> memoryview:
        """Read-only view of the secret bytes. Fails once wiped."""
        if self._wiped:
            raise ConfigurationError("secret has been wiped and can no longer be used")
        return memoryview(self._buffer).toreadonly()

    def copy(self) -> "Secret":
        """Independent Secret with the same bytes. Fails once wiped."""
        return Secret(self.view())

    def wipe(self) -> None:
        """Zero the secret. Idempotent."""
        wipe(self._buffer)
        self._wiped = True

    @property
    def wiped(self) -> bool:
        return self._wiped

    def __len__(self) -> int:
        return len(self._buffer)

    def __enter__(self) -> "Secret":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.wipe()

    def __del__(self):
        # Partially constructed instances have no buffer
        buffer = getattr(self, "_buffer", None)
        if buffer is not None:
            wipe(buffer)

    def __repr__(self) -> str:
        return "Secret(<redacted>)"

    __str__ = __repr__

    def __reduce__(self):
        raise TypeError("Secret objects cannot be pickled")
