############################################################
#
# argon2-kdf - Argon2 Password Hashing and Key Derivation
#
# primitive.py: Boundary to the Argon2 C implementation
#
# Luke Sheneman
# Research Computing and Data Services (RCDS)
# Institute for Interdisciplinary Data Sciences (IIDS)
# University of Idaho
# sheneman@uidaho.edu
#
############################################################

"""Raw Argon2 derivation through argon2-cffi.

argon2-cffi's high level helpers do not expose Argon2's secret input, so the
derivation fills an ``argon2_context`` and calls ``argon2.low_level.core``.
Password, secret and output are copied into C buffers that are zeroed
before this module returns, whether the call succeeded or not.
"""

from typing import List, Optional

from argon2.low_level import core, error_to_str, ffi, lib

from argon2_kdf.core.algorithm import Algorithm
from argon2_kdf.errors import DerivationError
from argon2_kdf.logging_config import get_logger
from argon2_kdf.security.secret import BytesLike

logger = get_logger(__name__)


def _alloc(size: int, owned: List) -> object:
    """Allocate a zeroed C byte buffer that derive() will wipe."""
    try:
        buf = ffi.new("uint8_t[]", size)
    except MemoryError as e:
        logger.error("allocation_failed", size=size)
        raise DerivationError(f"could not allocate {size} bytes") from e
    owned.append((buf, size))
    return buf


def _to_c(data: Optional[BytesLike], owned: List) -> object:
    """Copy data into a fresh C buffer, or NULL when empty."""
    if not data:
        return ffi.NULL
    size = len(data)
    buf = _alloc(size, owned)
    ffi.memmove(buf, data, size)
    return buf


def derive(
    algorithm: Algorithm,
    version: int,
    memory_cost: int,
    time_cost: int,
    parallelism: int,
    password: BytesLike,
    salt: BytesLike,
    secret: Optional[BytesLike],
    hash_length: int,
) -> bytearray:
    """
    Run Argon2 and return the raw derived key.

    Parameters are expected to be validated already; the primitive checks
    them again and any rejection is reported as a DerivationError.

    Returns:
        A mutable buffer of hash_length bytes the caller may wipe

    Raises:
        DerivationError: The primitive returned a non-OK status or memory
            could not be allocated
    """
    owned: List = []
    try:
        out = _alloc(hash_length, owned)
        c_password = _to_c(password, owned)
        c_salt = _to_c(salt, owned)
        c_secret = _to_c(secret, owned)
        ctx = ffi.new(
            "argon2_context *",
            dict(
                version=version,
                out=out,
                outlen=hash_length,
                pwd=c_password,
                pwdlen=len(password),
                salt=c_salt,
                saltlen=len(salt),
                secret=c_secret,
                secretlen=len(secret) if secret else 0,
                ad=ffi.NULL,
                adlen=0,
                t_cost=time_cost,
                m_cost=memory_cost,
                lanes=parallelism,
                threads=parallelism,
                allocate_cbk=ffi.NULL,
                free_cbk=ffi.NULL,
                flags=lib.ARGON2_DEFAULT_FLAGS,
            ),
        )
        rv = core(ctx, algorithm.argon2_type.value)
        if rv != lib.ARGON2_OK:
            message = error_to_str(rv)
            logger.warning(
                "derivation_failed",
                code=rv,
                reason=message,
                algorithm=algorithm.value,
                memory_cost=memory_cost,
                time_cost=time_cost,
                parallelism=parallelism,
            )
            raise DerivationError(f"Argon2 derivation failed: {message}", code=rv)
        return bytearray(ffi.buffer(out, hash_length))
    finally:
        for buf, size in owned:
            ffi.memmove(buf, bytes(size), size)
