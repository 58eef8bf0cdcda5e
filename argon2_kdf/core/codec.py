############################################################
#
# argon2-kdf - Argon2 Password Hashing and Key Derivation
#
# codec.py: PHC string lexer and encoder for hash records
#
# Luke Sheneman
# Research Computing and Data Services (RCDS)
# Institute for Interdisciplinary Data Sciences (IIDS)
# University of Idaho
# sheneman@uidaho.edu
#
############################################################

"""Canonical string format for hash records.

Format:
    $<algorithm>$v=<version>$m=<memory_cost>,t=<time_cost>,p=<parallelism>$<salt>$<hash>

Salt and hash are standard-alphabet base64 without padding. Decoding treats
its input as untrusted: every failure is reported as a FormatError naming
the field, and no record is built until all fields have validated.
"""

import base64
import re
from typing import Callable, Tuple, Union

from argon2_kdf.core.algorithm import Algorithm
from argon2_kdf.core.params import (
    MAX_HASH_LENGTH,
    MAX_SALT_LENGTH,
    MIN_HASH_LENGTH,
    MIN_SALT_LENGTH,
    CostParameters,
    check_memory_cost,
    check_parallelism,
    check_time_cost,
    check_version,
)
from argon2_kdf.errors import ConfigurationError, FormatError

DELIMITER = "$"
FIELD_COUNT = 6  # leading empty token + five fields
PARAM_KEYS = ("m", "t", "p")

_DIGITS_RE = re.compile(r"[0-9]+")
_B64_RE = re.compile(r"[A-Za-z0-9+/]*")
# 2**32 - 1 has ten digits
_MAX_SIGNIFICANT_DIGITS = 10


def b64_encode(data: bytes) -> str:
    """Standard base64 without '=' padding."""
    return base64.b64encode(data).decode("ascii").rstrip("=")


def b64_decode(text: str, field: str) -> bytes:
    """
    Strictly decode unpadded standard base64.

    Rejects characters outside the standard alphabet, any padding,
    impossible lengths and non-zero trailing bits, so that re-encoding the
    result reproduces the input exactly.
    """
    if not _B64_RE.fullmatch(text):
        raise FormatError(field, "contains characters outside the base64 alphabet")
    if len(text) % 4 == 1:
        raise FormatError(field, "has an impossible base64 length")
    raw = base64.b64decode(text + "=" * (-len(text) % 4), validate=True)
    if b64_encode(raw) != text:
        raise FormatError(field, "is not canonical base64")
    return raw


def _parse_decimal(token: str, prefix: str, field: str) -> int:
    if not token.startswith(prefix):
        raise FormatError(field, f"expected '{prefix}' prefix")
    digits = token[len(prefix):]
    if not _DIGITS_RE.fullmatch(digits):
        raise FormatError(field, "expected a decimal integer")
    if len(digits.lstrip("0")) > _MAX_SIGNIFICANT_DIGITS:
        raise FormatError(field, "value out of range")
    return int(digits)


def _checked(field: str, check: Callable[[int], int], value: int) -> int:
    try:
        return check(value)
    except ConfigurationError as e:
        raise FormatError(field, str(e)) from None


def _check_length(field: str, data: bytes, minimum: int, maximum: int) -> bytes:
    if not minimum <= len(data) <= maximum:
        raise FormatError(field, f"length must be between {minimum} and {maximum} bytes, got {len(data)}")
    return data


def lex(text: Union[str, bytes]) -> Tuple[Algorithm, CostParameters, bytes, bytes]:
    """
    Tokenize and validate a canonical hash string.

    Returns:
        Tuple of (algorithm, cost parameters, salt, derived key)

    Raises:
        FormatError: Any field is missing, extra, malformed or out of range
    """
    if isinstance(text, (bytes, bytearray)):
        try:
            text = bytes(text).decode("ascii")
        except UnicodeDecodeError:
            raise FormatError("structure", "hash string must be ASCII") from None
    if not isinstance(text, str):
        raise FormatError("structure", f"expected a string, got {type(text).__name__}")

    tokens = text.split(DELIMITER)
    if len(tokens) != FIELD_COUNT or tokens[0] != "":
        raise FormatError(
            "structure",
            f"expected {FIELD_COUNT - 1} '{DELIMITER}'-prefixed fields, got {len(tokens) - 1}",
        )
    _, alg_token, version_token, params_token, salt_token, hash_token = tokens

    try:
        algorithm = Algorithm(alg_token)
    except ValueError:
        raise FormatError("algorithm", f"unrecognized algorithm tag {alg_token[:32]!r}") from None

    version = _checked("version", check_version, _parse_decimal(version_token, "v=", "version"))

    parts = params_token.split(",")
    if len(parts) != len(PARAM_KEYS):
        raise FormatError("params", f"expected m=,t=,p= but got {len(parts)} entries")
    memory_cost, time_cost, parallelism = (
        _parse_decimal(part, f"{key}=", "params") for key, part in zip(PARAM_KEYS, parts)
    )
    memory_cost = _checked("memory_cost", check_memory_cost, memory_cost)
    time_cost = _checked("time_cost", check_time_cost, time_cost)
    parallelism = _checked("parallelism", check_parallelism, parallelism)
    try:
        params = CostParameters(
            memory_cost=memory_cost,
            time_cost=time_cost,
            parallelism=parallelism,
            version=version,
        )
    except ConfigurationError as e:
        raise FormatError("memory_cost", str(e)) from None

    salt = _check_length("salt", b64_decode(salt_token, "salt"), MIN_SALT_LENGTH, MAX_SALT_LENGTH)
    derived_key = _check_length("hash", b64_decode(hash_token, "hash"), MIN_HASH_LENGTH, MAX_HASH_LENGTH)

    return algorithm, params, salt, derived_key


def decode(text: Union[str, bytes]):
    """Parse a canonical hash string into a HashRecord."""
    from argon2_kdf.core.record import HashRecord

    algorithm, params, salt, derived_key = lex(text)
    return HashRecord(algorithm=algorithm, params=params, salt=salt, derived_key=derived_key)


def encode(record) -> str:
    """Render a HashRecord in the canonical string format."""
    params = record.params
    return DELIMITER.join(
        [
            "",
            record.algorithm.value,
            f"v={params.version}",
            f"m={params.memory_cost},t={params.time_cost},p={params.parallelism}",
            b64_encode(record.salt),
            b64_encode(record.derived_key),
        ]
    )
