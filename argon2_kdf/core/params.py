############################################################
#
# argon2-kdf - Argon2 Password Hashing and Key Derivation
#
# params.py: Cost parameters and the primitive's accepted domain
#
# Luke Sheneman
# Research Computing and Data Services (RCDS)
# Institute for Interdisciplinary Data Sciences (IIDS)
# University of Idaho
# sheneman@uidaho.edu
#
############################################################

"""Cost parameters and bounds checks.

The bounds mirror the limits compiled into the reference Argon2
implementation (argon2.h). Values outside them are rejected, never clamped.
"""

from dataclasses import dataclass

from argon2_kdf.core.algorithm import DEFAULT_VERSION, SUPPORTED_VERSIONS
from argon2_kdf.errors import ConfigurationError

UINT32_MAX = 0xFFFFFFFF

SYNC_POINTS = 4
MIN_LANES = 1
MAX_LANES = 0xFFFFFF
MIN_MEMORY_COST = 2 * SYNC_POINTS  # KiB, also >= 8 KiB per lane
MAX_MEMORY_COST = UINT32_MAX
MIN_TIME_COST = 1
MAX_TIME_COST = UINT32_MAX
MIN_HASH_LENGTH = 4
MAX_HASH_LENGTH = UINT32_MAX
MIN_SALT_LENGTH = 8
MAX_SALT_LENGTH = UINT32_MAX
MAX_PASSWORD_LENGTH = UINT32_MAX
MAX_SECRET_LENGTH = UINT32_MAX

DEFAULT_MEMORY_COST = 19456
DEFAULT_TIME_COST = 2
DEFAULT_PARALLELISM = 1
DEFAULT_HASH_LENGTH = 32
DEFAULT_SALT_LENGTH = 16


def _check_int(name: str, value, minimum: int, maximum: int) -> int:
    # bool is an int subclass; True as a lane count is a caller bug
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{name} must be an integer, got {type(value).__name__}")
    if value < minimum or value > maximum:
        raise ConfigurationError(f"{name} must be between {minimum} and {maximum}, got {value}")
    return value


def check_memory_cost(value: int) -> int:
    return _check_int("memory_cost", value, MIN_MEMORY_COST, MAX_MEMORY_COST)


def check_time_cost(value: int) -> int:
    return _check_int("time_cost", value, MIN_TIME_COST, MAX_TIME_COST)


def check_parallelism(value: int) -> int:
    return _check_int("parallelism", value, MIN_LANES, MAX_LANES)


def check_hash_length(value: int) -> int:
    return _check_int("hash_length", value, MIN_HASH_LENGTH, MAX_HASH_LENGTH)


def check_salt_length(value: int) -> int:
    return _check_int("salt_length", value, MIN_SALT_LENGTH, MAX_SALT_LENGTH)


def check_version(value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value not in SUPPORTED_VERSIONS:
        raise ConfigurationError(
            f"version must be one of {', '.join(str(v) for v in SUPPORTED_VERSIONS)}, got {value!r}"
        )
    return value


@dataclass(frozen=True)
class CostParameters:
    """
    Tunable cost of one Argon2 derivation.

    Attributes:
        memory_cost: Memory in KiB, at least 8 KiB per lane
        time_cost: Number of passes over memory
        parallelism: Number of lanes (and threads)
        version: Primitive wire-format revision (16 or 19)
    """

    memory_cost: int = DEFAULT_MEMORY_COST
    time_cost: int = DEFAULT_TIME_COST
    parallelism: int = DEFAULT_PARALLELISM
    version: int = DEFAULT_VERSION

    def __post_init__(self):
        check_memory_cost(self.memory_cost)
        check_time_cost(self.time_cost)
        check_parallelism(self.parallelism)
        check_version(self.version)
        if self.memory_cost < MIN_MEMORY_COST * self.parallelism:
            raise ConfigurationError(
                f"memory_cost must be at least {MIN_MEMORY_COST} KiB per lane "
                f"({MIN_MEMORY_COST * self.parallelism} for parallelism={self.parallelism}), "
                f"got {self.memory_cost}"
            )
