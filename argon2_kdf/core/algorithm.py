############################################################
#
# argon2-kdf - Argon2 Password Hashing and Key Derivation
#
# algorithm.py: Argon2 variants and primitive version constants
#
# Luke Sheneman
# Research Computing and Data Services (RCDS)
# Institute for Interdisciplinary Data Sciences (IIDS)
# University of Idaho
# sheneman@uidaho.edu
#
############################################################

"""Argon2 algorithm variants."""

from enum import Enum
from typing import Union

from argon2.low_level import ARGON2_VERSION, Type

from argon2_kdf.errors import ConfigurationError

VERSION_10 = 0x10
VERSION_13 = 0x13
SUPPORTED_VERSIONS = (VERSION_10, VERSION_13)
DEFAULT_VERSION = ARGON2_VERSION


class Algorithm(str, Enum):
    """Argon2 variants. Values are the PHC string tags."""
    ARGON2D = "argon2d"
    ARGON2I = "argon2i"
    ARGON2ID = "argon2id"

    @property
    def argon2_type(self) -> Type:
        """The argon2-cffi type used when calling the primitive."""
        return _TYPES[self]

    @classmethod
    def coerce(cls, value: Union["Algorithm", str]) -> "Algorithm":
        """Accept an Algorithm or its tag (case-insensitive)."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise ConfigurationError(f"unsupported algorithm: {value!r}")


_TYPES = {
    Algorithm.ARGON2D: Type.D,
    Algorithm.ARGON2I: Type.I,
    Algorithm.ARGON2ID: Type.ID,
}
