############################################################
#
# argon2-kdf - Argon2 Password Hashing and Key Derivation
#
# errors.py: Exception taxonomy for hashing, parsing and derivation
#
# Luke Sheneman
# Research Computing and Data Services (RCDS)
# Institute for Interdisciplinary Data Sciences (IIDS)
# University of Idaho
# sheneman@uidaho.edu
#
############################################################

"""Exceptions raised by argon2-kdf."""

from typing import Optional


class Argon2KdfError(Exception):
    """Base class for all argon2-kdf errors."""


class ConfigurationError(Argon2KdfError, ValueError):
    """A hashing parameter lies outside the domain the primitive accepts."""


class FormatError(Argon2KdfError, ValueError):
    """
    A canonical hash string could not be decoded.

    Attributes:
        field: Name of the field that failed (e.g. "algorithm", "salt")
        reason: Human readable description of the failure
    """

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"invalid {field}: {reason}")


class DerivationError(Argon2KdfError):
    """
    The key derivation could not be performed.

    Raised when the Argon2 primitive reports a failure (for example an
    allocation failure for the requested memory cost) or when the random
    source fails while generating a salt.

    Attributes:
        code: Error code reported by the primitive, if any
    """

    def __init__(self, message: str, code: Optional[int] = None):
        self.code = code
        super().__init__(message)
