############################################################
#
# argon2-kdf - Argon2 Password Hashing and Key Derivation
#
# __init__.py: Root package initialization and public exports
#
# Luke Sheneman
# Research Computing and Data Services (RCDS)
# Institute for Interdisciplinary Data Sciences (IIDS)
# University of Idaho
# sheneman@uidaho.edu
#
############################################################

"""argon2-kdf - Argon2 password hashing and key derivation."""

__version__ = "1.0.0"

# security must load before core.hasher (core imports security.secret)
from argon2_kdf.security import Secret, hash_password, needs_rehash, verify_password
from argon2_kdf.core.algorithm import Algorithm
from argon2_kdf.core.hasher import Hasher
from argon2_kdf.core.params import CostParameters
from argon2_kdf.core.record import HashRecord
from argon2_kdf.errors import (
    Argon2KdfError,
    ConfigurationError,
    DerivationError,
    FormatError,
)

__all__ = [
    "__version__",
    "Algorithm",
    "Argon2KdfError",
    "ConfigurationError",
    "CostParameters",
    "DerivationError",
    "FormatError",
    "HashRecord",
    "Hasher",
    "Secret",
    "hash_password",
    "needs_rehash",
    "verify_password",
]
