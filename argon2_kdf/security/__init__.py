############################################################
#
# argon2-kdf - Argon2 Password Hashing and Key Derivation
#
# __init__.py: Security utilities package exports
#
# Luke Sheneman
# Research Computing and Data Services (RCDS)
# Institute for Interdisciplinary Data Sciences (IIDS)
# University of Idaho
# sheneman@uidaho.edu
#
############################################################

"""Sensitive buffer handling and password helpers."""

from argon2_kdf.security.secret import Secret, constant_time_eq, wipe
from argon2_kdf.security.password_hash import hash_password, needs_rehash, verify_password

__all__ = [
    "Secret",
    "constant_time_eq",
    "wipe",
    "hash_password",
    "needs_rehash",
    "verify_password",
]
