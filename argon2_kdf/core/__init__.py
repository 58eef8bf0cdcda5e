############################################################
#
# argon2-kdf - Argon2 Password Hashing and Key Derivation
#
# __init__.py: Hashing core package
#
# Luke Sheneman
# Research Computing and Data Services (RCDS)
# Institute for Interdisciplinary Data Sciences (IIDS)
# University of Idaho
# sheneman@uidaho.edu
#
############################################################

"""Hashing core: parameters, codec, records and the hasher builder."""
