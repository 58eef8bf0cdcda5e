############################################################
#
# argon2-kdf - Argon2 Password Hashing and Key Derivation
#
# test_primitive.py: Unit tests for the Argon2 boundary
#
# Luke Sheneman
# Research Computing and Data Services (RCDS)
# Institute for Interdisciplinary Data Sciences (IIDS)
# University of Idaho
# sheneman@uidaho.edu
#
############################################################

"""Unit tests for derive()."""

from unittest.mock import patch

import pytest
from argon2.low_level import Type, ffi, hash_secret_raw

from argon2_kdf.core.algorithm import Algorithm
from argon2_kdf.core.primitive import derive
from argon2_kdf.errors import DerivationError


class _TrackingFFI:
    """Proxy that records every byte array allocated through ffi.new."""

    def __init__(self, real):
        self._real = real
        self.arrays = []

    def new(self, ctype, *args):
        obj = self._real.new(ctype, *args)
        if ctype == "uint8_t[]":
            self.arrays.append(obj)
        return obj

    def __getattr__(self, name):
        return getattr(self._real, name)


class _FailingFFI(_TrackingFFI):
    """Proxy that raises MemoryError for one byte array size."""

    def __init__(self, real, fail_size):
        super().__init__(real)
        self.fail_size = fail_size

    def new(self, ctype, *args):
        if ctype == "uint8_t[]" and args and args[0] == self.fail_size:
            raise MemoryError
        return super().new(ctype, *args)


def _derive(password=b"password", salt=b"somesalt", secret=None, algorithm=Algorithm.ARGON2ID, length=32):
    return derive(algorithm, 19, 64, 1, 1, password, salt, secret, length)


class TestDerive:
    """Tests for the raw derivation call."""

    def test_matches_argon2_cffi(self):
        """Test agreement with argon2-cffi."""
        expected = hash_secret_raw(
            b"password", b"somesalt", time_cost=1, memory_cost=64, parallelism=1, hash_len=32, type=Type.ID
        )
        assert bytes(_derive()) == expected

    def test_returns_mutable_buffer(self):
        """Test that the key is returned as a bytearray."""
        key = _derive(length=16)
        assert isinstance(key, bytearray)
        assert len(key) == 16

    def test_deterministic(self):
        """Test repeatable output."""
        assert _derive() == _derive()

    def test_secret_changes_output(self):
        """Test that the secret changes the output."""
        assert _derive() != _derive(secret=b"pepper")
        assert _derive(secret=b"pepper") == _derive(secret=memoryview(b"pepper"))

    def test_empty_password(self):
        """Test deriving from an empty password."""
        assert len(_derive(password=b"")) == 32

    def test_algorithm_types(self):
        """Test each variant."""
        outputs = {bytes(_derive(algorithm=a)) for a in Algorithm}
        assert len(outputs) == 3

    def test_primitive_rejection_reported(self):
        """Test that primitive rejections become DerivationError."""
        # Salt shorter than the primitive minimum
        with pytest.raises(DerivationError) as exc:
            _derive(salt=b"short")
        assert exc.value.code is not None
        assert exc.value.code < 0

    def test_failure_code_and_message(self):
        """Test the error code and message."""
        with patch("argon2_kdf.core.primitive.core", return_value=-22):
            with pytest.raises(DerivationError, match="Argon2 derivation failed") as exc:
                _derive()
        assert exc.value.code == -22

    def test_buffers_zeroed_after_call(self):
        """Test that C buffers are zeroed on success."""
        tracking = _TrackingFFI(ffi)
        with patch("argon2_kdf.core.primitive.ffi", tracking):
            _derive(secret=b"pepper")

        # output, password, salt and secret buffers
        assert len(tracking.arrays) == 4
        for buf in tracking.arrays:
            assert all(b == 0 for b in buf)

    def test_buffers_zeroed_on_failure(self):
        """Test that C buffers are zeroed on failure."""
        tracking = _TrackingFFI(ffi)
        with patch("argon2_kdf.core.primitive.ffi", tracking):
            with patch("argon2_kdf.core.primitive.core", return_value=-22):
                with pytest.raises(DerivationError):
                    _derive(secret=b"pepper")

        assert len(tracking.arrays) == 4
        for buf in tracking.arrays:
            assert all(b == 0 for b in buf)

    def test_allocation_failure_reported(self):
        """Test that a failed allocation becomes DerivationError."""
        failing = _FailingFFI(ffi, fail_size=4096)
        with patch("argon2_kdf.core.primitive.ffi", failing):
            with pytest.raises(DerivationError, match="could not allocate"):
                _derive(secret=b"p" * 4096)

        # output, password and salt were allocated before the failure
        assert len(failing.arrays) == 3
        for buf in failing.arrays:
            assert all(b == 0 for b in buf)

    def test_oversized_output_reported(self):
        """Test an output length the allocator cannot satisfy."""
        failing = _FailingFFI(ffi, fail_size=2**32 - 1)
        with patch("argon2_kdf.core.primitive.ffi", failing):
            with pytest.raises(DerivationError):
                _derive(length=2**32 - 1)
        assert failing.arrays == []
