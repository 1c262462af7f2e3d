"""Tests for verification code generation."""

from __future__ import annotations

from unittest import mock

from auth_api.utils import codes


def test_generated_codes_stay_in_range():
    for _ in range(2000):
        assert 1000 <= codes.generate_verification_code() <= 9999


def test_range_bounds_are_reachable():
    with mock.patch.object(codes.secrets, "randbelow", return_value=0):
        assert codes.generate_verification_code() == 1000
    with mock.patch.object(codes.secrets, "randbelow", return_value=8999):
        assert codes.generate_verification_code() == 9999


def test_regenerate_never_repeats_previous():
    with mock.patch.object(codes.secrets, "randbelow", side_effect=[234, 234, 235]):
        assert codes.regenerate_verification_code(1234) == 1235


def test_is_valid_code():
    assert codes.is_valid_code(1000)
    assert codes.is_valid_code(9999)
    assert not codes.is_valid_code(999)
    assert not codes.is_valid_code(10000)
    assert not codes.is_valid_code("1234")
    assert not codes.is_valid_code(True)
