"""Verification code generation."""

from __future__ import annotations

import secrets
from typing import Optional

CODE_MIN = 1000
CODE_MAX = 9999


def generate_verification_code() -> int:
    """Return a uniformly distributed four digit code drawn from the OS CSPRNG."""
    return CODE_MIN + secrets.randbelow(CODE_MAX - CODE_MIN + 1)


def regenerate_verification_code(previous: Optional[int]) -> int:
    """Return a fresh code that never repeats ``previous``."""
    code = generate_verification_code()
    while code == previous:
        code = generate_verification_code()
    return code


def is_valid_code(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and CODE_MIN <= value <= CODE_MAX
