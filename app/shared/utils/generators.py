"""ID and value generators (CUID, OTP codes)."""

import secrets

from cuid2 import cuid_wrapper

cuid_generator = cuid_wrapper()

OTP_LENGTH = 6


def generate_cuid() -> str:
    """Generate a collision-resistant unique identifier (CUID2).

    Returns:
        A new CUID string.
    """
    result = cuid_generator()
    if not isinstance(result, str):
        raise TypeError(
            f"Expected str from cuid_generator, got {type(result).__name__}"
        )
    return result


def generate_otp(length: int = OTP_LENGTH) -> str:
    """Return a zero-padded numeric one-time code from the OS CSPRNG."""
    return f"{secrets.randbelow(10**length):0{length}d}"
