"""
Voucher code and QR token generation.

Uniqueness is not guaranteed here: the store's UNIQUE constraints detect
collisions and the registration service regenerates.
"""

import secrets
import time

# No I, O, 1 or 0 so codes can be read aloud and typed without confusion
VOUCHER_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
VOUCHER_LENGTH = 6

_TOKEN_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"
_TOKEN_SUFFIX_LENGTH = 13


def generate_voucher_code() -> str:
    """Generate a 6-character voucher code using the secrets CSPRNG."""
    return "".join(secrets.choice(VOUCHER_ALPHABET) for _ in range(VOUCHER_LENGTH))


def generate_qr_token() -> str:
    """
    Generate an opaque QR token: QR-<epoch millis>-<random base36 suffix>.

    Only ever used as a lookup key; callers must not parse it.
    """
    millis = time.time_ns() // 1_000_000
    suffix = "".join(secrets.choice(_TOKEN_ALPHABET) for _ in range(_TOKEN_SUFFIX_LENGTH))
    return f"QR-{millis}-{suffix}"
