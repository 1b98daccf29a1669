"""Seller code format: generation, validation and hashing.

A seller code looks like ``SK-ABCDE-FGHJK-LMNPQ-RSTUV``: four groups of five
symbols from a 32-letter alphabet without the look-alikes 0/O and 1/I, so a
code read aloud or copied by hand still validates. 20 symbols x 5 bits gives
100 bits of entropy.
"""

import hashlib
import re
import secrets

SELLER_CODE_PREFIX = "SK"
SELLER_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
SELLER_CODE_GROUPS = 4
SELLER_CODE_GROUP_LENGTH = 5

SELLER_CODE_PATTERN = re.compile(
    r"^SK-[A-HJ-NP-Z2-9]{5}(-[A-HJ-NP-Z2-9]{5}){3}$"
)


def generate_seller_code() -> str:
    """Return a fresh seller code drawn from a cryptographic random source."""
    groups = [
        "".join(secrets.choice(SELLER_CODE_ALPHABET) for _ in range(SELLER_CODE_GROUP_LENGTH))
        for _ in range(SELLER_CODE_GROUPS)
    ]
    return "-".join([SELLER_CODE_PREFIX, *groups])


def is_valid_seller_code(value) -> bool:
    if not isinstance(value, str):
        return False
    return SELLER_CODE_PATTERN.fullmatch(value) is not None


def hash_seller_code(plaintext: str) -> str:
    """Hex SHA-256 of the plaintext, used as the exact-match lookup key."""
    return hashlib.sha256(plaintext.encode("utf-8")).hexdigest()
