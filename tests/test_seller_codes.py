import hashlib
import re

import pytest

from app.services.seller_codes import (
    SELLER_CODE_ALPHABET,
    generate_seller_code,
    hash_seller_code,
    is_valid_seller_code,
)


def test_alphabet_excludes_lookalikes() -> None:
    assert len(SELLER_CODE_ALPHABET) == 32
    assert len(set(SELLER_CODE_ALPHABET)) == 32
    for ch in "0O1I":
        assert ch not in SELLER_CODE_ALPHABET


def test_generated_codes_have_the_expected_shape() -> None:
    shape = re.compile(r"^SK-(?:[A-Z2-9]{5}-){3}[A-Z2-9]{5}$")
    for _ in range(200):
        code = generate_seller_code()
        assert shape.match(code), code
        groups = code.split("-")[1:]
        assert len(groups) == 4
        assert all(ch in SELLER_CODE_ALPHABET for group in groups for ch in group)
        assert is_valid_seller_code(code)


def test_generated_codes_do_not_repeat() -> None:
    codes = {generate_seller_code() for _ in range(500)}
    assert len(codes) == 500


@pytest.mark.parametrize(
    "value",
    [
        "not-a-code",
        "",
        None,
        42,
        "SK-ABCDE-FGHJK-LMNPQ",
        "SK-ABCDE-FGHJK-LMNPQ-RSTUV-WXYZ2",
        "sk-abcde-fghjk-lmnpq-rstuv",
        "SK-ABCDE-FGHJK-LMNPQ-RSTU0",
        "SK-ABCDE-FGHJK-LMNPQ-RSTUO",
        "SK-ABCDE-FGHJK-LMNPQ-RSTU1",
        "SK-ABCDE-FGHJK-LMNPQ-RSTUI",
        " SK-ABCDE-FGHJK-LMNPQ-RSTUV",
        "SK-ABCDE-FGHJK-LMNPQ-RSTUV\n",
        "XK-ABCDE-FGHJK-LMNPQ-RSTUV",
    ],
)
def test_validator_rejects_malformed_codes(value) -> None:
    assert is_valid_seller_code(value) is False


def test_validator_accepts_well_formed_code() -> None:
    assert is_valid_seller_code("SK-ABCDE-FGHJK-LMNPQ-RSTUV")
    assert is_valid_seller_code("SK-22222-ZZZZZ-98765-WXYZA")


def test_hash_is_hex_sha256_of_plaintext() -> None:
    code = "SK-ABCDE-FGHJK-LMNPQ-RSTUV"
    digest = hash_seller_code(code)
    assert digest == hashlib.sha256(code.encode("utf-8")).hexdigest()
    assert len(digest) == 64
    assert hash_seller_code(code) == digest
    assert hash_seller_code("SK-ABCDE-FGHJK-LMNPQ-RSTUW") != digest
