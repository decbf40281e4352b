import base64
from concurrent.futures import ThreadPoolExecutor

import pytest

from provider.domain.tokens import (
    ONE_HOUR_MS,
    MalformedTokenError,
    TokenError,
    TokenGenerator,
    TokenValidator,
    decode_timestamp,
    encode_timestamp,
    is_valid_credential,
)

from conftest import T0, FixedClock

T0_CREDENTIAL = "Bearer AAAA6NSlEAA="


def test_generator_encodes_clock_as_big_endian_base64():
    assert TokenGenerator(FixedClock(T0)).generate() == T0_CREDENTIAL


def test_generator_reads_clock_on_every_call():
    clock = FixedClock(T0)
    gen = TokenGenerator(clock)
    first = gen.generate()
    clock.advance(1)
    second = gen.generate()
    assert first != second
    assert decode_timestamp(second[len("Bearer "):]) == T0 + 1


@pytest.mark.parametrize("ts", [0, 1, -1, T0, 2**63 - 1, -(2**63)])
def test_decode_reverses_encode(ts):
    token = encode_timestamp(ts)
    assert len(base64.b64decode(token)) == 8
    assert decode_timestamp(token) == ts


def test_encode_rejects_values_outside_int64():
    with pytest.raises(OverflowError):
        encode_timestamp(2**63)


@pytest.mark.parametrize("age", [0, 1, 1000, ONE_HOUR_MS - 1, ONE_HOUR_MS])
def test_fresh_tokens_are_accepted(age):
    validator = TokenValidator(FixedClock(T0 + age))
    assert validator.validate(T0_CREDENTIAL) is True


@pytest.mark.parametrize("age", [ONE_HOUR_MS + 1, 2 * ONE_HOUR_MS, 10**9])
def test_stale_tokens_are_rejected(age):
    validator = TokenValidator(FixedClock(T0 + age))
    assert validator.validate(T0_CREDENTIAL) is False


def test_scenario_accepts_after_one_second_and_rejects_after_window():
    credential = TokenGenerator(FixedClock(T0)).generate()
    assert TokenValidator(FixedClock(T0 + 1000)).validate(credential) is True
    assert TokenValidator(FixedClock(T0 + 3_600_001)).validate(credential) is False


def test_future_dated_token_is_accepted():
    # Negative age passes the plain `age <= window` comparison.
    validator = TokenValidator(FixedClock(T0 - 5 * ONE_HOUR_MS))
    assert validator.validate(T0_CREDENTIAL) is True


def test_custom_window():
    validator = TokenValidator(FixedClock(T0 + 2000), window_ms=1000)
    assert validator.validate(T0_CREDENTIAL) is False
    assert is_valid_credential(T0_CREDENTIAL, T0 + 1000, window_ms=1000) is True


@pytest.mark.parametrize(
    "header",
    [
        None,
        "",
        "Bearer",
        "Bearer ",
        "bearer AAAA6NSlEAA=",
        "Basic AAAA6NSlEAA=",
        " Bearer AAAA6NSlEAA=",
        "AAAA6NSlEAA=",
        "Bearer  AAAA6NSlEAA=",
        "Bearer !!!!not-base64!!!!",
        "Bearer AAAA6NSlEAA",
        "Bearer AAAA",
        "Bearer " + base64.b64encode(bytes(7)).decode(),
        "Bearer " + base64.b64encode(bytes(9)).decode(),
        "Bearer ÄÖÜ",
    ],
)
def test_malformed_credentials_are_rejected_without_raising(header):
    assert TokenValidator(FixedClock(T0)).validate(header) is False


def test_decode_raises_malformed_token_error():
    with pytest.raises(MalformedTokenError) as exc:
        decode_timestamp("AAAA")
    assert exc.value.code == "malformed_token"
    assert isinstance(exc.value, TokenError)
    assert isinstance(exc.value, ValueError)


def test_default_clocks_agree():
    assert TokenValidator().validate(TokenGenerator().generate()) is True


def test_concurrent_validation_matches_sequential():
    now = T0 + ONE_HOUR_MS
    validator = TokenValidator(FixedClock(now))
    # Ages straddle the window boundary on both sides.
    credentials = [
        "Bearer " + encode_timestamp(now - age)
        for age in range(ONE_HOUR_MS - 500, ONE_HOUR_MS + 500, 5)
    ]
    sequential = [validator.validate(c) for c in credentials]
    with ThreadPoolExecutor(max_workers=8) as pool:
        concurrent = list(pool.map(validator.validate, credentials))
    assert concurrent == sequential
    assert True in sequential and False in sequential
