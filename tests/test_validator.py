import pytest

from payproc.protocol import INVALID_AMOUNT, INVALID_REQUEST, PAYMENT_MARKER, SEPARATOR
from payproc.validator import AmountValidator, ValidationError


def test_valid_request_returns_amount():
    assert AmountValidator().validate(PAYMENT_MARKER + SEPARATOR + "100") == 100


@pytest.mark.parametrize(
    ("request_text", "message"),
    [
        ("invalid_request", INVALID_REQUEST),
        (PAYMENT_MARKER + SEPARATOR + "invalid_amount", INVALID_AMOUNT),
        (PAYMENT_MARKER + SEPARATOR + "0", INVALID_AMOUNT),
        (PAYMENT_MARKER + SEPARATOR, INVALID_AMOUNT),
        (SEPARATOR + "100", INVALID_REQUEST),
    ],
    ids=["invalid_request", "invalid_amount", "zero_amount", "missing_amount", "no_payment_marker"],
)
def test_source_error_cases(request_text, message):
    with pytest.raises(ValidationError) as excinfo:
        AmountValidator().validate(request_text)
    assert str(excinfo.value) == message


@pytest.mark.parametrize(
    "request_text",
    ["INVALID|100", "INVALID", "PAYMENT|1|2", "payment|100", "PAYMENT"],
)
def test_malformed_requests(request_text):
    with pytest.raises(ValidationError, match="^Invalid request$"):
        AmountValidator().validate(request_text)


@pytest.mark.parametrize(
    "amount_text",
    ["-5", " 5", "5 ", "1_000", "1.5", "9223372036854775808", "٣"],
)
def test_unusable_amounts(amount_text):
    with pytest.raises(ValidationError, match="^Invalid amount$"):
        AmountValidator().validate(PAYMENT_MARKER + SEPARATOR + amount_text)


def test_explicit_plus_sign_is_accepted():
    assert AmountValidator().validate("PAYMENT|+5") == 5


def test_largest_int64_is_accepted():
    assert AmountValidator().validate("PAYMENT|9223372036854775807") == 2**63 - 1


def test_validation_error_is_value_error():
    with pytest.raises(ValueError):
        AmountValidator().validate("PAYMENT|")