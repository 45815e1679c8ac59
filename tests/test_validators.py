import pytest

from mcaid.shared.validators import is_e164, validate_email, validate_phone


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("+254712345678", "+254712345678"),
        ("+254 712 345 678", "+254712345678"),
        ("+1 (555) 123-4567", "+15551234567"),
    ],
)
def test_validate_phone_normalizes_to_e164(raw, expected):
    assert validate_phone(raw) == expected


@pytest.mark.parametrize("raw", ["0712345678", "+0712345678", "+12", "+1234567890123456"])
def test_validate_phone_rejects_invalid(raw):
    with pytest.raises(ValueError):
        validate_phone(raw)


def test_validate_phone_passes_empty_through():
    assert validate_phone(None) is None
    assert validate_phone("") == ""


def test_is_e164():
    assert is_e164("+254712345678")
    assert not is_e164("254712345678")
    assert not is_e164("")
    assert not is_e164(None)


def test_validate_email():
    assert validate_email("  Amina@Example.COM ") == "amina@example.com"
    with pytest.raises(ValueError):
        validate_email("not-an-email")
