from datetime import date

import pytest

from bloodcamp.constants import bilingual
from bloodcamp.forms.registration_forms import (
    format_date_input,
    validate_last_donation_date,
    validate_registration_form,
)

from helpers import valid_form

TODAY = date(2024, 6, 15)


def test_valid_form_has_no_errors():
    errors, cleaned = validate_registration_form(valid_form(), TODAY)

    assert errors == []
    assert cleaned["full_name"] == "राम कुमार"
    assert cleaned["last_donation_date"] is None


def test_missing_field_reports_required_only():
    errors, _ = validate_registration_form(valid_form(address="  ", mobile="123"), TODAY)

    assert errors == [bilingual("required")]


@pytest.mark.parametrize("email", ["ram", "ram@example", "ram @example.com"])
def test_invalid_email(email):
    errors, _ = validate_registration_form(valid_form(email=email), TODAY)

    assert errors == [bilingual("invalid_email")]


@pytest.mark.parametrize("mobile", ["5123456789", "987654321", "98765432100", "98765abcde"])
def test_invalid_mobile(mobile):
    errors, _ = validate_registration_form(valid_form(mobile=mobile), TODAY)

    assert errors == [bilingual("invalid_mobile")]


def test_unknown_prefix_and_blood_group():
    errors, _ = validate_registration_form(
        valid_form(relation_prefix="Dr.", blood_group="C+"), TODAY
    )

    assert errors == [bilingual("invalid_prefix"), bilingual("invalid_blood_group")]


def test_last_donation_date_is_parsed():
    errors, cleaned = validate_registration_form(
        valid_form(last_donation_date="12/05/2024"), TODAY
    )

    assert errors == []
    assert cleaned["last_donation_date"] == date(2024, 5, 12)


def test_last_donation_date_digits_are_formatted():
    errors, cleaned = validate_registration_form(
        valid_form(last_donation_date="12052024"), TODAY
    )

    assert errors == []
    assert cleaned["last_donation_date_input"] == "12/05/2024"


@pytest.mark.parametrize("value", ["31/02/2024", "16/06/2024", "1/5/2024"])
def test_bad_last_donation_date(value):
    errors, cleaned = validate_registration_form(
        valid_form(last_donation_date=value), TODAY
    )

    assert errors == [bilingual("invalid_date")]
    assert cleaned["last_donation_date"] is None


def test_last_donation_today_is_allowed():
    assert validate_last_donation_date("15/06/2024", TODAY) == TODAY


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("", ""),
        ("1", "1"),
        ("12", "12/"),
        ("1205", "12/05"),
        ("12052024", "12/05/2024"),
        ("12/052024", "12/05/2024"),
        ("12-05-2024", "12/05/2024"),
        ("120520241234", "12/05/2024"),
    ],
)
def test_format_date_input(raw, expected):
    assert format_date_input(raw) == expected
