import time

import pytest

from user_api.core.exceptions import ValidationError
from user_api.utils.validation_utils import (
    format_validation_errors,
    validate_age,
    validate_email,
    validate_name,
    validate_phone,
    validate_user_payload,
)


@pytest.mark.parametrize("name,ok", [
    ("J", False),
    ("Jo", True),
    ("x" * 50, True),
    ("x" * 51, False),
    ("  Jo  ", True),
    ("   ", False),
])
def test_name_length_bounds(name, ok):
    _, error = validate_name(name)
    assert (error is None) == ok


def test_name_is_trimmed():
    assert validate_name("  Jane Doe ") == ("Jane Doe", None)


def test_name_must_be_string():
    assert validate_name(42)[1] == "Name must be a string"


@pytest.mark.parametrize("email", [
    "jane@example.com",
    "jane.doe@mail.example.org",
    "jane-doe@example.co.uk",
    "j_d@sub-domain.io",
])
def test_valid_emails(email):
    assert validate_email(email) == (email, None)


@pytest.mark.parametrize("email", [
    "plainaddress",
    "@example.com",
    "jane@",
    "jane@example",
    "jane@example.c",
    "jane@example.info",
    "jane doe@example.com",
])
def test_invalid_emails(email):
    assert validate_email(email)[1] == "Please enter a valid email"


@pytest.mark.parametrize("email", [
    "a" * 40 + "!",
    "a" * 40 + "@bb!",
    "a." * 20 + "@" + "b-" * 20 + "!",
])
def test_email_rejects_pathological_input_quickly(email):
    start = time.perf_counter()
    assert validate_email(email)[1] == "Please enter a valid email"
    assert time.perf_counter() - start < 0.1


def test_email_length_is_capped():
    local = "a" * 64
    domain = "b" * 190 + ".com"
    assert validate_email(f"{local}@{domain}")[1] == "Please enter a valid email"
    assert validate_email(f"{local}@example.com")[1] is None


def test_email_is_trimmed_and_lowercased():
    assert validate_email("  JANE@Example.COM ") == ("jane@example.com", None)


def test_email_required():
    assert validate_email(None)[1] == "Email is required"
    assert validate_email("   ")[1] == "Email is required"


@pytest.mark.parametrize("age,expected", [
    (0, (0, None)),
    (120, (120, None)),
    (-1, (-1, "Age cannot be negative")),
    (121, (121, "Age seems unrealistic")),
    ("42", (42, None)),
    (30.0, (30, None)),
    (None, (None, None)),
])
def test_age_rules(age, expected):
    assert validate_age(age) == expected


@pytest.mark.parametrize("age", ["abc", True, [1], {"n": 1}])
def test_age_must_be_a_number(age):
    assert validate_age(age)[1] == "Age must be a number"


def test_age_must_be_whole():
    assert validate_age(30.5)[1] == "Age must be a whole number"


def test_phone_is_trimmed_without_format_check():
    assert validate_phone("  +1 (555) 0100 ext. 7 ") == ("+1 (555) 0100 ext. 7", None)
    assert validate_phone(5550100)[1] == "Phone must be a string"


def test_create_payload_normalized():
    result = validate_user_payload({
        "name": " Jane ",
        "email": " JANE@EXAMPLE.COM",
        "age": "28",
        "phone": None,
        "extra": "dropped",
    })
    assert result == {"name": "Jane", "email": "jane@example.com", "age": 28}


def test_create_payload_collects_all_errors():
    with pytest.raises(ValidationError) as exc_info:
        validate_user_payload({"name": "J", "age": 200, "phone": 1})

    err = exc_info.value
    assert err.status_code == 400
    assert [d["field"] for d in err.details] == ["name", "email", "age", "phone"]
    assert err.error == format_validation_errors(err.details)


def test_partial_payload_checks_only_supplied_fields():
    assert validate_user_payload({"age": 30}, partial=True) == {"age": 30}
    assert validate_user_payload({}, partial=True) == {}


def test_partial_payload_null_clears_optional_fields():
    assert validate_user_payload({"age": None, "phone": None}, partial=True) == {"age": None, "phone": None}


def test_partial_payload_rejects_clearing_required_fields():
    with pytest.raises(ValidationError) as exc_info:
        validate_user_payload({"name": None, "email": ""}, partial=True)
    assert exc_info.value.details == [
        {"field": "name", "message": "Name is required"},
        {"field": "email", "message": "Email is required"},
    ]


def test_format_validation_errors():
    errors = [
        {"field": "name", "message": "Name is required"},
        {"field": "age", "message": "Age seems unrealistic"},
    ]
    assert format_validation_errors(errors) == (
        "User validation failed: name: Name is required, age: Age seems unrealistic"
    )
