"""
user_api/utils/validation_utils.py

Purpose: User input validation

- One rule per field (name, email, age, phone)
- Normalization (trim, lower-case, integer cast) before checks
- Collects every failing field, not just the first
- Independent of the store so it can be tested without MongoDB
"""

import re
from typing import Any, Callable, Dict, List, Optional, Tuple

from user_api.core.exceptions import ValidationError
from user_api.models.user import USER_FIELDS

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 50
AGE_MIN = 0
AGE_MAX = 120

# local-part@domain.tld with a 2-3 character final segment. Each repetition
# starts with a separator, so a failing match backtracks linearly.
EMAIL_PATTERN = re.compile(r"^\w+(?:[.-]\w+)*@\w+(?:[.-]\w+)*\.\w{2,3}$", re.ASCII)
EMAIL_MAX_LENGTH = 254

# (normalized value, error message or None)
RuleResult = Tuple[Any, Optional[str]]


def validate_name(value: Any) -> RuleResult:
    """
    Validates a user's name.

    Args:
        value: Raw name from the request

    Returns:
        (trimmed name, error message or None)
    """
    if value is None:
        return None, "Name is required"
    if not isinstance(value, str):
        return value, "Name must be a string"

    name = value.strip()
    if not name:
        return name, "Name is required"
    if len(name) < NAME_MIN_LENGTH:
        return name, "Name must be at least 2 characters long"
    if len(name) > NAME_MAX_LENGTH:
        return name, "Name cannot exceed 50 characters"

    return name, None


def validate_email(value: Any) -> RuleResult:
    """
    Validates and normalizes an email address.

    The address is trimmed and lower-cased before matching, so the
    stored value is always the normalized one.
    """
    if value is None:
        return None, "Email is required"
    if not isinstance(value, str):
        return value, "Email must be a string"

    email = value.strip().lower()
    if not email:
        return email, "Email is required"
    if len(email) > EMAIL_MAX_LENGTH or not EMAIL_PATTERN.match(email):
        return email, "Please enter a valid email"

    return email, None


def validate_age(value: Any) -> RuleResult:
    """
    Validates an optional age.

    Integral floats and numeric strings are cast to int.
    Booleans are rejected even though they are ints in Python.
    """
    if value is None:
        return None, None
    if isinstance(value, bool):
        return value, "Age must be a number"

    age = value
    if isinstance(age, str):
        try:
            age = float(age.strip())
        except ValueError:
            return value, "Age must be a number"

    if isinstance(age, float):
        if not age.is_integer():
            return value, "Age must be a whole number"
        age = int(age)

    if not isinstance(age, int):
        return value, "Age must be a number"
    if age < AGE_MIN:
        return age, "Age cannot be negative"
    if age > AGE_MAX:
        return age, "Age seems unrealistic"

    return age, None


def validate_phone(value: Any) -> RuleResult:
    """Phone is free-form text, only trimmed."""
    if value is None:
        return None, None
    if not isinstance(value, str):
        return value, "Phone must be a string"
    return value.strip(), None


FIELD_RULES: Dict[str, Callable[[Any], RuleResult]] = {
    "name": validate_name,
    "email": validate_email,
    "age": validate_age,
    "phone": validate_phone,
}

REQUIRED_FIELDS = ("name", "email")


def format_validation_errors(errors: List[Dict[str, str]]) -> str:
    """
    Formats field errors into a single readable line.

    Example:
        "User validation failed: name: Name is required, age: Age seems unrealistic"
    """
    parts = [f"{err['field']}: {err['message']}" for err in errors]
    return "User validation failed: " + ", ".join(parts)


def validate_user_payload(payload: Dict[str, Any], partial: bool = False) -> Dict[str, Any]:
    """
    Validates a candidate user record and returns the normalized fields.

    Args:
        payload: Decoded JSON object from the request
        partial: True for updates; only supplied fields are checked

    Returns:
        Dict of normalized field values. On update a value of None means
        the optional field should be cleared. Unknown keys are dropped.

    Raises:
        ValidationError: If any field fails, with every failure in `details`
    """
    normalized: Dict[str, Any] = {}
    errors: List[Dict[str, str]] = []

    for field in USER_FIELDS:
        if field not in payload and (partial or field not in REQUIRED_FIELDS):
            continue

        value, message = FIELD_RULES[field](payload.get(field))
        if message:
            errors.append({"field": field, "message": message})
            continue

        if value is None and not partial:
            # Optional field sent as null on create: same as absent
            continue
        normalized[field] = value

    if errors:
        raise ValidationError(format_validation_errors(errors), details=errors)

    return normalized
